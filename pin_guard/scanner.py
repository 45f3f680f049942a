"""
Scan orchestrator: walks every discovered file and folds the results into one verdict.

Exit codes:
  0 — every reference pinned, or dry-run
  1 — unpinned references found
  2 — error (unreadable file, invalid YAML, ...)
"""

import logging
import time
from typing import Any, Callable, Iterable, Optional

from pin_guard.config import Config
from pin_guard.parser import discover_files, filter_excluded, load_document
from pin_guard.reporter.base import Reporter
from pin_guard.rules.engine import UNPINNED_FAILURE_MESSAGE
from pin_guard.rules.walker import scan_document

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


class ScanError(Exception):
    """Base class for errors raised by a scan."""


class UnpinnedActionError(ScanError):
    """Raised when enforcing and at least one reference is unpinned."""

    def __init__(self, message: str = UNPINNED_FAILURE_MESSAGE):
        super().__init__(message)


def run_scan(
    files: Iterable[str],
    allowlist: Optional[list[str]],
    dry_run: bool,
    reporter: Reporter,
    load: Callable[[str], Any] = load_document,
) -> bool:
    """
    Scan files one at a time, in order.

    A file is only read once the previous one has been fully checked. Load
    errors propagate and abort the scan.

    Returns:
        True if any file holds an unpinned reference.
    """
    has_error = False
    count = 0
    t0 = time.monotonic()
    for path in files:
        count += 1
        document = load(path)
        if scan_document(document, path, allowlist, dry_run, reporter):
            has_error = True
    total_ms = (time.monotonic() - t0) * 1000
    logger.info("Scanned %d file(s) in %.1fms, unpinned=%s", count, total_ms, has_error)
    return has_error


def enforce(has_error: bool, dry_run: bool) -> None:
    """Fail the run on unpinned references unless in dry-run mode."""
    if has_error and not dry_run:
        raise UnpinnedActionError()
    if has_error:
        logger.info("Dry run: unpinned references reported as warnings only")


def scan_repository(config: Config, reporter: Reporter, root: str = ".") -> int:
    """
    Discover, scan and enforce for one repository checkout.

    Every failure is reported once through the reporter and mapped to an exit
    code; nothing propagates.
    """
    try:
        files: Iterable[str] = discover_files(
            root,
            workflows_path=config.workflows_path,
            actions_path=config.actions_path,
            action_files_only=config.action_files_only,
        )
        if config.exclude:
            files = filter_excluded(files, config.exclude)

        has_error = run_scan(files, config.allowlist, config.dry_run, reporter)
        enforce(has_error, config.dry_run)
    except UnpinnedActionError as e:
        reporter.error(str(e))
        return EXIT_FINDINGS
    except Exception as e:
        logger.debug("Scan aborted", exc_info=True)
        reporter.error(str(e) or type(e).__name__)
        return EXIT_ERROR

    return EXIT_OK

"""
Finding aggregator: turns classifier answers plus policy into one verdict per reference.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pin_guard.rules.reference import (
    has_version_qualifier,
    is_immutable_pin,
    matches_allowlist,
    parse_reference,
)

logger = logging.getLogger(__name__)

RULE_ID = "unpinned-action"

UNPINNED_FAILURE_MESSAGE = "At least one workflow contains an unpinned GitHub Action version."


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Evaluation:
    """Outcome of checking a single reference."""
    is_violation: bool
    severity: Severity = Severity.INFO
    message: Optional[str] = None   # None when there is nothing to report


@dataclass
class Finding:
    """A single unpinned reference, kept for machine-readable reports."""
    rule_id: str          # always "unpinned-action"
    severity: Severity
    message: str
    uses: str             # the offending reference
    file_path: str
    job_id: str           # job id, or "runs" for composite actions, "" for flat step lists
    step_index: Optional[int] = None   # None when the job itself `uses` the reference
    line_number: Optional[int] = None


def unpinned_message(uses: str) -> str:
    return f"{uses} is not pinned to a full length commit SHA."


def evaluate(uses: Any, allowlist: Optional[list[str]], dry_run: bool) -> Evaluation:
    """
    Decide whether `uses` violates the pinning policy.

    Checks run in order and stop at the first that clears the reference:
      1. no "@" qualifier   -> not checked
      2. full SHA / digest  -> compliant
      3. allow-list prefix  -> exempt, with an informational note
    Anything left is a violation, reported as a warning in dry-run mode and as
    an error otherwise. The violation flag itself ignores dry-run.
    """
    if not has_version_qualifier(uses):
        logger.debug("No version qualifier, skipping: %r", uses)
        return Evaluation(is_violation=False)

    if is_immutable_pin(uses):
        logger.debug("Pinned: %s", uses)
        return Evaluation(is_violation=False)

    if matches_allowlist(uses, allowlist):
        name = parse_reference(uses).name
        return Evaluation(
            is_violation=False,
            severity=Severity.INFO,
            message=f"{name} matched allowlist — ignoring action.",
        )

    return Evaluation(
        is_violation=True,
        severity=Severity.WARNING if dry_run else Severity.ERROR,
        message=unpinned_message(uses),
    )

"""
Document walker: finds every `uses` reference in one parsed file.

Three top-level shapes are recognised, by key presence only:

    jobs:           workflow, a mapping of job id -> job
    runs:           composite action, a single run block
    steps / [...]   a bare step list

A job or run block either `uses` a reference directly or lists `steps`,
each of which may `uses` one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from pin_guard.parser import LINE_KEY
from pin_guard.reporter.base import Reporter
from pin_guard.rules.engine import RULE_ID, Finding, evaluate

logger = logging.getLogger(__name__)

RUNS_ID = "runs"


@dataclass
class JobCollection:
    jobs: dict[str, Any]

    def entries(self) -> Iterator[tuple[str, Any]]:
        for job_id, job in self.jobs.items():
            if job_id == LINE_KEY:
                continue
            yield str(job_id), job


@dataclass
class RunCollection:
    runs: dict[str, Any]

    def entries(self) -> Iterator[tuple[str, Any]]:
        yield RUNS_ID, self.runs


@dataclass
class FlatStepList:
    steps: list[Any]


DocumentShape = Union[JobCollection, RunCollection, FlatStepList]


def detect_shape(document: Any) -> Optional[DocumentShape]:
    """Pick the shape of a parsed document, or None if it has nothing to walk."""
    if isinstance(document, list):
        return FlatStepList(document)
    if not isinstance(document, dict):
        return None
    if isinstance(document.get("jobs"), dict):
        return JobCollection(document["jobs"])
    if isinstance(document.get("runs"), dict):
        return RunCollection(document["runs"])
    if isinstance(document.get("steps"), list):
        return FlatStepList(document["steps"])
    return None


@dataclass
class _FileScan:
    """Per-file state shared by the helpers below."""
    path: str
    allowlist: Optional[list[str]]
    dry_run: bool
    reporter: Reporter

    def check(self, uses: Any, job_id: str, step_index: Optional[int], line: Optional[int]) -> bool:
        evaluation = evaluate(uses, self.allowlist, self.dry_run)
        if evaluation.is_violation:
            self.reporter.record(Finding(
                rule_id=RULE_ID,
                severity=evaluation.severity,
                message=evaluation.message,
                uses=uses,
                file_path=self.path,
                job_id=job_id,
                step_index=step_index,
                line_number=line,
            ))
            self.reporter.log(evaluation.severity, evaluation.message, file=self.path, line=line)
        elif evaluation.message:
            self.reporter.log(evaluation.severity, evaluation.message)
        return evaluation.is_violation

    def check_steps(self, steps: list[Any], job_id: str, owner: str) -> bool:
        has_error = False
        for index, step in enumerate(steps):
            if not isinstance(step, dict) or "uses" not in step:
                line = step.get(LINE_KEY) if isinstance(step, dict) else None
                self.reporter.warning(
                    f"The steps[{index}] entry of {owner} does not contain uses.",
                    file=self.path, line=line,
                )
                continue
            # No early exit: every step is checked.
            if self.check(step["uses"], job_id, index, step.get(LINE_KEY)):
                has_error = True
        return has_error

    def check_entry(self, entry_id: str, definition: Any, owner: str) -> bool:
        if not isinstance(definition, dict):
            definition = {}
        line = definition.get(LINE_KEY)

        if "uses" in definition:
            return self.check(definition["uses"], entry_id, None, line)
        if isinstance(definition.get("steps"), list):
            return self.check_steps(definition["steps"], entry_id, owner)

        self.reporter.warning(
            f"{owner[:1].upper()}{owner[1:]} does not contain uses or steps.",
            file=self.path, line=line,
        )
        return False


def _owner(shape: DocumentShape, entry_id: str, path: str) -> str:
    if isinstance(shape, RunCollection):
        return f'the "{entry_id}" block of the "{path}" action'
    if isinstance(shape, FlatStepList):
        return f'the "{path}" step list'
    return f'the "{entry_id}" job of the "{path}" workflow'


def scan_document(
    document: Any,
    path: str,
    allowlist: Optional[list[str]],
    dry_run: bool,
    reporter: Reporter,
) -> bool:
    """
    Check every reference in one parsed document.

    Args:
        document: The parsed YAML (dict, list or scalar).
        path: File path used in messages and annotations.
        allowlist: Name prefixes exempt from pinning.
        dry_run: Report violations as warnings instead of errors.
        reporter: Sink for the file's log group and findings.

    Returns:
        True if at least one reference in the file is unpinned.
    """
    scan = _FileScan(path, allowlist, dry_run, reporter)
    file_has_error = False

    reporter.start_group(path)
    try:
        shape = detect_shape(document)
        logger.debug("Shape of %s: %s", path, type(shape).__name__ if shape else None)

        if shape is None:
            reporter.error(
                f'The "{path}" file does not contain any jobs, runs or steps to iterate.',
                file=path,
            )
            return False

        if isinstance(shape, FlatStepList):
            file_has_error = scan.check_steps(shape.steps, "", _owner(shape, "", path))
        else:
            for entry_id, definition in shape.entries():
                if scan.check_entry(entry_id, definition, _owner(shape, entry_id, path)):
                    file_has_error = True

        if not file_has_error:
            reporter.info("No issues were found.")
        return file_has_error
    finally:
        reporter.end_group()

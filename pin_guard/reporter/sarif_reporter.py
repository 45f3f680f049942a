"""
SARIF reporter: outputs findings in SARIF 2.1.0 format for GitHub Code Scanning.

SARIF (Static Analysis Results Interchange Format) is a JSON standard that
GitHub's Code Scanning feature understands. Upload the output to GitHub and
unpinned references appear as annotations on the offending `uses` lines.

Reference: https://docs.github.com/en/code-security/code-scanning/integrating-with-code-scanning/sarif-support-for-code-scanning
"""

import json
import logging
from typing import Any, Optional

from pin_guard import __version__
from pin_guard.reporter.base import Reporter
from pin_guard.rules.engine import RULE_ID, UNPINNED_FAILURE_MESSAGE, Finding, Severity

logger = logging.getLogger(__name__)

_SARIF_LEVEL: dict[Severity, str] = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}

TOOL_NAME = "pin-guard"
SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"
SARIF_VERSION = "2.1.0"

_RULE: dict[str, Any] = {
    "id": RULE_ID,
    "name": "UnpinnedAction",
    "shortDescription": {"text": "Action reference is not pinned to a full length commit SHA"},
    "fullDescription": {
        "text": (
            "Actions and container images referenced by tag or branch can be "
            "silently replaced upstream. Pin them to a 40 character commit SHA "
            "or a sha256 image digest."
        ),
    },
    "properties": {
        "security-severity": "7.0",
        "tags": ["security", "supply-chain", "github-actions"],
    },
}


def _build_logical_locations(f: Finding) -> list[dict[str, str]]:
    """Build logical location entries (job / step) for a finding."""
    locations = []
    if f.job_id:
        locations.append({"name": f.job_id, "kind": "job"})
    if f.step_index is not None:
        locations.append({"name": f"steps[{f.step_index}]", "kind": "step"})
    return locations


def _build_result(f: Finding) -> dict[str, Any]:
    """Build a single SARIF result object from a Finding."""
    location: dict[str, Any] = {
        "physicalLocation": {
            "artifactLocation": {
                "uri": f.file_path,
                "uriBaseId": "%SRCROOT%",
            },
            "region": {"startLine": f.line_number or 1},
        },
    }
    logical = _build_logical_locations(f)
    if logical:
        location["logicalLocations"] = logical

    return {
        "ruleId": f.rule_id,
        "level": _SARIF_LEVEL[f.severity],
        "message": {"text": f.message},
        "locations": [location],
    }


def report_sarif(findings: list[Finding], errors: Optional[list[str]] = None) -> str:
    """
    Format findings as a SARIF 2.1.0 JSON string.

    Args:
        findings: List of Finding objects to report.
        errors: Messages of errors that were not findings (structural or
            unexpected failures); recorded as tool execution notifications.

    Returns:
        A SARIF 2.1.0 JSON string.
    """
    run: dict[str, Any] = {
        "tool": {
            "driver": {
                "name": TOOL_NAME,
                "version": __version__,
                "rules": [_RULE],
            }
        },
        "results": [_build_result(f) for f in findings],
    }
    if errors:
        run["invocations"] = [{
            "executionSuccessful": False,
            "toolExecutionNotifications": [
                {"level": "error", "message": {"text": msg}} for msg in errors
            ],
        }]

    sarif: dict[str, Any] = {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [run],
    }

    output = json.dumps(sarif, indent=2)
    logger.info("SARIF report: %d finding(s), %d bytes", len(findings), len(output))
    return output


class SarifReporter(Reporter):
    """Buffers findings and renders a SARIF log on close()."""

    def __init__(self) -> None:
        super().__init__()
        self.errors: list[str] = []

    def _emit(self, severity: Severity, message: str, file: Optional[str], line: Optional[int]) -> None:
        # Unpinned references arrive through record() and the run-level failure
        # only restates them; only other errors are kept here.
        if severity is not Severity.ERROR or message == UNPINNED_FAILURE_MESSAGE:
            return
        if not any(f.message == message for f in self.findings):
            self.errors.append(message)

    def close(self) -> Optional[str]:
        return report_sarif(self.findings, self.errors)

"""
JSON reporter: outputs findings as structured JSON for programmatic use.
"""

import json
import logging
from typing import Any, Optional

from pin_guard.reporter.base import Reporter
from pin_guard.rules.engine import Finding, Severity

logger = logging.getLogger(__name__)


def finding_to_dict(f: Finding) -> dict[str, Any]:
    return {
        "rule_id": f.rule_id,
        "severity": f.severity.value,
        "message": f.message,
        "uses": f.uses,
        "file_path": f.file_path,
        "job_id": f.job_id,
        "step_index": f.step_index,
        "line_number": f.line_number,
    }


def report_json(findings: list[Finding], events: Optional[list[dict[str, Any]]] = None) -> str:
    """
    Format findings (and optionally every logged event) as a JSON string.

    Args:
        findings: List of Finding objects to report.
        events: Messages logged during the scan, in order.

    Returns:
        A JSON string with all findings.
    """
    data: dict[str, Any] = {
        "total": len(findings),
        "findings": [finding_to_dict(f) for f in findings],
    }
    if events is not None:
        data["events"] = events
    output = json.dumps(data, indent=2)
    logger.info("JSON report: %d finding(s), %d bytes", len(findings), len(output))
    return output


class JsonReporter(Reporter):
    """Buffers everything and renders one JSON document on close()."""

    def __init__(self) -> None:
        super().__init__()
        self.events: list[dict[str, Any]] = []

    def _emit(self, severity: Severity, message: str, file: Optional[str], line: Optional[int]) -> None:
        self.events.append({
            "level": severity.value,
            "message": message,
            "group": self.current_group,
            "file": file,
            "line": line,
        })

    def close(self) -> Optional[str]:
        return report_json(self.findings, self.events)

"""
Reporter interface shared by every output format.

The walker and scanner never print. They call a Reporter that is passed in
explicitly, so tests can swap in a recording one.
"""

from typing import Optional

from pin_guard.rules.engine import Finding, Severity


class Reporter:
    """Sink for per-file groups, messages and findings."""

    def __init__(self) -> None:
        self.counts: dict[Severity, int] = {level: 0 for level in Severity}
        self.findings: list[Finding] = []
        self.current_group: Optional[str] = None

    def info(self, message: str, file: Optional[str] = None, line: Optional[int] = None) -> None:
        self._log(Severity.INFO, message, file, line)

    def warning(self, message: str, file: Optional[str] = None, line: Optional[int] = None) -> None:
        self._log(Severity.WARNING, message, file, line)

    def error(self, message: str, file: Optional[str] = None, line: Optional[int] = None) -> None:
        self._log(Severity.ERROR, message, file, line)

    def log(self, severity: Severity, message: str, file: Optional[str] = None, line: Optional[int] = None) -> None:
        """Dispatch on severity; used by callers holding an Evaluation."""
        self._log(severity, message, file, line)

    def start_group(self, name: str) -> None:
        self.current_group = name
        self._start_group(name)

    def end_group(self) -> None:
        self._end_group()
        self.current_group = None

    def record(self, finding: Finding) -> None:
        self.findings.append(finding)

    def close(self) -> Optional[str]:
        """Finish the report. Formats that buffer return their rendered output."""
        return None

    def _log(self, severity: Severity, message: str, file: Optional[str], line: Optional[int]) -> None:
        self.counts[severity] += 1
        self._emit(severity, message, file, line)

    def _emit(self, severity: Severity, message: str, file: Optional[str], line: Optional[int]) -> None:
        raise NotImplementedError

    def _start_group(self, name: str) -> None:
        pass

    def _end_group(self) -> None:
        pass

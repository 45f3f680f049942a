"""
Console reporter: prints findings to the terminal with colors and formatting.
"""

from typing import Optional

import click

from pin_guard.reporter.base import Reporter
from pin_guard.rules.engine import Severity


# ANSI color codes for terminal output
COLORS = {
    Severity.ERROR:   "\033[31m",  # red
    Severity.WARNING: "\033[33m",  # yellow
    Severity.INFO:    "\033[36m",  # cyan
}
BOLD = "\033[1m"
RESET = "\033[0m"


def _severity_badge(severity: Severity) -> str:
    color = COLORS.get(severity, "")
    label = severity.value.upper()
    return f"{color}{BOLD}[{label:7s}]{RESET}"


def _location(file: Optional[str], line: Optional[int]) -> str:
    if not file:
        return ""
    if line:
        return f" ({file}:{line})"
    return f" ({file})"


class ConsoleReporter(Reporter):
    """Human-readable output, one block per scanned file."""

    def __init__(self, color: Optional[bool] = None) -> None:
        super().__init__()
        self.color = color

    def _echo(self, text: str) -> None:
        # click strips ANSI codes when stdout is not a terminal
        click.echo(text, color=self.color)

    def _start_group(self, name: str) -> None:
        self._echo(f"{BOLD}{'=' * 60}{RESET}")
        self._echo(f"{BOLD}  {name}{RESET}")
        self._echo(f"{BOLD}{'-' * 60}{RESET}")

    def _end_group(self) -> None:
        self._echo("")

    def _emit(self, severity: Severity, message: str, file: Optional[str], line: Optional[int]) -> None:
        indent = "  " if self.current_group else ""
        self._echo(f"{indent}{_severity_badge(severity)} {message}{_location(file, line)}")

    def close(self) -> Optional[str]:
        errors = self.counts[Severity.ERROR]
        warnings = self.counts[Severity.WARNING]
        self._echo(f"{BOLD}Summary:{RESET} {len(self.findings)} unpinned reference(s), "
                   f"{errors} error(s), {warnings} warning(s)")
        return None

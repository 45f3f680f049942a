"""
GitHub reporter: emits workflow commands so findings show up as annotations.

Reference: https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions
"""

from typing import Optional

import click

from pin_guard.reporter.base import Reporter
from pin_guard.rules.engine import Severity

_COMMANDS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
}


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, message: str, properties: Optional[dict[str, object]] = None) -> str:
    """Build a `::command key=value,...::message` line."""
    pairs = [
        f"{key}={escape_property(str(value))}"
        for key, value in (properties or {}).items()
        if value is not None
    ]
    props = " " + ",".join(pairs) if pairs else ""
    return f"::{command}{props}::{escape_data(message)}"


class GitHubReporter(Reporter):
    """Writes GitHub Actions workflow commands to stdout."""

    def _start_group(self, name: str) -> None:
        click.echo(format_command("group", name))

    def _end_group(self) -> None:
        click.echo("::endgroup::")

    def _emit(self, severity: Severity, message: str, file: Optional[str], line: Optional[int]) -> None:
        command = _COMMANDS.get(severity)
        if command is None:
            click.echo(message)
            return
        click.echo(format_command(command, message, {"file": file, "line": line}))

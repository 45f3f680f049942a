import os
from typing import Mapping, Optional

from .base import Reporter
from .console_reporter import ConsoleReporter
from .github_reporter import GitHubReporter
from .json_reporter import JsonReporter, report_json
from .sarif_reporter import SarifReporter, report_sarif

__all__ = [
    "Reporter",
    "ConsoleReporter",
    "GitHubReporter",
    "JsonReporter",
    "SarifReporter",
    "report_json",
    "report_sarif",
    "get_reporter",
    "REPORTER_NAMES",
]

_REPORTERS = {
    "console": ConsoleReporter,
    "github": GitHubReporter,
    "json": JsonReporter,
    "sarif": SarifReporter,
}

REPORTER_NAMES = ["auto", *_REPORTERS]


def get_reporter(name: str = "auto", environ: Optional[Mapping[str, str]] = None) -> Reporter:
    """Build a reporter by name; "auto" picks GitHub annotations inside Actions runs."""
    if name == "auto":
        env = os.environ if environ is None else environ
        name = "github" if env.get("GITHUB_ACTIONS") == "true" else "console"
    try:
        return _REPORTERS[name]()
    except KeyError:
        raise ValueError(f"Unknown output format: {name}") from None

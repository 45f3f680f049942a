"""
Configuration support for pin-guard.

Settings come from three places, later ones winning:

  1. defaults
  2. a .pin-guard.yml file in the project root
  3. GitHub Action inputs (INPUT_ALLOWLIST, INPUT_DRY_RUN)

CLI flags override everything (see cli.py).

Example .pin-guard.yml:

    # Action name prefixes that may stay on tags or branches
    allowlist:
      - actions/
      - my-org/internal-action

    # Report unpinned references as warnings and never fail
    dry_run: false

    # Only look at files literally named action.yml/action.yaml under actions_path
    action_files_only: false

    # Files to skip (fnmatch patterns matched against discovered paths)
    exclude:
      - "**/legacy.yml"
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from pin_guard.parser import DEFAULT_ACTIONS_PATH, DEFAULT_WORKFLOWS_PATH

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".pin-guard.yml"

ALLOWLIST_INPUT = "INPUT_ALLOWLIST"
DRY_RUN_INPUT = "INPUT_DRY_RUN"

_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass
class Config:
    """Parsed pin-guard configuration."""
    allowlist: list[str] = field(default_factory=list)
    dry_run: bool = False
    workflows_path: str = DEFAULT_WORKFLOWS_PATH
    actions_path: str = DEFAULT_ACTIONS_PATH
    action_files_only: bool = False
    exclude: list[str] = field(default_factory=list)


def parse_allowlist(value: Any) -> list[str]:
    """
    Normalize an allow-list into a list of name prefixes.

    Accepts the multi-line string form used by action inputs (one prefix per
    line) or a YAML list. Blank lines are dropped: an empty prefix would match
    every reference.
    """
    if not value:
        return []
    if isinstance(value, str):
        entries = _LINE_SPLIT.split(value)
    elif isinstance(value, (list, tuple)):
        entries = [str(v) for v in value if v is not None]
    else:
        logger.warning("Ignoring allowlist of unsupported type %s", type(value).__name__)
        return []
    return [entry for entry in entries if entry.strip()]


def parse_exclude(value: Any) -> list[str]:
    """Normalize exclude patterns: a single pattern string or a YAML list."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and str(v)]
    logger.warning("Ignoring exclude of unsupported type %s", type(value).__name__)
    return []


def parse_dry_run(value: Any) -> bool:
    """Only the string "true" (or a YAML true) enables dry-run."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip() == "true"
    return False


def load_config(
    config_path: Optional[str] = None,
    scan_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Load configuration from a .pin-guard.yml file and action inputs.

    Search order for the file:
      1. Explicit config_path if provided
      2. .pin-guard.yml in the scan_path directory (or its parents)
      3. .pin-guard.yml in the current working directory

    Returns a Config with defaults if neither a file nor inputs are found.
    """
    config = _load_file(_find_config_file(config_path, scan_path))
    _apply_inputs(config, os.environ if environ is None else environ)
    return config


def _load_file(path: Optional[str]) -> Config:
    if path is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Loading config from %s", path)

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        logger.warning("Config file is not a YAML mapping, using defaults")
        return Config()

    return Config(
        allowlist=parse_allowlist(raw.get("allowlist")),
        dry_run=parse_dry_run(raw.get("dry_run", False)),
        workflows_path=str(raw.get("workflows_path") or DEFAULT_WORKFLOWS_PATH),
        actions_path=str(raw.get("actions_path") or DEFAULT_ACTIONS_PATH),
        action_files_only=bool(raw.get("action_files_only", False)),
        exclude=parse_exclude(raw.get("exclude")),
    )


def _apply_inputs(config: Config, environ: Mapping[str, str]) -> None:
    """Overlay GitHub Action inputs; unset or empty inputs leave the config alone."""
    allowlist = environ.get(ALLOWLIST_INPUT, "")
    if allowlist.strip():
        config.allowlist = parse_allowlist(allowlist)
        logger.debug("Allowlist from %s: %s", ALLOWLIST_INPUT, config.allowlist)

    dry_run = environ.get(DRY_RUN_INPUT, "")
    if dry_run.strip():
        config.dry_run = parse_dry_run(dry_run)
        logger.debug("Dry run from %s: %s", DRY_RUN_INPUT, config.dry_run)


def _find_config_file(
    config_path: Optional[str] = None,
    scan_path: Optional[str] = None,
) -> Optional[str]:
    """Find the config file, returning its path or None."""
    # 1. Explicit path
    if config_path:
        p = Path(config_path)
        if p.is_file():
            return str(p)
        logger.warning("Config file not found: %s", config_path)
        return None

    # 2. Relative to scan path
    if scan_path:
        scan_p = Path(scan_path)
        if scan_p.is_file():
            scan_p = scan_p.parent
        candidate = scan_p / DEFAULT_CONFIG_FILENAME
        if candidate.is_file():
            return str(candidate)
        for parent in scan_p.parents:
            candidate = parent / DEFAULT_CONFIG_FILENAME
            if candidate.is_file():
                return str(candidate)

    # 3. Current working directory
    cwd_candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    return None

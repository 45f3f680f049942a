"""
Loader and file discovery for workflow and composite action files.

Reads .yml/.yaml files into plain nested dicts/lists. Every mapping carries
the line it starts on under the "__line__" key so reporters can point
annotations at the offending step.
"""

import fnmatch
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

import yaml

logger = logging.getLogger(__name__)

LINE_KEY = "__line__"

DEFAULT_WORKFLOWS_PATH = ".github/workflows"
DEFAULT_ACTIONS_PATH = ".github/actions"


class _LineLoader(yaml.SafeLoader):
    """PyYAML loader that stores the start line number on every mapping node."""


def _construct_mapping(loader: _LineLoader, node: yaml.MappingNode) -> dict[Any, Any]:
    mapping: dict[Any, Any] = loader.construct_mapping(node, deep=True)
    mapping[LINE_KEY] = node.start_mark.line + 1  # YAML lines are 0-indexed
    return mapping


_LineLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def load_document(file_path: str) -> Any:
    """
    Load a single workflow or action YAML file.

    Args:
        file_path: Path to the .yml/.yaml file.

    Returns:
        The parsed document: usually a dict, possibly a list or None for
        files that hold a bare step list or nothing at all.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the file isn't valid YAML.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Workflow file not found: {file_path}")

    logger.info("Parsing document: %s", file_path)

    with open(path, "r", encoding="utf-8") as f:
        document = yaml.load(f, Loader=_LineLoader)  # noqa: S506  # _LineLoader is safe

    logger.debug("Parsed %s: top-level type %s", file_path, type(document).__name__)
    return document


def _patterns(workflows_path: str, actions_path: str, action_files_only: bool) -> list[tuple[str, str]]:
    if action_files_only:
        action_patterns = ["**/action.yaml", "**/action.yml"]
    else:
        action_patterns = ["**/*.yaml", "**/*.yml"]
    return [
        (workflows_path, "*.yaml"),
        (workflows_path, "*.yml"),
        *((actions_path, pattern) for pattern in action_patterns),
    ]


def discover_files(
    root: str = ".",
    workflows_path: str = DEFAULT_WORKFLOWS_PATH,
    actions_path: str = DEFAULT_ACTIONS_PATH,
    action_files_only: bool = False,
) -> Iterator[str]:
    """
    Lazily yield every workflow and action file under root.

    Workflows are matched non-recursively, actions recursively. Matches are
    sorted within each pattern and each file is yielded once even when it
    satisfies more than one pattern.
    """
    base = Path(root)
    seen: set[Path] = set()

    for directory, pattern in _patterns(workflows_path, actions_path, action_files_only):
        search_dir = base / directory
        if not search_dir.is_dir():
            logger.debug("Skipping missing directory %s", search_dir)
            continue

        for match in sorted(search_dir.glob(pattern)):
            if not match.is_file():
                continue
            key = match.resolve()
            if key in seen:
                continue
            seen.add(key)
            logger.debug("Matched %s (pattern %s/%s)", match, directory, pattern)
            yield str(match)


def filter_excluded(paths: Iterable[str], patterns: list[str]) -> Iterator[str]:
    """Drop paths matching any of the fnmatch-style exclude patterns."""
    for path in paths:
        if any(fnmatch.fnmatch(path, pat) for pat in patterns):
            logger.info("Excluded %s via config", path)
            continue
        yield path

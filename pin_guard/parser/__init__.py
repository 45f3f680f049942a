from .document_parser import (
    DEFAULT_ACTIONS_PATH,
    DEFAULT_WORKFLOWS_PATH,
    LINE_KEY,
    discover_files,
    filter_excluded,
    load_document,
)

__all__ = [
    "DEFAULT_ACTIONS_PATH",
    "DEFAULT_WORKFLOWS_PATH",
    "LINE_KEY",
    "discover_files",
    "filter_excluded",
    "load_document",
]

from .engine import RULE_ID, Evaluation, Finding, Severity, evaluate
from .reference import (
    ActionReference,
    has_version_qualifier,
    is_immutable_pin,
    matches_allowlist,
    parse_reference,
)

__all__ = [
    "RULE_ID",
    "Evaluation",
    "Finding",
    "Severity",
    "evaluate",
    "ActionReference",
    "has_version_qualifier",
    "is_immutable_pin",
    "matches_allowlist",
    "parse_reference",
]

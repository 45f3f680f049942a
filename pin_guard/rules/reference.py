"""
Reference classifier: answers questions about a single `uses` value.

A reference is either `owner/repo[/path]@qualifier` or
`docker://image@sha256:<digest>`. It is parsed once into an ActionReference
and every predicate works on the parsed fields.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

DOCKER_PREFIX = "docker://"
DIGEST_MARKER = "sha256:"

# Searched, not full-matched: a longer qualifier holding a hash run at a word
# boundary still counts as pinned.
COMMIT_SHA_PATTERN = re.compile(r"\b[a-f0-9]{40}\b", re.IGNORECASE | re.ASCII)
DIGEST_PATTERN = re.compile(r"\b[a-f0-9]{64}\b", re.IGNORECASE | re.ASCII)


@dataclass(frozen=True)
class ActionReference:
    """A parsed `uses` value."""
    full_ref: str                 # e.g. "actions/checkout@v4"
    name: str                     # e.g. "actions/checkout"
    qualifier: Optional[str]      # e.g. "v4"; None when there is no "@"
    is_container: bool            # True for docker:// references
    digest: Optional[str] = None  # text after "sha256:" for containers


def parse_reference(uses: Any) -> Optional[ActionReference]:
    """Parse a `uses` value, returning None for anything but a non-empty string."""
    if not isinstance(uses, str) or not uses:
        return None

    name, sep, qualifier = uses.partition("@")
    is_container = uses.startswith(DOCKER_PREFIX)

    digest = None
    if is_container:
        _, marker, rest = uses.partition(DIGEST_MARKER)
        if marker:
            digest = rest

    return ActionReference(
        full_ref=uses,
        name=name,
        qualifier=qualifier if sep else None,
        is_container=is_container,
        digest=digest,
    )


def has_version_qualifier(uses: Any) -> bool:
    """True if `uses` is a non-empty string carrying an "@" qualifier."""
    ref = parse_reference(uses)
    return ref is not None and ref.qualifier is not None


def is_immutable_pin(uses: Any) -> bool:
    """True if the reference is pinned to a full commit SHA or image digest."""
    ref = parse_reference(uses)
    if ref is None:
        return False

    if ref.is_container:
        if ref.digest is None:
            logger.debug("Container reference without %s marker: %s", DIGEST_MARKER, uses)
            return False
        return DIGEST_PATTERN.search(ref.digest) is not None

    if ref.qualifier is None:
        return False
    return COMMIT_SHA_PATTERN.search(ref.qualifier) is not None


def matches_allowlist(uses: Any, allowlist: Optional[list[str]]) -> bool:
    """True if any allow-list entry is a prefix of the reference name."""
    if not allowlist:
        return False

    ref = parse_reference(uses)
    if ref is None:
        return False
    return any(ref.name.startswith(entry) for entry in allowlist)

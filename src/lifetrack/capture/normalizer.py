"""Capture text canonicalization.

Produces normalized text and cache keys for change detection and memoization.
"""

import hashlib
import re
from enum import Enum

_WHITESPACE = re.compile(r"\s+")

# Leading significant tokens that make up a fuzzy key
FUZZY_KEY_TOKENS = 5
FUZZY_KEY_MIN_LENGTH = 3


class KeyStrategy(Enum):
    """How capture text is turned into a cache key."""

    FUZZY = "fuzzy"
    CONTENT = "content"


def normalize(text: str) -> str:
    """Lowercase, trim, and collapse whitespace runs to a single space."""
    return _WHITESPACE.sub(" ", text.lower()).strip()


def fuzzy_key(text: str) -> str:
    """Build a lossy key from the first significant words of a capture.

    Takes the first five normalized tokens longer than two characters and
    joins them with underscores. Distinct captures that share those leading
    words collide on one key.
    """
    tokens = [token for token in normalize(text).split(" ") if len(token) >= FUZZY_KEY_MIN_LENGTH]
    return "_".join(tokens[:FUZZY_KEY_TOKENS])


def content_key(text: str) -> str:
    """Hash the full normalized text."""
    return hashlib.sha256(normalize(text).encode("utf-8")).hexdigest()


def cache_key(text: str, strategy: KeyStrategy = KeyStrategy.FUZZY) -> str:
    """Get the cache key for a capture under the given strategy.

    A fuzzy key with no significant tokens falls back to the content hash.
    """
    if strategy == KeyStrategy.FUZZY:
        key = fuzzy_key(text)
        if key:
            return key
    return content_key(text)


__all__ = [
    "KeyStrategy",
    "cache_key",
    "content_key",
    "fuzzy_key",
    "normalize",
]

"""In-memory memoization of extraction results."""

import logging

from .models import ExtractionResult

logger = logging.getLogger(__name__)


class PatternCache:
    """Key to ExtractionResult store with no expiry.

    Lives for the process lifetime and is emptied only by clear(). Construct
    one and pass it to every extractor that should share it.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._entries: dict[str, ExtractionResult] = {}

    def get(self, key: str) -> ExtractionResult | None:
        """Return a copy of the cached result for key, or None on a miss."""
        result = self._entries.get(key)
        if result is None:
            logger.debug(f"Pattern cache miss: {key[:40]}")
            return None
        logger.debug(f"Pattern cache hit: {key[:40]}")
        return result.copy()

    def set(self, key: str, result: ExtractionResult) -> None:
        """Store a copy of result under key, replacing any previous entry."""
        self._entries[key] = result.copy()

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["PatternCache"]

"""Data models for free-text capture.

Defines the transient capture request and the six-category extraction result.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

CATEGORIES: tuple[str, ...] = ("tasks", "habits", "nutrition", "fitness", "notes", "goals")


@dataclass
class CaptureRequest:
    """One free-text entry awaiting extraction."""

    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class ExtractionResult:
    """Structured items extracted from a capture.

    All six categories are always present, possibly empty. Items are partial
    records exactly as the extraction service described them.
    """

    tasks: list[dict[str, Any]] = field(default_factory=list)
    habits: list[dict[str, Any]] = field(default_factory=list)
    nutrition: list[dict[str, Any]] = field(default_factory=list)
    fitness: list[dict[str, Any]] = field(default_factory=list)
    notes: list[dict[str, Any]] = field(default_factory=list)
    goals: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "ExtractionResult":
        """Create a result with every category empty."""
        return cls()

    @property
    def total_items(self) -> int:
        """Number of items across all categories."""
        return sum(len(getattr(self, name)) for name in CATEGORIES)

    @property
    def is_empty(self) -> bool:
        """True when no category holds an item."""
        return self.total_items == 0

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Convert to a plain dictionary keyed by category."""
        return {name: [dict(item) for item in getattr(self, name)] for name in CATEGORIES}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractionResult":
        """Create from a parsed service payload.

        Any category that is missing or not a list becomes empty, and
        non-object items are dropped.
        """
        values: dict[str, list[dict[str, Any]]] = {}
        for name in CATEGORIES:
            raw = data.get(name)
            if not isinstance(raw, list):
                raw = []
            values[name] = [item for item in raw if isinstance(item, dict)]
        return cls(**values)

    @staticmethod
    def describes_categories(data: dict[str, Any]) -> bool:
        """True when a payload carries at least one of the six categories."""
        return any(name in data for name in CATEGORIES)

    def copy(self) -> "ExtractionResult":
        """Return a copy whose lists and items can be changed freely."""
        return deepcopy(self)


__all__ = ["CATEGORIES", "CaptureRequest", "ExtractionResult"]

"""Turn extraction results into durable records.

Applies the defaults a capture implies (today's due date, daily habits,
medium goal weight) and drops items the service left without a name.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any

from ..models import (
    FitnessEntry,
    Frequency,
    Goal,
    Habit,
    Macros,
    Note,
    NutritionEntry,
    Task,
    parse_date,
)
from .models import ExtractionResult

logger = logging.getLogger(__name__)


@dataclass
class CapturedRecords:
    """Records built from one extraction, ready to persist."""

    tasks: list[Task] = field(default_factory=list)
    habits: list[Habit] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    nutrition: list[NutritionEntry] = field(default_factory=list)
    fitness: list[FitnessEntry] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of records across all collections."""
        return (
            len(self.tasks)
            + len(self.habits)
            + len(self.goals)
            + len(self.nutrition)
            + len(self.fitness)
            + len(self.notes)
        )


def _text(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    return value.strip() if isinstance(value, str) else ""


def _weight(value: Any) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return int(value)
    return 50


def materialize(
    result: ExtractionResult,
    user_id: str = "default",
    now: datetime | None = None,
    today: date | None = None,
) -> CapturedRecords:
    """Build typed records from an extraction result.

    Args:
        result: Extraction to convert
        user_id: Owner of the new records
        now: Capture time; defaults to the current time
        today: Default task due date; defaults to the date of now

    Returns:
        CapturedRecords holding every item with an identifying field
    """
    now = now or datetime.now(UTC)
    today = today or now.date()
    records = CapturedRecords()

    for item in result.tasks:
        title = _text(item, "title")
        if title:
            records.tasks.append(
                Task(
                    title=title,
                    goal_id=item.get("goal_id") or None,
                    due_date=parse_date(item.get("due_date")) or today,
                    created_at=now,
                    user_id=user_id,
                )
            )

    for item in result.habits:
        name = _text(item, "name")
        if name:
            records.habits.append(
                Habit(
                    name=name,
                    frequency=Frequency.parse(item.get("frequency") or "daily"),
                    user_id=user_id,
                )
            )

    for item in result.goals:
        title = _text(item, "title")
        if title:
            records.goals.append(
                Goal(
                    title=title,
                    weight=_weight(item.get("weight")),
                    parent_goal_id=item.get("parent_goal_id") or None,
                    user_id=user_id,
                )
            )

    for item in result.nutrition:
        food_name = _text(item, "food_name")
        if food_name:
            records.nutrition.append(
                NutritionEntry(
                    food_name=food_name,
                    macros=Macros.from_dict(item.get("macros")),
                    timestamp=now,
                    user_id=user_id,
                )
            )

    for item in result.fitness:
        exercise_name = _text(item, "exercise_name")
        if exercise_name:
            entry = FitnessEntry.from_dict({**item, "timestamp": now, "user_id": user_id})
            entry.exercise_name = exercise_name
            records.fitness.append(entry)

    for item in result.notes:
        content = _text(item, "content")
        if content:
            records.notes.append(Note(content=content, timestamp=now, user_id=user_id))

    dropped = result.total_items - records.total
    if dropped:
        logger.debug(f"Dropped {dropped} extracted items without an identifying field")

    return records


__all__ = ["CapturedRecords", "materialize"]

"""Durable life-tracking records.

Defines the entities persisted by the storage collaborator and read by the
metrics engine. Dates are stored as ISO strings in documents.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any


class Frequency(Enum):
    """How often a habit is meant to be done."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Any) -> "Frequency":
        """Parse a frequency, defaulting to daily."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.DAILY


class LifeArea(Enum):
    """Life areas time blocks are allocated to."""

    WORK = "work"
    HEALTH = "health"
    PERSONAL = "personal"
    LEARNING = "learning"
    SOCIAL = "social"
    REST = "rest"


class RecordKind(Enum):
    """Collections owned by the persistence collaborator."""

    TASK = "task"
    HABIT = "habit"
    GOAL = "goal"
    TIME_BLOCK = "time_block"
    NUTRITION = "nutrition"
    FITNESS = "fitness"
    VALUE = "value"
    REFLECTION = "reflection"
    NOTE = "note"
    WEIGHT = "weight"
    SETTINGS = "settings"


def parse_date(value: Any) -> date | None:
    """Parse a date from a date, datetime or ISO string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_datetime(value: Any) -> datetime | None:
    """Parse a timezone-aware datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_id(value: Any) -> str | None:
    return str(value) if value not in (None, "") else None


@dataclass
class Task:
    """An action, optionally contributing to a goal."""

    title: str
    goal_id: str | None = None
    completed: bool = False
    due_date: date | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    user_id: str = "default"
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "title": self.title,
            "goal_id": self.goal_id,
            "completed": self.completed,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "created_at": self.created_at,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create from a stored document."""
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            title=str(data.get("title", "")),
            goal_id=_optional_id(data.get("goal_id")),
            completed=bool(data.get("completed", False)),
            due_date=parse_date(data.get("due_date")),
            created_at=parse_datetime(data.get("created_at")) or datetime.now(UTC),
            user_id=data.get("user_id", "default"),
        )


@dataclass
class Habit:
    """A recurring action with a completion streak.

    Attributes:
        name: Habit name
        frequency: Intended cadence
        streak: Consecutive calendar-day completions
        last_done: Date of the most recent completion
        user_id: User identifier
        id: Storage document ID
    """

    name: str
    frequency: Frequency = Frequency.DAILY
    streak: int = 0
    last_done: date | None = None
    user_id: str = "default"
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "frequency": self.frequency.value,
            "streak": self.streak,
            "last_done": self.last_done.isoformat() if self.last_done else None,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Habit":
        """Create from a stored document."""
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            name=str(data.get("name", "")),
            frequency=Frequency.parse(data.get("frequency", "daily")),
            streak=max(0, int(data.get("streak", 0) or 0)),
            last_done=parse_date(data.get("last_done")),
            user_id=data.get("user_id", "default"),
        )


@dataclass
class Goal:
    """An outcome in the goal tree. Progress is always derived."""

    title: str
    weight: int = 50
    parent_goal_id: str | None = None
    completed: bool = False
    user_id: str = "default"
    id: str | None = None

    def __post_init__(self) -> None:
        self.weight = min(100, max(1, int(self.weight)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "title": self.title,
            "weight": self.weight,
            "parent_goal_id": self.parent_goal_id,
            "completed": self.completed,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Goal":
        """Create from a stored document."""
        weight = _number(data.get("weight"))
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            title=str(data.get("title", "")),
            weight=int(weight) if weight is not None else 50,
            parent_goal_id=_optional_id(data.get("parent_goal_id")),
            completed=bool(data.get("completed", False)),
            user_id=data.get("user_id", "default"),
        )


@dataclass
class TimeBlock:
    """A scheduled block of time in one life area."""

    start_time: datetime
    end_time: datetime
    area: LifeArea = LifeArea.PERSONAL
    linked_task_id: str | None = None
    linked_habit_id: str | None = None
    user_id: str = "default"
    id: str | None = None

    @property
    def duration_minutes(self) -> float:
        """Length of the block in minutes, never negative."""
        return max(0.0, (self.end_time - self.start_time).total_seconds() / 60)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "type": self.area.value,
            "linked_task_id": self.linked_task_id,
            "linked_habit_id": self.linked_habit_id,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeBlock":
        """Create from a stored document."""
        start = parse_datetime(data.get("start_time")) or datetime.now(UTC)
        end = parse_datetime(data.get("end_time")) or start
        try:
            area = LifeArea(data.get("type", "personal"))
        except ValueError:
            area = LifeArea.PERSONAL
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            start_time=start,
            end_time=end,
            area=area,
            linked_task_id=_optional_id(data.get("linked_task_id")),
            linked_habit_id=_optional_id(data.get("linked_habit_id")),
            user_id=data.get("user_id", "default"),
        )


@dataclass
class Macros:
    """Macronutrient totals; grams except calories."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for storage."""
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "fiber": self.fiber,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Macros":
        """Create from a dictionary, treating missing values as zero."""
        if not isinstance(data, dict):
            return cls()
        return cls(
            calories=_number(data.get("calories")) or 0.0,
            protein=_number(data.get("protein")) or 0.0,
            carbs=_number(data.get("carbs")) or 0.0,
            fat=_number(data.get("fat")) or 0.0,
            fiber=_number(data.get("fiber")) or 0.0,
        )


@dataclass
class NutritionEntry:
    """A logged food item."""

    food_name: str
    macros: Macros = field(default_factory=Macros)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    user_id: str = "default"
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "food_name": self.food_name,
            "macros": self.macros.to_dict(),
            "timestamp": self.timestamp,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NutritionEntry":
        """Create from a stored document."""
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            food_name=str(data.get("food_name", "")),
            macros=Macros.from_dict(data.get("macros")),
            timestamp=parse_datetime(data.get("timestamp")) or datetime.now(UTC),
            user_id=data.get("user_id", "default"),
        )


@dataclass
class FitnessEntry:
    """A logged exercise."""

    exercise_name: str
    sets: float | None = None
    reps: float | None = None
    weight: float | None = None
    cardio_minutes: float | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    user_id: str = "default"
    id: str | None = None

    @property
    def volume(self) -> float:
        """Sets x reps x weight, or zero when any part is missing."""
        if self.sets and self.reps and self.weight:
            return self.sets * self.reps * self.weight
        return 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "exercise_name": self.exercise_name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
            "cardio_minutes": self.cardio_minutes,
            "timestamp": self.timestamp,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FitnessEntry":
        """Create from a stored document."""
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            exercise_name=str(data.get("exercise_name", "")),
            sets=_number(data.get("sets")),
            reps=_number(data.get("reps")),
            weight=_number(data.get("weight")),
            cardio_minutes=_number(data.get("cardio_minutes")),
            timestamp=parse_datetime(data.get("timestamp")) or datetime.now(UTC),
            user_id=data.get("user_id", "default"),
        )


@dataclass
class ValueRating:
    """A daily self-rating against a core value."""

    name: str
    daily_rating: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    user_id: str = "default"
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "daily_rating": self.daily_rating,
            "timestamp": self.timestamp,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValueRating":
        """Create from a stored document."""
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            name=str(data.get("name", "")),
            daily_rating=_number(data.get("daily_rating")) or 0.0,
            timestamp=parse_datetime(data.get("timestamp")) or datetime.now(UTC),
            user_id=data.get("user_id", "default"),
        )


@dataclass
class Note:
    """A free-form journal note or reflection."""

    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    kind: str = "note"
    user_id: str = "default"
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "content": self.content,
            "timestamp": self.timestamp,
            "kind": self.kind,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        """Create from a stored document."""
        return cls(
            id=_optional_id(data.get("id", data.get("_id"))),
            content=str(data.get("content", "")),
            timestamp=parse_datetime(data.get("timestamp")) or datetime.now(UTC),
            kind=str(data.get("kind", data.get("type", "note"))),
            user_id=data.get("user_id", "default"),
        )


__all__ = [
    "FitnessEntry",
    "Frequency",
    "Goal",
    "Habit",
    "LifeArea",
    "Macros",
    "Note",
    "NutritionEntry",
    "RecordKind",
    "Task",
    "TimeBlock",
    "ValueRating",
    "parse_date",
    "parse_datetime",
]

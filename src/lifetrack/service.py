"""Life-tracking service for capturing records and reading metrics.

Wires the capture pipeline to persistence and serves dashboard and analytics
reads through the derived-metrics engine.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from typing import Any

from pymongo.errors import PyMongoError

from .capture import (
    BatchCoordinator,
    CapturedRecords,
    CaptureExtractor,
    ExtractionResult,
    PartialSaveError,
    ReparseResult,
    materialize,
    reparse_if_changed,
)
from .metrics import (
    AnalyticsBucket,
    TimeRange,
    all_goal_progress,
    complete_habit,
    current_streaks,
    fitness_series,
    goal_progress_snapshot,
    nutrition_series,
    planned_vs_actual,
    streak_snapshot,
    time_allocation_series,
    values_series,
)
from .metrics.analytics import local_date
from .models import (
    FitnessEntry,
    Goal,
    Habit,
    NutritionEntry,
    RecordKind,
    Task,
    TimeBlock,
    ValueRating,
)
from .storage import RecordRepository

logger = logging.getLogger(__name__)


@dataclass
class CaptureOutcome:
    """Result of capturing one piece of text."""

    text: str
    result: ExtractionResult
    records: CapturedRecords
    saved_ids: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class Dashboard:
    """Derived metrics shown on the dashboard for one day."""

    day: date
    streaks: dict[str, int]
    goal_progress: dict[str, int]
    efficiency: int
    active_habits: int
    completed_tasks: int
    total_tasks: int


class LifeTrackService:
    """Service for capturing free text and reading derived metrics.

    Persistence is optional; without a repository captures are extracted
    but not saved, and reads return empty metrics.
    """

    def __init__(
        self,
        extractor: CaptureExtractor,
        repository: RecordRepository | None = None,
        user_id: str = "default",
        batch_max_tokens: int = 4096,
        tz: tzinfo | None = None,
    ) -> None:
        """Initialize service.

        Args:
            extractor: Capture extractor (owns the shared cache)
            repository: Optional repository for persistence
            user_id: User whose records are read and written
            batch_max_tokens: Output token budget for batch extraction
            tz: Zone for calendar dates; system local zone when None
        """
        self._extractor = extractor
        self._batch = BatchCoordinator(extractor, max_tokens=batch_max_tokens)
        self._repository = repository
        self._user_id = user_id
        self._tz = tz

    @property
    def extractor(self) -> CaptureExtractor:
        """Extractor used for captures."""
        return self._extractor

    def capture(self, text: str, now: datetime | None = None) -> CaptureOutcome:
        """Extract records from text and persist them.

        Args:
            text: Raw capture text
            now: Capture time; defaults to the current time

        Returns:
            CaptureOutcome with the extraction and the records built from it

        Raises:
            PartialSaveError: If storage fails midway. Records saved before
                the failure stay written and are listed in its saved_ids.
        """
        return self._store(text, self._extractor.extract(text), now)

    def capture_many(self, texts: list[str], now: datetime | None = None) -> list[CaptureOutcome]:
        """Capture several texts with one batched extraction call."""
        results = self._batch.batch_extract(texts)
        return [self._store(text, result, now) for text, result in zip(texts, results)]

    def edit_capture(self, original: str, edited: str, prior: ExtractionResult) -> ReparseResult:
        """Re-extract an edited capture only if its meaning changed."""
        return reparse_if_changed(original, edited, prior, self._extractor)

    def _store(self, text: str, result: ExtractionResult, now: datetime | None) -> CaptureOutcome:
        now = now or datetime.now(UTC)
        records = materialize(
            result, user_id=self._user_id, now=now, today=local_date(now, self._tz)
        )
        outcome = CaptureOutcome(text=text, result=result, records=records)

        if self._repository is None:
            return outcome

        groups: list[tuple[str, RecordKind, list[Any]]] = [
            ("tasks", RecordKind.TASK, records.tasks),
            ("habits", RecordKind.HABIT, records.habits),
            ("goals", RecordKind.GOAL, records.goals),
            ("nutrition", RecordKind.NUTRITION, records.nutrition),
            ("fitness", RecordKind.FITNESS, records.fitness),
            ("notes", RecordKind.NOTE, records.notes),
        ]
        for name, kind, items in groups:
            ids = outcome.saved_ids.setdefault(name, [])
            for item in items:
                try:
                    item.id = self._repository.create(kind, self._user_id, item.to_dict())
                except PyMongoError as e:
                    logger.error(f"Saving captured {name} failed: {e}")
                    raise PartialSaveError(
                        f"Failed to save captured {name}: {e}", outcome.saved_ids
                    ) from e
                ids.append(item.id)

        logger.info(f"Saved {records.total} captured records for {self._user_id}")
        return outcome

    def complete_habit(self, habit_id: str, today: date | None = None) -> Habit | None:
        """Record a habit completion, advancing its streak.

        Args:
            habit_id: Habit to complete
            today: Completion date; defaults to today in the service zone

        Returns:
            The updated habit, or None if it does not exist
        """
        if self._repository is None:
            logger.warning("No repository configured for habit completion")
            return None

        doc = self._repository.get(RecordKind.HABIT, habit_id)
        if doc is None:
            logger.warning(f"Habit not found: {habit_id}")
            return None

        habit = Habit.from_dict(doc)
        updated = complete_habit(habit, today or self._today())
        if updated is not habit:
            self._repository.update(
                RecordKind.HABIT,
                habit_id,
                {"streak": updated.streak, "last_done": updated.to_dict()["last_done"]},
            )
        return updated

    def dashboard(self, today: date | None = None) -> Dashboard:
        """Compute the dashboard metrics for today."""
        today = today or self._today()
        habits = self._load(RecordKind.HABIT, Habit)
        goals = self._load(RecordKind.GOAL, Goal)
        tasks = self._load(RecordKind.TASK, Task)
        blocks = self._load(RecordKind.TIME_BLOCK, TimeBlock)

        due_today = [task for task in tasks if task.due_date == today]
        return Dashboard(
            day=today,
            streaks=current_streaks(habits, today),
            goal_progress=all_goal_progress(tasks, goals),
            efficiency=planned_vs_actual(blocks, tasks, today, self._tz).efficiency,
            active_habits=sum(1 for habit in habits if habit.last_done == today),
            completed_tasks=sum(1 for task in due_today if task.completed),
            total_tasks=len(due_today),
        )

    def analytics(
        self,
        time_range: TimeRange,
        now: datetime | None = None,
    ) -> dict[str, list[AnalyticsBucket]]:
        """Compute every analytics series for time_range.

        Returns:
            Series keyed by metric family
        """
        now = now or datetime.now(UTC)
        today = local_date(now, self._tz) or now.date()
        tasks = self._load(RecordKind.TASK, Task)

        return {
            "time_allocation": time_allocation_series(
                self._load(RecordKind.TIME_BLOCK, TimeBlock), time_range, now=now, tz=self._tz
            ),
            "nutrition": nutrition_series(
                self._load(RecordKind.NUTRITION, NutritionEntry), time_range, now=now, tz=self._tz
            ),
            "fitness": fitness_series(
                self._load(RecordKind.FITNESS, FitnessEntry), time_range, now=now, tz=self._tz
            ),
            "values": values_series(
                self._load(RecordKind.VALUE, ValueRating), time_range, now=now, tz=self._tz
            ),
            "streaks": streak_snapshot(self._load(RecordKind.HABIT, Habit), today),
            "goal_progress": goal_progress_snapshot(
                tasks, self._load(RecordKind.GOAL, Goal), today
            ),
        }

    def _load(self, kind: RecordKind, model: Any) -> list[Any]:
        if self._repository is None:
            return []
        return [model.from_dict(doc) for doc in self._repository.find(kind, self._user_id)]

    def _today(self) -> date:
        return datetime.now(UTC).astimezone(self._tz).date()


__all__ = ["CaptureOutcome", "Dashboard", "LifeTrackService"]

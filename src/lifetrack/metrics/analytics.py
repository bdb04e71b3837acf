"""Time-bucketed analytics.

Groups timestamped records into one row per local calendar date over a
daily, weekly or monthly lookback. Flow metrics (minutes, macros, volume)
are summed per day; point-in-time metrics (ratings, streaks, goal progress)
are snapshotted instead.
"""

import logging
import re
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Any, TypeVar

from ..models import (
    FitnessEntry,
    Goal,
    Habit,
    LifeArea,
    NutritionEntry,
    Task,
    TimeBlock,
    ValueRating,
    parse_datetime,
)
from .goals import goal_progress, round_half_up
from .streaks import current_streak

logger = logging.getLogger(__name__)

R = TypeVar("R")

_WORD = re.compile(r"[a-z']+")


class TimeRange(Enum):
    """Lookback windows for analytics."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def days(self) -> int:
        """Number of calendar dates covered, today included."""
        return {"daily": 1, "weekly": 7, "monthly": 30}[self.value]


@dataclass
class AnalyticsBucket:
    """Aggregate row for one calendar date."""

    date: date
    label: str
    values: dict[str, float] = field(default_factory=dict)
    count: int = 0


@dataclass
class PlannedVsActual:
    """Planned and realized hours per life area for one day."""

    planned: dict[str, float]
    actual: dict[str, float]
    efficiency: int


@dataclass
class GoalEstimate:
    """Remaining work for one open top-level goal."""

    goal_id: str | None
    title: str
    remaining_tasks: int
    total_tasks: int
    estimated_days: int
    progress: int


@dataclass
class ValuesTrend:
    """Value names grouped by the direction of their recent ratings."""

    declining: list[str] = field(default_factory=list)
    improving: list[str] = field(default_factory=list)
    stable: list[str] = field(default_factory=list)


def date_label(day: date) -> str:
    """Short chart label such as 'Oct 19'."""
    return f"{day:%b} {day.day}"


def local_date(value: Any, tz: tzinfo | None = None) -> date | None:
    """Calendar date of a timestamp in tz (system local zone when None)."""
    moment = parse_datetime(value)
    if moment is None:
        return None
    return moment.astimezone(tz).date()


def window(time_range: TimeRange, today: date) -> tuple[date, date]:
    """First and last calendar date covered by time_range ending today."""
    return today - timedelta(days=time_range.days - 1), today


def _timestamp_of(record: Any) -> Any:
    if isinstance(record, dict):
        return record.get("timestamp")
    return getattr(record, "timestamp", None)


def bucket(
    records: Iterable[R],
    time_range: TimeRange,
    *,
    aggregate: Callable[[R], dict[str, float]],
    timestamp: Callable[[R], Any] = _timestamp_of,
    snapshot: bool = False,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[AnalyticsBucket]:
    """Group records into per-date buckets.

    Args:
        records: Records to aggregate
        time_range: Lookback window ending today
        aggregate: Numeric fields a single record contributes
        timestamp: Reads a record's timestamp
        snapshot: Keep each field's latest value instead of summing
        now: Reference time; defaults to the current time
        tz: Zone for calendar-date truncation; system local zone when None

    Returns:
        Buckets for dates holding at least one record, oldest first
    """
    now = now or datetime.now(UTC)
    start, end = window(time_range, local_date(now, tz) or now.date())

    dated: list[tuple[datetime, date, R]] = []
    skipped = 0
    for record in records:
        moment = parse_datetime(timestamp(record))
        if moment is None:
            skipped += 1
            continue
        day = moment.astimezone(tz).date()
        if start <= day <= end:
            dated.append((moment, day, record))

    if skipped:
        logger.debug(f"Skipped {skipped} records without a usable timestamp")

    buckets: dict[date, AnalyticsBucket] = {}
    for _, day, record in sorted(dated, key=lambda entry: entry[0]):
        row = buckets.get(day)
        if row is None:
            row = buckets[day] = AnalyticsBucket(date=day, label=date_label(day))
        row.count += 1
        for name, value in aggregate(record).items():
            if snapshot:
                row.values[name] = value
            else:
                row.values[name] = row.values.get(name, 0.0) + value

    return [buckets[day] for day in sorted(buckets)]


def time_allocation_series(
    blocks: Iterable[TimeBlock],
    time_range: TimeRange,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[AnalyticsBucket]:
    """Minutes per life area, per day."""
    return bucket(
        blocks,
        time_range,
        aggregate=lambda block: {block.area.value: block.duration_minutes},
        timestamp=lambda block: block.start_time,
        now=now,
        tz=tz,
    )


def nutrition_series(
    entries: Iterable[NutritionEntry],
    time_range: TimeRange,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[AnalyticsBucket]:
    """Macro totals per day."""
    return bucket(
        entries,
        time_range,
        aggregate=lambda entry: entry.macros.to_dict(),
        now=now,
        tz=tz,
    )


def fitness_series(
    entries: Iterable[FitnessEntry],
    time_range: TimeRange,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[AnalyticsBucket]:
    """Training volume, cardio minutes and exercise count per day."""
    return bucket(
        entries,
        time_range,
        aggregate=lambda entry: {
            "volume": entry.volume,
            "cardio": entry.cardio_minutes or 0.0,
            "exercises": 1.0,
        },
        now=now,
        tz=tz,
    )


def values_series(
    ratings: Iterable[ValueRating],
    time_range: TimeRange,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[AnalyticsBucket]:
    """Latest rating of each value per day."""
    return bucket(
        ratings,
        time_range,
        aggregate=lambda rating: {rating.name: rating.daily_rating},
        snapshot=True,
        now=now,
        tz=tz,
    )


def streak_snapshot(habits: list[Habit], today: date | None = None) -> list[AnalyticsBucket]:
    """Current streak per habit name as a single bucket dated today."""
    if not habits:
        return []
    today = today or date.today()
    values = {habit.name: float(current_streak(habit, today)) for habit in habits}
    return [AnalyticsBucket(date=today, label=date_label(today), values=values, count=len(habits))]


def goal_progress_snapshot(
    tasks: list[Task],
    goals: list[Goal],
    today: date | None = None,
) -> list[AnalyticsBucket]:
    """Current progress per goal title as a single bucket dated today."""
    tracked = [goal for goal in goals if goal.id]
    if not tracked:
        return []
    today = today or date.today()
    values = {goal.title: float(goal_progress(goal.id or "", tasks, goals)) for goal in tracked}
    return [AnalyticsBucket(date=today, label=date_label(today), values=values, count=len(tracked))]


def time_allocation(
    blocks: Iterable[TimeBlock],
    time_range: TimeRange,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[dict[str, Any]]:
    """Total time per life area across the whole window.

    Returns:
        One row per life area with minutes and hours (one decimal)
    """
    totals = {area.value: 0.0 for area in LifeArea}
    for row in time_allocation_series(blocks, time_range, now=now, tz=tz):
        for name, minutes in row.values.items():
            totals[name] = totals.get(name, 0.0) + minutes

    return [
        {"name": name, "value": round(minutes), "hours": round(minutes / 60, 1)}
        for name, minutes in totals.items()
    ]


def planned_vs_actual(
    blocks: Iterable[TimeBlock],
    tasks: list[Task],
    day: date,
    tz: tzinfo | None = None,
) -> PlannedVsActual:
    """Compare scheduled hours with hours actually delivered on day.

    A block counts as delivered unless it is linked to a task that is not
    completed (or no longer exists).
    """
    planned = {area.value: 0.0 for area in LifeArea}
    actual = dict(planned)
    completed = {task.id for task in tasks if task.id and task.completed}

    for block in blocks:
        if local_date(block.start_time, tz) != day:
            continue
        hours = block.duration_minutes / 60
        planned[block.area.value] += hours
        if block.linked_task_id is None or block.linked_task_id in completed:
            actual[block.area.value] += hours

    total_planned = sum(planned.values())
    total_actual = sum(actual.values())
    efficiency = round(total_actual / total_planned * 100) if total_planned > 0 else 0
    return PlannedVsActual(planned=planned, actual=actual, efficiency=efficiency)


def reflection_themes(reflections: Iterable[str], limit: int = 10) -> list[tuple[str, int]]:
    """Most frequent words longer than four letters across reflections."""
    counts: Counter[str] = Counter()
    for text in reflections:
        counts.update(word for word in _WORD.findall(text.lower()) if len(word) > 4)
    return counts.most_common(limit)


def time_to_goal(tasks: list[Task], goals: list[Goal]) -> list[GoalEstimate]:
    """Estimate the days left on each open top-level goal.

    Assumes one task is finished per day. Progress here counts only the
    goal's direct tasks.

    Args:
        tasks: All of the user's tasks
        goals: All of the user's goals

    Returns:
        One GoalEstimate per incomplete goal without a known parent
    """
    known_ids = {goal.id for goal in goals if goal.id}
    estimates = []
    for goal in goals:
        if goal.completed or (goal.parent_goal_id and goal.parent_goal_id in known_ids):
            continue
        goal_tasks = [task for task in tasks if goal.id and task.goal_id == goal.id]
        done = sum(1 for task in goal_tasks if task.completed)
        remaining = len(goal_tasks) - done
        estimates.append(
            GoalEstimate(
                goal_id=goal.id,
                title=goal.title,
                remaining_tasks=remaining,
                total_tasks=len(goal_tasks),
                estimated_days=remaining,
                progress=round_half_up(100 * done / len(goal_tasks)) if goal_tasks else 0,
            )
        )
    return estimates


def values_trend(ratings: Iterable[ValueRating], recent: int = 3) -> ValuesTrend:
    """Classify each value by how its latest ratings compare with older ones.

    The mean of the last `recent` ratings is compared with the mean of all
    earlier ones; a shift of more than one point either way marks the value
    as declining or improving. Values without earlier ratings are stable.
    """
    by_name: dict[str, list[float]] = {}
    for rating in sorted(ratings, key=lambda rating: rating.timestamp):
        by_name.setdefault(rating.name, []).append(rating.daily_rating)

    trend = ValuesTrend()
    for name, history in by_name.items():
        older, latest = history[:-recent], history[-recent:]
        if not older:
            trend.stable.append(name)
            continue
        latest_mean = sum(latest) / len(latest)
        older_mean = sum(older) / len(older)
        if latest_mean < older_mean - 1:
            trend.declining.append(name)
        elif latest_mean > older_mean + 1:
            trend.improving.append(name)
        else:
            trend.stable.append(name)
    return trend


__all__ = [
    "AnalyticsBucket",
    "GoalEstimate",
    "PlannedVsActual",
    "TimeRange",
    "ValuesTrend",
    "bucket",
    "date_label",
    "fitness_series",
    "goal_progress_snapshot",
    "local_date",
    "nutrition_series",
    "planned_vs_actual",
    "reflection_themes",
    "streak_snapshot",
    "time_allocation",
    "time_allocation_series",
    "time_to_goal",
    "values_series",
    "values_trend",
    "window",
]

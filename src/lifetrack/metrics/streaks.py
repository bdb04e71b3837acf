"""Habit streak calculation.

A streak counts consecutive calendar-day completions. The baseline is
evaluated before a completion is committed; the commit step then advances,
restarts, or leaves the streak alone.
"""

import logging
from dataclasses import replace
from datetime import date

from ..models import Habit

logger = logging.getLogger(__name__)


def streak_baseline(last_done: date | None, current_streak: int, today: date | None = None) -> int:
    """Streak value to build on before recording a completion today.

    Args:
        last_done: Date of the previous completion, if any
        current_streak: Stored streak
        today: Reference date; defaults to today

    Returns:
        current_streak when last done today or yesterday, otherwise 0
    """
    if last_done is None:
        return 0

    today = today or date.today()
    days_since = (today - last_done).days

    # Future dates come from clock skew; treat as done today
    if days_since <= 1:
        return max(0, current_streak)
    return 0


def complete_habit(habit: Habit, today: date | None = None) -> Habit:
    """Record a completion of habit on today.

    Args:
        habit: Habit being completed
        today: Completion date; defaults to today

    Returns:
        Updated copy of habit. Unchanged when already completed today.
    """
    today = today or date.today()

    if habit.last_done is not None and habit.last_done >= today:
        logger.debug(f"Habit '{habit.name}' already completed today, streak stays {habit.streak}")
        return habit

    baseline = streak_baseline(habit.last_done, habit.streak, today)
    updated = replace(habit, streak=baseline + 1, last_done=today)
    logger.info(f"Habit '{habit.name}' completed, streak {habit.streak} -> {updated.streak}")
    return updated


def current_streak(habit: Habit, today: date | None = None) -> int:
    """Streak as it should be shown on today, zero once broken."""
    return streak_baseline(habit.last_done, habit.streak, today)


def current_streaks(habits: list[Habit], today: date | None = None) -> dict[str, int]:
    """Current streak for every habit, keyed by habit ID (or name)."""
    today = today or date.today()
    return {habit.id or habit.name: current_streak(habit, today) for habit in habits}


__all__ = [
    "complete_habit",
    "current_streak",
    "current_streaks",
    "streak_baseline",
]

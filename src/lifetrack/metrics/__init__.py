"""Derived-metrics module for lifetrack.

Provides habit streaks, weighted goal progress and time-bucketed analytics.
"""

from .analytics import (
    AnalyticsBucket,
    GoalEstimate,
    PlannedVsActual,
    TimeRange,
    ValuesTrend,
    bucket,
    fitness_series,
    goal_progress_snapshot,
    nutrition_series,
    planned_vs_actual,
    reflection_themes,
    streak_snapshot,
    time_allocation,
    time_allocation_series,
    time_to_goal,
    values_series,
    values_trend,
)
from .goals import GoalProgress, all_goal_progress, goal_progress, goal_progress_report
from .streaks import complete_habit, current_streak, current_streaks, streak_baseline

__all__ = [
    "AnalyticsBucket",
    "GoalEstimate",
    "GoalProgress",
    "PlannedVsActual",
    "TimeRange",
    "ValuesTrend",
    "all_goal_progress",
    "bucket",
    "complete_habit",
    "current_streak",
    "current_streaks",
    "fitness_series",
    "goal_progress",
    "goal_progress_report",
    "goal_progress_snapshot",
    "nutrition_series",
    "planned_vs_actual",
    "reflection_themes",
    "streak_baseline",
    "streak_snapshot",
    "time_allocation",
    "time_allocation_series",
    "time_to_goal",
    "values_series",
    "values_trend",
]

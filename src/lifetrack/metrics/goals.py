"""Weighted hierarchical goal progress.

Progress blends the completion of a goal's direct tasks with the recursive
progress of its sub-goals. It is recomputed on every read and never stored.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..models import Goal, Task

# Weight of each contributing group when present
TASK_WEIGHT = 50
SUBGOAL_WEIGHT = 50


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class GoalProgress:
    """Progress row for one top-level goal."""

    goal_id: str | None
    title: str
    weight: int
    progress: int
    weighted_progress: int
    completed: bool


def _progress(
    goal_id: str,
    tasks: list[Task],
    goals: list[Goal],
    ancestry: frozenset[str],
) -> int:
    """Percentage progress; a goal already on the path counts as 0."""
    if goal_id in ancestry:
        return 0
    ancestry = ancestry | {goal_id}

    goal_tasks = [task for task in tasks if task.goal_id == goal_id]
    sub_goals = [goal for goal in goals if goal.parent_goal_id == goal_id and goal.id]

    if not goal_tasks and not sub_goals:
        return 0

    total_weight = 0.0
    completed_weight = 0.0

    if goal_tasks:
        done = sum(1 for task in goal_tasks if task.completed)
        total_weight += TASK_WEIGHT
        completed_weight += TASK_WEIGHT * done / len(goal_tasks)

    if sub_goals:
        sub_progress = [_progress(goal.id or "", tasks, goals, ancestry) for goal in sub_goals]
        total_weight += SUBGOAL_WEIGHT
        completed_weight += SUBGOAL_WEIGHT * sum(sub_progress) / (100 * len(sub_progress))

    return min(100, max(0, round_half_up(100 * completed_weight / total_weight)))


def goal_progress(goal_id: str, tasks: list[Task], goals: list[Goal]) -> int:
    """Progress of a goal as a whole percentage.

    Args:
        goal_id: Goal to evaluate
        tasks: All of the user's tasks
        goals: All of the user's goals

    Returns:
        Progress in 0..100; 0 for a goal with nothing under it
    """
    return _progress(goal_id, tasks, goals, frozenset())


def all_goal_progress(tasks: list[Task], goals: list[Goal]) -> dict[str, int]:
    """Progress of every goal, keyed by goal ID."""
    return {goal.id: goal_progress(goal.id, tasks, goals) for goal in goals if goal.id}


def goal_progress_report(tasks: list[Task], goals: list[Goal]) -> list[GoalProgress]:
    """Progress rows for top-level goals, heaviest first.

    Args:
        tasks: All of the user's tasks
        goals: All of the user's goals

    Returns:
        One GoalProgress per goal without a parent, sorted by weight descending
    """
    known_ids = {goal.id for goal in goals if goal.id}
    rows = []
    for goal in goals:
        if goal.parent_goal_id and goal.parent_goal_id in known_ids:
            continue
        progress = goal_progress(goal.id, tasks, goals) if goal.id else 0
        rows.append(
            GoalProgress(
                goal_id=goal.id,
                title=goal.title,
                weight=goal.weight,
                progress=progress,
                weighted_progress=round_half_up(progress * goal.weight / 100),
                completed=goal.completed,
            )
        )
    return sorted(rows, key=lambda row: row.weight, reverse=True)


__all__ = [
    "GoalProgress",
    "SUBGOAL_WEIGHT",
    "TASK_WEIGHT",
    "all_goal_progress",
    "goal_progress",
    "goal_progress_report",
    "round_half_up",
]

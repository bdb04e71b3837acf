"""Goal planning and reflection summaries from free text."""

import logging
from dataclasses import dataclass, field
from typing import Any

from .errors import MalformedResponseError
from .parsing import find_json_object
from .service import ExtractionService

logger = logging.getLogger(__name__)

GOAL_PLAN_PROMPT = """Parse the input into structured goals with linked tasks and habits.
Return JSON:
{
  "goals": [{title, weight (importance 1-100), parent_index (goals index, null for top-level)}],
  "tasks": [{title, goal_index (index in goals array)}],
  "habits": [{name, frequency, goal_index}]
}
Identify hierarchy: main goals, then sub-goals, then tasks/habits.
Return ONLY valid JSON."""

REFLECTION_PROMPT = (
    "Summarize the key themes and patterns from these reflections. Be concise and actionable."
)

NO_PATTERNS = "No patterns identified yet."


@dataclass
class GoalPlan:
    """Goal hierarchy with tasks and habits linked by goal index."""

    goals: list[dict[str, Any]] = field(default_factory=list)
    tasks: list[dict[str, Any]] = field(default_factory=list)
    habits: list[dict[str, Any]] = field(default_factory=list)

    def items_for_goal(self, goal_index: int) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Tasks and habits linked to the goal at goal_index."""
        tasks = [task for task in self.tasks if task.get("goal_index") == goal_index]
        habits = [habit for habit in self.habits if habit.get("goal_index") == goal_index]
        return tasks, habits


def _linked(items: Any, goal_count: int) -> list[dict[str, Any]]:
    """Keep objects whose goal_index points into the goals array."""
    if not isinstance(items, list):
        return []
    linked = []
    for item in items:
        if not isinstance(item, dict):
            continue
        index = item.get("goal_index")
        if not isinstance(index, int) or not 0 <= index < goal_count:
            item = {**item, "goal_index": None}
        linked.append(item)
    return linked


class CapturePlanner:
    """Service-backed helpers beyond plain capture extraction."""

    def __init__(
        self,
        service: ExtractionService,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> None:
        """Initialize planner.

        Args:
            service: Text-understanding service
            max_tokens: Output token budget per call
            temperature: Sampling temperature
        """
        self._service = service
        self._max_tokens = max_tokens
        self._temperature = temperature

    def extract_goal_plan(self, text: str) -> GoalPlan:
        """Break a description of ambitions into a goal tree.

        Args:
            text: Free text describing goals

        Returns:
            GoalPlan; empty when the output cannot be parsed
        """
        if not text.strip():
            return GoalPlan()

        response_text = self._service.complete(
            GOAL_PLAN_PROMPT,
            text,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )

        try:
            payload = find_json_object(response_text)
        except MalformedResponseError as e:
            logger.warning(f"Discarding malformed goal plan: {e}")
            return GoalPlan()

        raw_goals = payload.get("goals")
        if not isinstance(raw_goals, list):
            raw_goals = []
        goals = [goal for goal in raw_goals if isinstance(goal, dict)]
        return GoalPlan(
            goals=goals,
            tasks=_linked(payload.get("tasks"), len(goals)),
            habits=_linked(payload.get("habits"), len(goals)),
        )

    def summarize_reflections(self, reflections: list[str]) -> str:
        """Summarize recurring themes across journal reflections.

        Args:
            reflections: Reflection texts, most recent first

        Returns:
            Summary text, or a placeholder when there is nothing to say
        """
        entries = [entry.strip() for entry in reflections if entry.strip()]
        if not entries:
            return NO_PATTERNS

        response_text = self._service.complete(
            REFLECTION_PROMPT,
            "\n\n".join(entries),
            max_tokens=512,
            temperature=self._temperature,
        )
        return response_text.strip() or NO_PATTERNS


__all__ = [
    "CapturePlanner",
    "GOAL_PLAN_PROMPT",
    "GoalPlan",
    "NO_PATTERNS",
    "REFLECTION_PROMPT",
]

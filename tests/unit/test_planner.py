"""Unit tests for goal planning and reflection summaries."""

import json

import pytest

from lifetrack.capture import CapturePlanner, MockExtractionService
from lifetrack.capture.planner import GOAL_PLAN_PROMPT, NO_PATTERNS, REFLECTION_PROMPT


class TestExtractGoalPlan:
    """Tests for CapturePlanner.extract_goal_plan()."""

    @pytest.fixture
    def service(self) -> MockExtractionService:
        """Create mock service."""
        return MockExtractionService()

    @pytest.fixture
    def planner(self, service: MockExtractionService) -> CapturePlanner:
        """Create planner over the mock service."""
        return CapturePlanner(service)

    def test_links_tasks_and_habits_to_goals(
        self, planner: CapturePlanner, service: MockExtractionService
    ) -> None:
        service.set_response(
            json.dumps(
                {
                    "goals": [
                        {"title": "Run a marathon", "weight": 80, "parent_index": None},
                        {"title": "Build endurance", "weight": 60, "parent_index": 0},
                    ],
                    "tasks": [{"title": "Sign up for race", "goal_index": 0}],
                    "habits": [{"name": "Run 5k", "frequency": "daily", "goal_index": 1}],
                }
            )
        )

        plan = planner.extract_goal_plan("I want to run a marathon next spring")

        assert [goal["title"] for goal in plan.goals] == ["Run a marathon", "Build endurance"]
        tasks, habits = plan.items_for_goal(0)
        assert [task["title"] for task in tasks] == ["Sign up for race"]
        assert habits == []
        assert plan.items_for_goal(1)[1][0]["name"] == "Run 5k"
        assert service.calls[0]["system"] == GOAL_PLAN_PROMPT

    def test_out_of_range_goal_index_is_unlinked(
        self, planner: CapturePlanner, service: MockExtractionService
    ) -> None:
        service.set_response(
            json.dumps(
                {
                    "goals": [{"title": "Read more"}],
                    "tasks": [{"title": "Buy books", "goal_index": 4}],
                    "habits": [{"name": "Read nightly", "goal_index": "0"}],
                }
            )
        )

        plan = planner.extract_goal_plan("read more books")

        assert plan.tasks[0]["goal_index"] is None
        assert plan.habits[0]["goal_index"] is None
        assert plan.items_for_goal(0) == ([], [])

    def test_malformed_output_returns_empty_plan(
        self, planner: CapturePlanner, service: MockExtractionService
    ) -> None:
        service.set_response("I am not sure what your goals are.")

        plan = planner.extract_goal_plan("be better")

        assert plan.goals == []
        assert plan.tasks == []
        assert plan.habits == []

    def test_empty_text_skips_service(
        self, planner: CapturePlanner, service: MockExtractionService
    ) -> None:
        planner.extract_goal_plan("  ")
        assert service.call_count == 0


class TestSummarizeReflections:
    """Tests for CapturePlanner.summarize_reflections()."""

    def test_no_reflections(self) -> None:
        service = MockExtractionService()
        assert CapturePlanner(service).summarize_reflections([" ", ""]) == NO_PATTERNS
        assert service.call_count == 0

    def test_joins_reflections(self) -> None:
        service = MockExtractionService(default_response="  Sleep drives your mood.  ")

        summary = CapturePlanner(service).summarize_reflections(["slept badly", "tired again"])

        assert summary == "Sleep drives your mood."
        call = service.calls[0]
        assert call["system"] == REFLECTION_PROMPT
        assert call["text"] == "slept badly\n\ntired again"
        assert call["max_tokens"] == 512

    def test_blank_answer_uses_placeholder(self) -> None:
        service = MockExtractionService(default_response="")
        assert CapturePlanner(service).summarize_reflections(["slept badly"]) == NO_PATTERNS

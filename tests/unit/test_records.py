"""Unit tests for building records from extraction results."""

from datetime import UTC, date, datetime

import pytest

from lifetrack.capture import ExtractionResult, materialize
from lifetrack.models import Frequency

NOW = datetime(2026, 10, 19, 15, 30, tzinfo=UTC)


class TestMaterialize:
    """Tests for materialize()."""

    @pytest.fixture
    def result(self) -> ExtractionResult:
        """Create a result touching every category."""
        return ExtractionResult(
            tasks=[
                {"title": "Call mom", "due_date": None},
                {"title": "Pay rent", "due_date": "2026-11-01"},
                {"title": "   "},
            ],
            habits=[
                {"name": "meditate"},
                {"name": "Run", "frequency": "Weekly"},
                {"frequency": "daily"},
            ],
            nutrition=[
                {"food_name": "oatmeal", "macros": {"calories": 150, "protein": "5"}},
                {"food_name": "coffee"},
            ],
            fitness=[{"exercise_name": " squats ", "sets": 3, "reps": 10, "weight": 135}],
            notes=[{"content": "felt great"}, {"content": ""}],
            goals=[
                {"title": "Get fit"},
                {"title": "Ship app", "weight": 90},
                {"title": "Learn piano", "weight": 250},
            ],
        )

    def test_tasks_default_due_today(self, result: ExtractionResult) -> None:
        records = materialize(result, user_id="u1", now=NOW)

        assert [task.title for task in records.tasks] == ["Call mom", "Pay rent"]
        assert records.tasks[0].due_date == date(2026, 10, 19)
        assert records.tasks[1].due_date == date(2026, 11, 1)

    def test_explicit_today_sets_default_due_date(self, result: ExtractionResult) -> None:
        records = materialize(result, now=NOW, today=date(2026, 10, 18))

        assert records.tasks[0].due_date == date(2026, 10, 18)
        assert records.tasks[1].due_date == date(2026, 11, 1)
        assert records.tasks[0].created_at == NOW
        assert all(task.user_id == "u1" for task in records.tasks)
        assert all(not task.completed for task in records.tasks)

    def test_habits_default_daily(self, result: ExtractionResult) -> None:
        records = materialize(result, now=NOW)

        assert [habit.name for habit in records.habits] == ["meditate", "Run"]
        assert records.habits[0].frequency == Frequency.DAILY
        assert records.habits[1].frequency == Frequency.WEEKLY
        assert records.habits[0].streak == 0
        assert records.habits[0].last_done is None

    def test_goals_default_medium_weight(self, result: ExtractionResult) -> None:
        records = materialize(result, now=NOW)

        assert [goal.weight for goal in records.goals] == [50, 90, 100]

    def test_nutrition_macros(self, result: ExtractionResult) -> None:
        records = materialize(result, now=NOW)

        oatmeal, coffee = records.nutrition
        assert oatmeal.macros.calories == 150.0
        assert oatmeal.macros.protein == 5.0
        assert oatmeal.macros.fat == 0.0
        assert coffee.macros.calories == 0.0
        assert oatmeal.timestamp == NOW

    def test_fitness_entry(self, result: ExtractionResult) -> None:
        records = materialize(result, now=NOW)

        entry = records.fitness[0]
        assert entry.exercise_name == "squats"
        assert entry.volume == 4050.0
        assert entry.cardio_minutes is None
        assert entry.timestamp == NOW

    def test_unnamed_items_are_dropped(self, result: ExtractionResult) -> None:
        records = materialize(result, now=NOW)

        assert len(records.notes) == 1
        assert records.total == 2 + 2 + 3 + 2 + 1 + 1

    def test_empty_result(self) -> None:
        assert materialize(ExtractionResult.empty(), now=NOW).total == 0

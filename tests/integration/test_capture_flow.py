"""Integration tests for the capture-to-metrics flow.

Runs captures through LifeTrackService with the mock extraction service and
an in-memory MongoDB, then reads dashboard and analytics back.
"""

import json
from datetime import UTC, date, datetime, timedelta
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest
from mongomock import MongoClient
from pymongo.errors import AutoReconnect

from lifetrack.capture import CaptureExtractor, MockExtractionService, PartialSaveError
from lifetrack.capture.batch import BATCH_PROMPT
from lifetrack.metrics import TimeRange
from lifetrack.models import Goal, Habit, LifeArea, NutritionEntry, RecordKind, Task, TimeBlock
from lifetrack.service import LifeTrackService
from lifetrack.storage import MongoRecordRepository

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=UTC)
TODAY = NOW.date()

CAPTURE_RESPONSE = json.dumps(
    {
        "tasks": [{"title": "Call mom", "due_date": None}],
        "habits": [{"name": "Meditate", "frequency": "daily"}],
        "nutrition": [{"food_name": "oatmeal", "macros": {"calories": 150, "protein": 5}}],
        "fitness": [{"exercise_name": "squats", "sets": 3, "reps": 10, "weight": 135}],
        "notes": [{"content": "felt rested"}],
        "goals": [],
    }
)


@pytest.fixture
def repository() -> MongoRecordRepository:
    """Create a repository over an in-memory database."""
    return MongoRecordRepository(MongoClient()["lifetrack_test"])


@pytest.fixture
def extraction_service() -> MockExtractionService:
    """Create mock extraction service."""
    return MockExtractionService(default_response=CAPTURE_RESPONSE)


@pytest.fixture
def service(
    extraction_service: MockExtractionService, repository: MongoRecordRepository
) -> LifeTrackService:
    """Create the service for user u1 in UTC."""
    return LifeTrackService(
        CaptureExtractor(extraction_service),
        repository=repository,
        user_id="u1",
        tz=UTC,
    )


class TestCapture:
    """Tests for capturing text through the service."""

    def test_capture_persists_every_category(
        self, service: LifeTrackService, repository: MongoRecordRepository
    ) -> None:
        outcome = service.capture("call mom, meditated, oatmeal and squats", now=NOW)

        assert {name: len(ids) for name, ids in outcome.saved_ids.items()} == {
            "tasks": 1,
            "habits": 1,
            "goals": 0,
            "nutrition": 1,
            "fitness": 1,
            "notes": 1,
        }
        tasks = repository.find(RecordKind.TASK, "u1", on=TODAY)
        assert [task["title"] for task in tasks] == ["Call mom"]
        assert outcome.records.tasks[0].id == tasks[0]["id"]
        assert repository.find(RecordKind.NOTE, "u1")[0]["content"] == "felt rested"

    def test_repeated_capture_uses_cache(
        self, service: LifeTrackService, extraction_service: MockExtractionService
    ) -> None:
        service.capture("call mom, meditated, oatmeal and squats", now=NOW)
        service.capture("Call mom, meditated,  oatmeal and squats", now=NOW)

        assert extraction_service.call_count == 1

    def test_capture_many_batches(
        self, service: LifeTrackService, extraction_service: MockExtractionService
    ) -> None:
        extraction_service.queue_response(
            json.dumps(
                [
                    {"notes": [{"content": "first"}]},
                    {"tasks": [{"title": "Second task"}]},
                    {"notes": [{"content": "third"}]},
                ]
            )
        )

        outcomes = service.capture_many(
            ["journal entry number one", "todo: the second task", "another journal entry three"],
            now=NOW,
        )

        assert extraction_service.call_count == 1
        assert extraction_service.calls[0]["system"] == BATCH_PROMPT
        assert outcomes[0].records.notes[0].content == "first"
        assert outcomes[1].records.tasks[0].title == "Second task"
        assert outcomes[2].records.notes[0].content == "third"

    def test_unchanged_edit_skips_extraction(
        self, service: LifeTrackService, extraction_service: MockExtractionService
    ) -> None:
        prior = service.capture("call mom tomorrow", now=NOW).result

        outcome = service.edit_capture("call mom tomorrow", "Call  mom tomorrow ", prior)

        assert outcome.changed is False
        assert outcome.parsed is prior
        assert extraction_service.call_count == 1

    def test_capture_without_repository(self, extraction_service: MockExtractionService) -> None:
        service = LifeTrackService(CaptureExtractor(extraction_service))

        outcome = service.capture("call mom", now=NOW)

        assert outcome.saved_ids == {}
        assert outcome.records.total == 5
        assert service.dashboard(TODAY).streaks == {}


class TestHabitCompletion:
    """Tests for completing habits through the service."""

    def test_streak_advances_and_persists(
        self, service: LifeTrackService, repository: MongoRecordRepository
    ) -> None:
        habit = Habit(name="Meditate", streak=4, last_done=TODAY - timedelta(days=1))
        habit_id = repository.create(RecordKind.HABIT, "u1", habit.to_dict())

        updated = service.complete_habit(habit_id, TODAY)

        assert updated is not None
        assert updated.streak == 5
        stored = repository.get(RecordKind.HABIT, habit_id)
        assert stored is not None
        assert stored["streak"] == 5
        assert stored["last_done"] == TODAY.isoformat()

    def test_second_completion_same_day_is_ignored(
        self, service: LifeTrackService, repository: MongoRecordRepository
    ) -> None:
        habit_id = repository.create(RecordKind.HABIT, "u1", Habit(name="Meditate").to_dict())

        service.complete_habit(habit_id, TODAY)
        again = service.complete_habit(habit_id, TODAY)

        assert again is not None
        assert again.streak == 1

    def test_missing_habit(self, service: LifeTrackService) -> None:
        assert service.complete_habit("0123456789abcdef01234567", TODAY) is None


class TestMetrics:
    """Tests for dashboard and analytics reads."""

    def test_dashboard(self, service: LifeTrackService, repository: MongoRecordRepository) -> None:
        goal_a = repository.create(RecordKind.GOAL, "u1", Goal(title="Get fit").to_dict())
        goal_b = repository.create(
            RecordKind.GOAL, "u1", Goal(title="Endurance", parent_goal_id=goal_a).to_dict()
        )
        for completed in (True, False):
            task = Task(title="a", goal_id=goal_a, completed=completed, due_date=TODAY)
            repository.create(RecordKind.TASK, "u1", task.to_dict())
        for completed in (True, True, False, False, False):
            task = Task(title="b", goal_id=goal_b, completed=completed, due_date=TODAY)
            repository.create(RecordKind.TASK, "u1", task.to_dict())

        habit = Habit(name="Meditate", streak=4, last_done=TODAY)
        habit_id = repository.create(RecordKind.HABIT, "u1", habit.to_dict())

        start = datetime(2026, 10, 19, 9, tzinfo=UTC)
        block = TimeBlock(start_time=start, end_time=start + timedelta(hours=2), area=LifeArea.WORK)
        repository.create(RecordKind.TIME_BLOCK, "u1", block.to_dict())

        dashboard = service.dashboard(TODAY)

        assert dashboard.goal_progress == {goal_a: 45, goal_b: 40}
        assert dashboard.streaks == {habit_id: 4}
        assert dashboard.active_habits == 1
        assert dashboard.total_tasks == 7
        assert dashboard.completed_tasks == 3
        assert dashboard.efficiency == 100

    def test_analytics_buckets_by_day(
        self, service: LifeTrackService, repository: MongoRecordRepository
    ) -> None:
        for day in (17, 18, 19):
            entry = NutritionEntry(
                food_name="meal",
                timestamp=datetime(2026, 10, day, 12, tzinfo=UTC),
            )
            repository.create(RecordKind.NUTRITION, "u1", entry.to_dict())
        habit = Habit(name="Meditate", streak=2, last_done=TODAY)
        repository.create(RecordKind.HABIT, "u1", habit.to_dict())

        series = service.analytics(TimeRange.WEEKLY, now=NOW)

        assert [row.date for row in series["nutrition"]] == [
            date(2026, 10, 17),
            date(2026, 10, 18),
            date(2026, 10, 19),
        ]
        assert series["streaks"][0].values == {"Meditate": 2.0}
        assert series["fitness"] == []
        assert series["goal_progress"] == []
        assert set(series) == {
            "time_allocation",
            "nutrition",
            "fitness",
            "values",
            "streaks",
            "goal_progress",
        }

    def test_captured_records_feed_analytics(self, service: LifeTrackService) -> None:
        service.capture("call mom, meditated, oatmeal and squats", now=NOW)

        series = service.analytics(TimeRange.DAILY, now=NOW)

        assert series["nutrition"][0].values["calories"] == 150.0
        assert series["fitness"][0].values["volume"] == 4050.0


class TestCaptureEdges:
    """Tests for capture time zones and storage failures."""

    def test_evening_capture_is_due_on_local_day(
        self, extraction_service: MockExtractionService, repository: MongoRecordRepository
    ) -> None:
        """Test that 20:30 in New York on the 19th is still the 19th."""
        service = LifeTrackService(
            CaptureExtractor(extraction_service),
            repository=repository,
            user_id="u1",
            tz=ZoneInfo("America/New_York"),
        )

        outcome = service.capture("call mom", now=datetime(2026, 10, 20, 0, 30, tzinfo=UTC))

        assert outcome.records.tasks[0].due_date == date(2026, 10, 19)
        assert service.dashboard(date(2026, 10, 19)).total_tasks == 1

    def test_storage_failure_reports_saved_ids(
        self, extraction_service: MockExtractionService, repository: MongoRecordRepository
    ) -> None:
        failing = MagicMock(wraps=repository)
        failing.create.side_effect = [
            repository.create(RecordKind.TASK, "u1", Task(title="Call mom").to_dict()),
            AutoReconnect("connection lost"),
        ]
        service = LifeTrackService(CaptureExtractor(extraction_service), repository=failing)

        with pytest.raises(PartialSaveError) as exc_info:
            service.capture("call mom, meditated, oatmeal and squats", now=NOW)

        saved = exc_info.value.saved_ids
        assert len(saved["tasks"]) == 1
        assert saved["habits"] == []
        assert "nutrition" not in saved

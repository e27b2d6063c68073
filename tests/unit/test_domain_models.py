"""
Unit tests for domain models.

These tests verify:
- Plan and exercise validation
- The versioned exercise-state blob (current and legacy formats)
- Snapshot and completed-workout row mapping
- Level thresholds, titles and subscription tier mapping
"""

import json
import pytest
from datetime import date, datetime, timezone


@pytest.mark.unit
class TestWorkoutPlan:
    """Tests for WorkoutPlan and ExerciseDefinition."""

    def test_default_plan_shape(self):
        """The built-in plan has five 45/15 exercises."""
        from domain.models import DEFAULT_WORKOUT_PLAN

        assert DEFAULT_WORKOUT_PLAN.total_exercises == 5
        assert all(ex.work_seconds == 45 and ex.rest_seconds == 15 for ex in DEFAULT_WORKOUT_PLAN.exercises)
        assert DEFAULT_WORKOUT_PLAN.xp_reward == 90

    def test_cycle_seconds(self):
        from domain.models import ExerciseDefinition

        assert ExerciseDefinition(name="Squats", work_seconds=40, rest_seconds=20).cycle_seconds == 60

    def test_work_seconds_must_be_positive(self):
        """A zero-length work phase is rejected."""
        from domain.models import ExerciseDefinition
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            ExerciseDefinition(name="Nothing", work_seconds=0)

    def test_plan_requires_exercises(self):
        from domain.models import WorkoutPlan
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            WorkoutPlan(title="Empty", duration_minutes=10, exercises=[])

    def test_estimate_calories_pro_rates(self):
        """Half the planned time earns half the calories."""
        from domain.models import DEFAULT_WORKOUT_PLAN

        assert DEFAULT_WORKOUT_PLAN.estimate_calories(15 * 60) == 160
        assert DEFAULT_WORKOUT_PLAN.estimate_calories(0) == 0


@pytest.mark.unit
class TestExerciseStateBlob:
    """Tests for reading stored exercise state."""

    def test_parse_current_version(self):
        from domain.models import ExerciseStateBlob

        raw = json.dumps(
            {
                "kind": "exercise_state",
                "version": 2,
                "exercises": [
                    {"name": "Plank", "work_seconds": 45, "rest_seconds": 15, "completed": True},
                ],
            }
        )
        blob = ExerciseStateBlob.parse(raw)

        assert blob.exercises[0].name == "Plank"
        assert blob.exercises[0].completed is True

    def test_parse_legacy_array(self):
        """Bare arrays of {name, duration, rest, completed} are upgraded."""
        from domain.models import ExerciseStateBlob

        raw = '[{"name": "Squats", "duration": 45, "rest": 15, "completed": false}]'
        blob = ExerciseStateBlob.parse(raw)

        assert blob.version == 2
        assert blob.exercises[0].work_seconds == 45
        assert blob.exercises[0].rest_seconds == 15
        assert blob.exercises[0].completed is False

    def test_parse_accepts_decoded_dict(self):
        from domain.models import ExerciseStateBlob

        blob = ExerciseStateBlob.parse({"kind": "exercise_state", "version": 2, "exercises": []})
        assert blob.exercises == []

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "not json",
            '"a string"',
            '{"kind": "something_else", "version": 2, "exercises": []}',
            '{"kind": "exercise_state", "version": 99, "exercises": []}',
            '[{"name": "Squats"}]',
            '[1, 2, 3]',
        ],
    )
    def test_unreadable_payloads_are_rejected(self, raw):
        """Unknown kinds, versions and shapes raise SnapshotFormatError."""
        from domain.models import ExerciseStateBlob, SnapshotFormatError

        with pytest.raises(SnapshotFormatError):
            ExerciseStateBlob.parse(raw)

    def test_snapshot_format_error_is_value_error(self):
        from domain.models import SnapshotFormatError

        assert issubclass(SnapshotFormatError, ValueError)


@pytest.mark.unit
class TestWorkoutProgressSnapshot:
    """Tests for snapshot row mapping."""

    def _row(self, **overrides):
        row = {
            "id": "snap-1",
            "user_id": "user-1",
            "session_id": "session-1",
            "workout_type": "Full Body HIIT",
            "current_exercise_index": 2,
            "timer": 10,
            "is_resting": True,
            "duration": 150,
            "exercise_state": '[{"name": "Squats", "duration": 45, "rest": 15, "completed": true}]',
            "is_completed": False,
            "calories": 27,
            "intensity": "Intermediate",
            "workout_date": "2024-05-01",
            "created_at": "2024-05-01T10:00:00+00:00",
        }
        row.update(overrides)
        return row

    def test_from_row_maps_columns(self):
        from domain.models import WorkoutProgressSnapshot

        snap = WorkoutProgressSnapshot.from_row(self._row())

        assert snap.session_id == "session-1"
        assert snap.elapsed_timer_seconds == 10
        assert snap.total_elapsed_seconds == 150
        assert snap.is_resting is True
        assert snap.workout_date == date(2024, 5, 1)
        assert snap.exercise_state.exercises[0].completed is True

    def test_from_row_without_session_id_uses_row_id(self):
        """Rows written before session IDs existed are their own session."""
        from domain.models import WorkoutProgressSnapshot

        snap = WorkoutProgressSnapshot.from_row(self._row(session_id=None))
        assert snap.session_id == "snap-1"

    def test_from_row_rejects_bad_state(self):
        from domain.models import SnapshotFormatError, WorkoutProgressSnapshot

        with pytest.raises(SnapshotFormatError):
            WorkoutProgressSnapshot.from_row(self._row(exercise_state="{}"))

    def test_to_row_writes_tagged_blob(self):
        from domain.models import WorkoutProgressSnapshot

        row = WorkoutProgressSnapshot.from_row(self._row()).to_row()
        stored = json.loads(row["exercise_state"])

        assert stored["kind"] == "exercise_state"
        assert stored["version"] == 2
        assert row["timer"] == 10
        assert row["duration"] == 150
        assert row["workout_date"] == "2024-05-01"


@pytest.mark.unit
class TestCompletedWorkoutRecord:
    """Tests for completed workout rows."""

    def test_summary_note(self):
        from domain.models import CompletedWorkoutRecord, ExerciseRuntimeState

        exercises = [
            ExerciseRuntimeState(name="A", work_seconds=30, completed=True),
            ExerciseRuntimeState(name="B", work_seconds=30, completed=False),
        ]
        assert CompletedWorkoutRecord.summary_note(exercises) == "Completed 1 of 2 exercises"

    def test_row_round_trip_keeps_exercises(self):
        from domain.models import CompletedWorkoutRecord, ExerciseRuntimeState

        record = CompletedWorkoutRecord(
            user_id="user-1",
            workout_type="Full Body HIIT",
            duration_seconds=300,
            exercise_data=[ExerciseRuntimeState(name="A", work_seconds=30, completed=True)],
            xp_earned=90,
            completed_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        row = record.to_row()
        restored = CompletedWorkoutRecord.from_row({**row, "id": "w-1"})

        assert row["duration"] == 300
        assert restored.id == "w-1"
        assert restored.duration_seconds == 300
        assert restored.exercise_data[0].completed is True


@pytest.mark.unit
class TestLevels:
    """Tests for level thresholds and titles."""

    @pytest.mark.parametrize("level,threshold", [(1, 500), (2, 1000), (7, 3500)])
    def test_threshold(self, level, threshold):
        from domain.models import xp_threshold

        assert xp_threshold(level) == threshold

    @pytest.mark.parametrize(
        "level,title",
        [(1, "Fitness Rookie"), (3, "Fitness Rookie"), (4, "Fitness Enthusiast"), (7, "Fitness Master")],
    )
    def test_level_title(self, level, title):
        from domain.models import level_title

        assert level_title(level) == title

    def test_percent_to_next_level(self):
        from domain.models import UserStats

        assert UserStats(user_id="u", level=1, xp=250).percent_to_next_level == 50.0


@pytest.mark.unit
class TestSubscriptionTiers:
    """Tests for the price-to-tier mapping."""

    @pytest.mark.parametrize(
        "amount,tier",
        [(None, "Basic"), (0, "Basic"), (999, "Basic"), (1000, "Pro"), (1999, "Pro"), (2000, "Elite")],
    )
    def test_tier_from_amount(self, amount, tier):
        from domain.models import tier_from_amount

        assert tier_from_amount(amount).value == tier

    def test_tier_from_price_id(self):
        from domain.models import SubscriptionTier, tier_from_price_id

        price_ids = {SubscriptionTier.BASIC: "", SubscriptionTier.PRO: "price_pro", SubscriptionTier.ELITE: "price_elite"}

        assert tier_from_price_id("price_elite", price_ids) == "Elite"
        assert tier_from_price_id("price_other", price_ids) == "Unknown"
        assert tier_from_price_id("", price_ids) == "Unknown"

    def test_parse_tier(self):
        from domain.models import SubscriptionTier

        assert SubscriptionTier.parse("Pro") is SubscriptionTier.PRO
        assert SubscriptionTier.parse("pro") is None

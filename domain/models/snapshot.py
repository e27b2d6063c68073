"""
Workout progress snapshots and the versioned exercise-state blob.

Snapshots are append-only rows: every periodic save, pause, early end and
completion writes a new one. They are tied together by an explicit
session_id minted when a tracker starts.

The exercise list travels inside the snapshot as a tagged record:

    {"kind": "exercise_state", "version": 2, "exercises": [...]}

Rows written by the legacy client hold a bare JSON array of
{name, duration, rest, completed}; those are upgraded on read (version 1).
Anything else is rejected with SnapshotFormatError.
"""

import json
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from domain.models.exercise import ExerciseRuntimeState

EXERCISE_STATE_KIND = "exercise_state"
EXERCISE_STATE_VERSION = 2
LEGACY_EXERCISE_STATE_VERSION = 1


class SnapshotFormatError(ValueError):
    """Raised when a persisted exercise-state payload cannot be read."""


class ExerciseStateBlob(BaseModel):
    """Tagged, versioned container for the runtime exercise list."""

    kind: Literal["exercise_state"] = EXERCISE_STATE_KIND
    version: Literal[2] = EXERCISE_STATE_VERSION
    exercises: List[ExerciseRuntimeState] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def parse(cls, raw: Union[str, bytes, Dict[str, Any], List[Any], None]) -> "ExerciseStateBlob":
        """
        Read a stored payload, upgrading legacy arrays.

        Args:
            raw: JSON text, an already-decoded dict/list, or None

        Returns:
            ExerciseStateBlob at the current version

        Raises:
            SnapshotFormatError: unreadable JSON, unknown kind/version, or bad shape
        """
        if raw is None:
            raise SnapshotFormatError("exercise state is missing")

        data: Any = raw
        if isinstance(raw, (str, bytes)):
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                raise SnapshotFormatError(f"exercise state is not valid JSON: {e}") from e

        if isinstance(data, list):
            return cls._upgrade_legacy(data)

        if not isinstance(data, dict):
            raise SnapshotFormatError(f"unexpected exercise state type: {type(data).__name__}")

        if data.get("kind") != EXERCISE_STATE_KIND:
            raise SnapshotFormatError(f"unexpected exercise state kind: {data.get('kind')!r}")
        if data.get("version") != EXERCISE_STATE_VERSION:
            raise SnapshotFormatError(f"unsupported exercise state version: {data.get('version')!r}")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SnapshotFormatError(f"invalid exercise state: {e}") from e

    @classmethod
    def _upgrade_legacy(cls, items: List[Any]) -> "ExerciseStateBlob":
        exercises = []
        for item in items:
            if not isinstance(item, dict):
                raise SnapshotFormatError("legacy exercise state entries must be objects")
            try:
                exercises.append(
                    ExerciseRuntimeState(
                        name=item["name"],
                        work_seconds=item["duration"],
                        rest_seconds=item.get("rest", 0),
                        completed=bool(item.get("completed", False)),
                    )
                )
            except (KeyError, ValidationError) as e:
                raise SnapshotFormatError(f"invalid legacy exercise entry: {e}") from e
        return cls(exercises=exercises)


class WorkoutProgressSnapshot(BaseModel):
    """A persisted point-in-time copy of tracker state."""

    id: Optional[str] = None
    user_id: str
    session_id: str
    workout_type: str
    current_exercise_index: int = Field(default=0, ge=0)
    elapsed_timer_seconds: int = Field(default=0, ge=0)
    is_resting: bool = False
    total_elapsed_seconds: int = Field(default=0, ge=0)
    exercise_state: ExerciseStateBlob = Field(default_factory=ExerciseStateBlob)
    is_completed: bool = False
    calories: int = Field(default=0, ge=0)
    intensity: Optional[str] = None
    workout_date: date = Field(default_factory=lambda: datetime.now(timezone.utc).date())
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the user_workout_progress row shape."""
        row = {
            "user_id": self.user_id,
            "session_id": self.session_id,
            "workout_type": self.workout_type,
            "current_exercise_index": self.current_exercise_index,
            "timer": self.elapsed_timer_seconds,
            "is_resting": self.is_resting,
            "duration": self.total_elapsed_seconds,
            "exercise_state": self.exercise_state.to_json(),
            "is_completed": self.is_completed,
            "calories": self.calories,
            "intensity": self.intensity,
            "workout_date": self.workout_date.isoformat(),
            "created_at": self.created_at.isoformat(),
        }
        if self.id:
            row["id"] = self.id
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "WorkoutProgressSnapshot":
        """
        Build a snapshot from a stored row.

        Raises:
            SnapshotFormatError: if the exercise state cannot be read
        """
        return cls(
            id=row.get("id"),
            user_id=row["user_id"],
            session_id=row.get("session_id") or row.get("id") or "",
            workout_type=row.get("workout_type") or "",
            current_exercise_index=row.get("current_exercise_index") or 0,
            elapsed_timer_seconds=row.get("timer") or 0,
            is_resting=bool(row.get("is_resting")),
            total_elapsed_seconds=row.get("duration") or 0,
            exercise_state=ExerciseStateBlob.parse(row.get("exercise_state")),
            is_completed=bool(row.get("is_completed")),
            calories=row.get("calories") or 0,
            intensity=row.get("intensity"),
            workout_date=row.get("workout_date") or datetime.now(timezone.utc).date(),
            created_at=row.get("created_at") or datetime.now(timezone.utc),
        )

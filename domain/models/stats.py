"""
User progression stats and completed-workout records.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from domain.models.exercise import ExerciseRuntimeState
from domain.models.snapshot import ExerciseStateBlob

# XP needed to leave a level is level * XP_PER_LEVEL
XP_PER_LEVEL = 500


def xp_threshold(level: int) -> int:
    """XP required to advance past the given level."""
    return level * XP_PER_LEVEL


def level_title(level: int) -> str:
    if level <= 3:
        return "Fitness Rookie"
    if level <= 6:
        return "Fitness Enthusiast"
    return "Fitness Master"


class UserStats(BaseModel):
    """Per-user aggregate stats (user_stats row)."""

    user_id: str
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    workouts_completed: int = Field(default=0, ge=0)
    last_workout_date: Optional[date] = None

    @property
    def xp_to_next_level(self) -> int:
        return xp_threshold(self.level)

    @property
    def percent_to_next_level(self) -> float:
        return round(min(self.xp / self.xp_to_next_level, 1.0) * 100, 1)

    def to_row(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "level": self.level,
            "xp": self.xp,
            "streak": self.streak,
            "workouts_completed": self.workouts_completed,
            "last_workout_date": self.last_workout_date.isoformat() if self.last_workout_date else None,
        }


class CompletedWorkoutRecord(BaseModel):
    """Immutable record written once when a plan is exhausted (workouts row)."""

    id: Optional[str] = None
    user_id: str
    workout_type: str
    duration_seconds: int = Field(..., ge=0)
    calories_burned: int = Field(default=0, ge=0)
    exercise_data: List[ExerciseRuntimeState] = Field(default_factory=list)
    xp_earned: int = Field(default=0, ge=0)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    notes: Optional[str] = None

    @staticmethod
    def summary_note(exercises: List[ExerciseRuntimeState]) -> str:
        done = sum(1 for ex in exercises if ex.completed)
        return f"Completed {done} of {len(exercises)} exercises"

    def to_row(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "workout_type": self.workout_type,
            "duration": self.duration_seconds,
            "calories_burned": self.calories_burned,
            "exercise_data": ExerciseStateBlob(exercises=self.exercise_data).model_dump(mode="json"),
            "xp_earned": self.xp_earned,
            "completed_at": self.completed_at.isoformat(),
            "notes": self.notes,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CompletedWorkoutRecord":
        """
        Build a record from a workouts row.

        Raises:
            SnapshotFormatError: if exercise_data cannot be read
        """
        raw_exercises = row.get("exercise_data")
        return cls(
            id=row.get("id"),
            user_id=row["user_id"],
            workout_type=row.get("workout_type") or "",
            duration_seconds=row.get("duration") or 0,
            calories_burned=row.get("calories_burned") or 0,
            exercise_data=ExerciseStateBlob.parse(raw_exercises).exercises if raw_exercises else [],
            xp_earned=row.get("xp_earned") or 0,
            completed_at=row.get("completed_at") or datetime.now(timezone.utc),
            notes=row.get("notes"),
        )

"""
Workout plan aggregate.

A plan is the ordered list of exercises a tracker runs through, plus the
summary figures (duration, calories) used for XP and calorie estimates.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from domain.models.exercise import ExerciseDefinition

# XP granted per planned minute when a plan is completed
XP_PER_PLAN_MINUTE = 3


class WorkoutPlan(BaseModel):
    """
    Immutable workout plan.

    Examples:
        >>> plan = WorkoutPlan(
        ...     title="Quick Burn",
        ...     duration_minutes=1,
        ...     exercises=[ExerciseDefinition(name="Jumping Jacks", work_seconds=45, rest_seconds=15)],
        ... )
        >>> plan.xp_reward
        3
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    duration_minutes: int = Field(..., gt=0, description="Planned duration in minutes")
    difficulty: str = Field(default="Intermediate")
    calories_burn: int = Field(default=0, ge=0, description="Estimated calories for the full plan")
    exercises: List[ExerciseDefinition] = Field(..., min_length=1)

    @property
    def xp_reward(self) -> int:
        """XP earned for finishing the whole plan."""
        return self.duration_minutes * XP_PER_PLAN_MINUTE

    @property
    def total_exercises(self) -> int:
        return len(self.exercises)

    def estimate_calories(self, elapsed_seconds: int) -> int:
        """Pro-rate the plan's calorie estimate over elapsed time."""
        planned_seconds = self.duration_minutes * 60
        return round((elapsed_seconds / planned_seconds) * self.calories_burn)


DEFAULT_WORKOUT_PLAN = WorkoutPlan(
    title="Full Body HIIT",
    description="High intensity interval training targeting all major muscle groups",
    duration_minutes=30,
    difficulty="Intermediate",
    calories_burn=320,
    exercises=[
        ExerciseDefinition(name="Jumping Jacks", work_seconds=45, rest_seconds=15),
        ExerciseDefinition(name="Push-ups", work_seconds=45, rest_seconds=15),
        ExerciseDefinition(name="Mountain Climbers", work_seconds=45, rest_seconds=15),
        ExerciseDefinition(name="Squats", work_seconds=45, rest_seconds=15),
        ExerciseDefinition(name="Plank", work_seconds=45, rest_seconds=15),
    ],
)

"""
Domain layer for the FitCoach API.

This package contains pure domain models and the workout session
primitives, independent of infrastructure concerns (database, API,
external services).
"""

from domain.models import (
    CompletedWorkoutRecord,
    ExerciseDefinition,
    UserStats,
    WorkoutPlan,
    WorkoutProgressSnapshot,
)

__all__ = [
    "CompletedWorkoutRecord",
    "ExerciseDefinition",
    "UserStats",
    "WorkoutPlan",
    "WorkoutProgressSnapshot",
]

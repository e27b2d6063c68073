"""
Domain models for the FitCoach API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the core business concepts:
- ExerciseDefinition / ExerciseRuntimeState: one timed work/rest slot
- WorkoutPlan: the ordered exercises a tracker runs through
- WorkoutProgressSnapshot: a persisted point-in-time copy of tracker state
- CompletedWorkoutRecord: written once when a plan is finished
- UserStats: level, XP, streak
- Challenge / ChallengeMembership, Achievement, subscription records

Usage:
    >>> from domain.models import DEFAULT_WORKOUT_PLAN
    >>> DEFAULT_WORKOUT_PLAN.xp_reward
    90
"""

from domain.models.achievement import Achievement, EarnedAchievement
from domain.models.challenge import Challenge, ChallengeMembership, MAX_PROGRESS
from domain.models.exercise import ExerciseDefinition, ExerciseRuntimeState, fresh_runtime_states
from domain.models.plan import DEFAULT_WORKOUT_PLAN, WorkoutPlan, XP_PER_PLAN_MINUTE
from domain.models.snapshot import ExerciseStateBlob, SnapshotFormatError, WorkoutProgressSnapshot
from domain.models.stats import CompletedWorkoutRecord, UserStats, XP_PER_LEVEL, level_title, xp_threshold
from domain.models.subscription import (
    ProductRecord,
    SubscriberRecord,
    SubscriptionTier,
    tier_from_amount,
    tier_from_price_id,
)
from domain.models.video import VideoRecord

__all__ = [
    # Workout plans
    "ExerciseDefinition",
    "ExerciseRuntimeState",
    "fresh_runtime_states",
    "WorkoutPlan",
    "DEFAULT_WORKOUT_PLAN",
    "XP_PER_PLAN_MINUTE",
    # Persistence records
    "ExerciseStateBlob",
    "WorkoutProgressSnapshot",
    "SnapshotFormatError",
    "CompletedWorkoutRecord",
    # Progression
    "UserStats",
    "XP_PER_LEVEL",
    "xp_threshold",
    "level_title",
    "Achievement",
    "EarnedAchievement",
    # Challenges
    "Challenge",
    "ChallengeMembership",
    "MAX_PROGRESS",
    # Billing
    "SubscriptionTier",
    "SubscriberRecord",
    "ProductRecord",
    "tier_from_amount",
    "tier_from_price_id",
    # Chat
    "VideoRecord",
]

"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of the repository and
gateway interfaces for fast, isolated testing. No database, payments
provider or AI provider required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- fail_writes / error toggles to simulate datastore and upstream failures
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeStatsRepository, create_stats_repo

    # Direct instantiation
    repo = FakeStatsRepository()
    repo.seed([UserStats(user_id="user1", level=2)])

    # Factory function with pre-populated data
    repo = create_stats_repo(user_id="user1", level=1, xp=450)
"""
from typing import Optional, List
from datetime import date, datetime, timedelta, timezone

from domain.models.achievement import Achievement
from domain.models.challenge import Challenge
from domain.models.stats import CompletedWorkoutRecord, UserStats
from domain.models.video import VideoRecord

# Import all fake implementations
from tests.fakes.progress_repository import FakeProgressRepository
from tests.fakes.workout_repository import FakeWorkoutRepository
from tests.fakes.stats_repository import FakeStatsRepository, FakeProfileRepository
from tests.fakes.challenge_repository import FakeChallengeRepository, FakeAchievementRepository
from tests.fakes.chat_repository import (
    FakeChatRepository,
    FakeVideoRepository,
    FakeChatCompletionClient,
)
from tests.fakes.subscription_repository import (
    FakeSubscriptionRepository,
    FakePaymentsGateway,
    VALID_SIGNATURE,
)


# =============================================================================
# Factory Functions
# =============================================================================


def create_stats_repo(
    *,
    user_id: str = "test_user",
    level: int = 1,
    xp: int = 0,
    streak: int = 0,
    workouts_completed: int = 0,
    last_workout_date: Optional[date] = None,
) -> FakeStatsRepository:
    """
    Create a FakeStatsRepository holding one user's stats row.

    Args:
        user_id: Owner of the row
        level, xp, streak, workouts_completed, last_workout_date: Row values

    Returns:
        FakeStatsRepository with the row seeded
    """
    repo = FakeStatsRepository()
    repo.seed(
        [
            UserStats(
                user_id=user_id,
                level=level,
                xp=xp,
                streak=streak,
                workouts_completed=workouts_completed,
                last_workout_date=last_workout_date,
            )
        ]
    )
    return repo


def create_profile_repo(
    *,
    user_id: str = "test_user",
    username: Optional[str] = "test_runner",
    email: Optional[str] = "test_user@example.com",
) -> FakeProfileRepository:
    """Create a FakeProfileRepository with one profile."""
    repo = FakeProfileRepository()
    repo.seed(
        [
            {
                "id": user_id,
                "username": username,
                "full_name": None,
                "avatar_url": None,
                "email": email,
            }
        ]
    )
    return repo


def create_workout_repo(
    *,
    user_id: str = "test_user",
    num_workouts: int = 0,
) -> FakeWorkoutRepository:
    """
    Create a FakeWorkoutRepository with optional completed workouts, one
    per day going back from now.
    """
    repo = FakeWorkoutRepository()
    now = datetime.now(timezone.utc)
    repo.seed(
        [
            CompletedWorkoutRecord(
                id=f"workout-{i}",
                user_id=user_id,
                workout_type="Full Body HIIT",
                duration_seconds=1800,
                calories_burned=320,
                xp_earned=90,
                completed_at=now - timedelta(days=i),
                notes="Completed 5 of 5 exercises",
            )
            for i in range(num_workouts)
        ]
    )
    return repo


def create_challenge_repo(
    *,
    challenges: Optional[List[Challenge]] = None,
) -> FakeChallengeRepository:
    """
    Create a FakeChallengeRepository seeded with challenges. Defaults to a
    single free, open-ended challenge with ID "challenge-1".
    """
    repo = FakeChallengeRepository()
    repo.seed_challenges(
        challenges
        if challenges is not None
        else [
            Challenge(
                id="challenge-1",
                title="30-Day Plank",
                description="Hold a plank every day for a month",
                duration_days=30,
                xp_reward=200,
                first_place_reward=100,
                second_place_reward=50,
                third_place_reward=25,
            )
        ]
    )
    return repo


def create_achievement_repo() -> FakeAchievementRepository:
    """Create a FakeAchievementRepository with the built-in milestone definitions."""
    repo = FakeAchievementRepository()
    repo.seed_definitions(
        [
            Achievement(id="ach-first", name="First Workout", xp_reward=50),
            Achievement(id="ach-streak", name="3-Day Streak", xp_reward=100),
            Achievement(id="ach-level5", name="Level 5 Reached", xp_reward=150),
            Achievement(id="ach-warrior", name="Workout Warrior", xp_reward=200),
        ]
    )
    return repo


def create_video_repo() -> FakeVideoRepository:
    """Create a FakeVideoRepository with a small chest/legs/core catalog."""
    repo = FakeVideoRepository()
    repo.seed(
        [
            VideoRecord(
                id="video-pushup",
                name="Perfect Push-up",
                category="strength",
                muscle_group="chest",
                difficulty="beginner",
                video_url="https://videos.example.com/pushup.mp4",
            ),
            VideoRecord(
                id="video-squat",
                name="Bodyweight Squat",
                category="strength",
                muscle_group="legs",
                difficulty="beginner",
                video_url="https://videos.example.com/squat.mp4",
            ),
            VideoRecord(
                id="video-plank",
                name="Plank Basics",
                category="core",
                muscle_group="core",
                difficulty="beginner",
                video_url="https://videos.example.com/plank.mp4",
            ),
        ]
    )
    return repo


__all__ = [
    # Fakes
    "FakeProgressRepository",
    "FakeWorkoutRepository",
    "FakeStatsRepository",
    "FakeProfileRepository",
    "FakeChallengeRepository",
    "FakeAchievementRepository",
    "FakeChatRepository",
    "FakeVideoRepository",
    "FakeChatCompletionClient",
    "FakeSubscriptionRepository",
    "FakePaymentsGateway",
    "VALID_SIGNATURE",
    # Factories
    "create_stats_repo",
    "create_profile_repo",
    "create_workout_repo",
    "create_challenge_repo",
    "create_achievement_repo",
    "create_video_repo",
]

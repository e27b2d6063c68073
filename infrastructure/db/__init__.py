"""
Infrastructure Database Layer.

Supabase-backed implementations of the repository interfaces defined in
application.ports. Each repository takes an injected client so routers and
services can be tested against in-memory fakes.

Usage:
    from supabase import create_client
    from infrastructure.db import SupabaseProgressRepository, SupabaseStatsRepository

    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    progress_repo = SupabaseProgressRepository(client)
    stats_repo = SupabaseStatsRepository(client)
"""

from infrastructure.db.progress_repository import SupabaseProgressRepository
from infrastructure.db.workout_repository import SupabaseWorkoutRepository
from infrastructure.db.stats_repository import SupabaseStatsRepository
from infrastructure.db.profile_repository import SupabaseProfileRepository
from infrastructure.db.challenge_repository import SupabaseChallengeRepository
from infrastructure.db.achievement_repository import SupabaseAchievementRepository
from infrastructure.db.chat_repository import SupabaseChatRepository, SupabaseVideoRepository
from infrastructure.db.subscription_repository import SupabaseSubscriptionRepository

__all__ = [
    # Workout tracking
    "SupabaseProgressRepository",
    "SupabaseWorkoutRepository",

    # Progression
    "SupabaseStatsRepository",
    "SupabaseAchievementRepository",
    "SupabaseChallengeRepository",

    # Users and billing
    "SupabaseProfileRepository",
    "SupabaseSubscriptionRepository",

    # AI trainer
    "SupabaseChatRepository",
    "SupabaseVideoRepository",
]

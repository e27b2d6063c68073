"""
Infrastructure Layer for the FitCoach API.

Concrete implementations of the application ports:
- db/: Supabase database repositories
- payments/: Stripe payments gateway
"""

from infrastructure.db import (
    SupabaseProgressRepository,
    SupabaseWorkoutRepository,
    SupabaseStatsRepository,
    SupabaseAchievementRepository,
    SupabaseChallengeRepository,
    SupabaseProfileRepository,
    SupabaseSubscriptionRepository,
    SupabaseChatRepository,
    SupabaseVideoRepository,
)
from infrastructure.payments import StripePaymentsGateway

__all__ = [
    "SupabaseProgressRepository",
    "SupabaseWorkoutRepository",
    "SupabaseStatsRepository",
    "SupabaseAchievementRepository",
    "SupabaseChallengeRepository",
    "SupabaseProfileRepository",
    "SupabaseSubscriptionRepository",
    "SupabaseChatRepository",
    "SupabaseVideoRepository",
    "StripePaymentsGateway",
]

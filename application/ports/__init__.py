"""
Repository and Gateway Interfaces (Ports) for the FitCoach API.

This package defines abstract interfaces that decouple domain logic from
infrastructure (database, external services). Implementations are provided
in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the domain needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import ProgressRepository, StatsRepository

    class GamificationLedger:
        def __init__(self, stats_repo: StatsRepository):
            self.stats_repo = stats_repo
"""

# Workout session persistence
from application.ports.progress_repository import ProgressRepository
from application.ports.workout_repository import WorkoutRepository

# Stats, profile, achievements
from application.ports.stats_repository import StatsRepository
from application.ports.profile_repository import ProfileRepository
from application.ports.achievement_repository import AchievementRepository

# Challenges
from application.ports.challenge_repository import ChallengeRepository

# Chat trainer
from application.ports.chat_repository import ChatRepository, VideoRepository
from application.ports.completion_client import ChatCompletionClient

# Billing
from application.ports.subscription_repository import SubscriptionRepository
from application.ports.payments_gateway import (
    PaymentsGateway,
    CustomerInfo,
    SubscriptionInfo,
    PriceInfo,
    ProductInfo,
    WebhookEvent,
)

# Notifications
from application.ports.notifier import Notifier

__all__ = [
    # Workout sessions
    "ProgressRepository",
    "WorkoutRepository",
    # Stats/Profile/Achievements
    "StatsRepository",
    "ProfileRepository",
    "AchievementRepository",
    # Challenges
    "ChallengeRepository",
    # Chat
    "ChatRepository",
    "VideoRepository",
    "ChatCompletionClient",
    # Billing
    "SubscriptionRepository",
    "PaymentsGateway",
    "CustomerInfo",
    "SubscriptionInfo",
    "PriceInfo",
    "ProductInfo",
    "WebhookEvent",
    # Notifications
    "Notifier",
]

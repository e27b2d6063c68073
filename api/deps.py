"""
FastAPI Dependency Providers for the FitCoach API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations, so tests
can swap in the in-memory fakes with app.dependency_overrides.

Architecture:
- Settings and the Supabase client are cached per-process (lru_cache)
- Repository providers create new instances per-request
- The notification outbox, write queue and workout session manager are
  process-wide: trackers outlive the request that started them
- Auth providers wrap backend.auth

Usage in routers:
    from api.deps import get_current_user, get_stats_repo
    from application.ports import StatsRepository

    @router.get("/stats")
    def read_stats(
        user_id: str = Depends(get_current_user),
        stats_repo: StatsRepository = Depends(get_stats_repo),
    ):
        return stats_repo.get(user_id)

Testing:
    app.dependency_overrides[get_stats_repo] = lambda: FakeStatsRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

# Protocol types (interfaces)
from application.ports import (
    AchievementRepository,
    ChallengeRepository,
    ChatCompletionClient,
    ChatRepository,
    Notifier,
    PaymentsGateway,
    ProfileRepository,
    ProgressRepository,
    StatsRepository,
    SubscriptionRepository,
    VideoRepository,
    WorkoutRepository,
)
from application.use_cases import (
    CheckSubscriptionUseCase,
    CreateCheckoutUseCase,
    HandleStripeWebhookUseCase,
    SyncProductsUseCase,
)
from application.user_context import UserContext, UserContextLoader

# Concrete implementations
from infrastructure import (
    StripePaymentsGateway,
    SupabaseAchievementRepository,
    SupabaseChallengeRepository,
    SupabaseChatRepository,
    SupabaseProfileRepository,
    SupabaseProgressRepository,
    SupabaseStatsRepository,
    SupabaseSubscriptionRepository,
    SupabaseVideoRepository,
    SupabaseWorkoutRepository,
)
from backend.ai.chat_completion import OpenAIChatCompletionClient
from backend.core.challenge_service import ChallengeService
from backend.core.gamification import AchievementService, GamificationLedger
from backend.core.write_queue import WriteQueue
from backend.services.chat_service import ChatRelay
from backend.services.notifications import NotificationOutbox
from backend.services.workout_sessions import WorkoutSessionManager

from backend.settings import Settings, get_settings as _get_settings

from backend.auth import (
    get_current_user as _get_current_user,
    get_optional_user as _get_optional_user,
    get_token_email,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_progress_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ProgressRepository:
    return SupabaseProgressRepository(client)


def get_workout_repo(
    client: Client = Depends(get_supabase_client_required),
) -> WorkoutRepository:
    return SupabaseWorkoutRepository(client)


def get_stats_repo(
    client: Client = Depends(get_supabase_client_required),
) -> StatsRepository:
    return SupabaseStatsRepository(client)


def get_profile_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ProfileRepository:
    return SupabaseProfileRepository(client)


def get_challenge_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ChallengeRepository:
    return SupabaseChallengeRepository(client)


def get_achievement_repo(
    client: Client = Depends(get_supabase_client_required),
) -> AchievementRepository:
    return SupabaseAchievementRepository(client)


def get_chat_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ChatRepository:
    return SupabaseChatRepository(client)


def get_video_repo(
    client: Client = Depends(get_supabase_client_required),
) -> VideoRepository:
    return SupabaseVideoRepository(client)


def get_subscription_repo(
    client: Client = Depends(get_supabase_client_required),
) -> SubscriptionRepository:
    return SupabaseSubscriptionRepository(client)


# =============================================================================
# External Gateways
# =============================================================================


def get_payments_gateway(
    settings: Settings = Depends(get_settings),
) -> PaymentsGateway:
    """
    Get the Stripe payments gateway.

    Raises:
        HTTPException: 503 if the Stripe secret key is not configured
    """
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=503, detail="Payments not configured")
    return StripePaymentsGateway(settings.stripe_secret_key, settings.stripe_webhook_secret)


_completion_client: Optional[OpenAIChatCompletionClient] = None


def get_completion_client(
    settings: Settings = Depends(get_settings),
) -> ChatCompletionClient:
    """Get the process-wide chat completion client, building it on first use."""
    global _completion_client
    if _completion_client is None:
        _completion_client = OpenAIChatCompletionClient(settings)
    return _completion_client


def close_completion_client() -> None:
    """Close the completion client's connections, if one was built."""
    global _completion_client
    if _completion_client is not None:
        _completion_client.close()
        _completion_client = None


# =============================================================================
# Process-wide Services
# =============================================================================


@lru_cache
def get_notification_outbox() -> NotificationOutbox:
    """Per-process notification outbox drained by GET /notifications."""
    return NotificationOutbox()


def get_notifier(
    outbox: NotificationOutbox = Depends(get_notification_outbox),
) -> Notifier:
    return outbox


@lru_cache
def get_write_queue() -> WriteQueue:
    return WriteQueue(notifier=get_notification_outbox())


_session_manager: Optional[WorkoutSessionManager] = None


def get_session_manager() -> WorkoutSessionManager:
    """
    Get the process-wide workout session manager, building it on first use.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    global _session_manager
    if _session_manager is None:
        client = get_supabase_client_required()
        settings = _get_settings()
        outbox = get_notification_outbox()
        _session_manager = WorkoutSessionManager(
            progress_repo=SupabaseProgressRepository(client),
            workout_repo=SupabaseWorkoutRepository(client),
            ledger=GamificationLedger(
                SupabaseStatsRepository(client), notifier=outbox, write_queue=get_write_queue()
            ),
            write_queue=get_write_queue(),
            notifier=outbox,
            achievements=AchievementService(SupabaseAchievementRepository(client), notifier=outbox),
            tick_interval=settings.tick_interval_seconds,
            autosave_interval=settings.autosave_interval_seconds,
        )
    return _session_manager


def get_session_manager_if_started() -> Optional[WorkoutSessionManager]:
    """The session manager if one has been built, without building it."""
    return _session_manager


async def shutdown_session_manager() -> None:
    """Stop all live workout sessions, if the manager was ever built."""
    global _session_manager
    if _session_manager is not None:
        await _session_manager.shutdown()
        _session_manager = None


# =============================================================================
# Domain Services
# =============================================================================


def get_ledger(
    stats_repo: StatsRepository = Depends(get_stats_repo),
    notifier: Notifier = Depends(get_notifier),
    write_queue: WriteQueue = Depends(get_write_queue),
) -> GamificationLedger:
    """Ledger whose stats writes share the per-user queue with workout trackers."""
    return GamificationLedger(stats_repo, notifier=notifier, write_queue=write_queue)


def get_achievement_service(
    achievement_repo: AchievementRepository = Depends(get_achievement_repo),
    notifier: Notifier = Depends(get_notifier),
) -> AchievementService:
    return AchievementService(achievement_repo, notifier=notifier)


def get_challenge_service(
    challenge_repo: ChallengeRepository = Depends(get_challenge_repo),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
    ledger: GamificationLedger = Depends(get_ledger),
) -> ChallengeService:
    return ChallengeService(challenge_repo, profile_repo, ledger)


def get_chat_relay(
    completion_client: ChatCompletionClient = Depends(get_completion_client),
    chat_repo: ChatRepository = Depends(get_chat_repo),
    video_repo: VideoRepository = Depends(get_video_repo),
) -> ChatRelay:
    return ChatRelay(completion_client, chat_repo, video_repo)


# =============================================================================
# Use Case Providers
# =============================================================================


def get_create_checkout_use_case(
    gateway: PaymentsGateway = Depends(get_payments_gateway),
    subscription_repo: SubscriptionRepository = Depends(get_subscription_repo),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
    settings: Settings = Depends(get_settings),
) -> CreateCheckoutUseCase:
    return CreateCheckoutUseCase(
        gateway,
        subscription_repo,
        profile_repo,
        price_ids=settings.stripe_price_ids,
        app_url=settings.app_url,
    )


def get_check_subscription_use_case(
    gateway: PaymentsGateway = Depends(get_payments_gateway),
    subscription_repo: SubscriptionRepository = Depends(get_subscription_repo),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
    settings: Settings = Depends(get_settings),
) -> CheckSubscriptionUseCase:
    return CheckSubscriptionUseCase(
        gateway,
        subscription_repo,
        profile_repo,
        price_ids=settings.stripe_price_ids,
    )


def get_webhook_use_case(
    gateway: PaymentsGateway = Depends(get_payments_gateway),
    subscription_repo: SubscriptionRepository = Depends(get_subscription_repo),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
) -> HandleStripeWebhookUseCase:
    return HandleStripeWebhookUseCase(gateway, subscription_repo, profile_repo)


def get_sync_products_use_case(
    gateway: PaymentsGateway = Depends(get_payments_gateway),
    subscription_repo: SubscriptionRepository = Depends(get_subscription_repo),
) -> SyncProductsUseCase:
    return SyncProductsUseCase(gateway, subscription_repo)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> str:
    """
    Get the current authenticated user ID.

    Wraps backend.auth.get_current_user for dependency injection.

    Raises:
        HTTPException: 401 if authentication fails
    """
    return await _get_current_user(authorization=authorization, x_api_key=x_api_key)


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> Optional[str]:
    """
    Get the current user ID if authenticated, None otherwise.

    Used by the billing and chat endpoints, which also accept the user ID
    in the request body.
    """
    return await _get_optional_user(authorization=authorization, x_api_key=x_api_key)


def get_user_context_loader(
    stats_repo: StatsRepository = Depends(get_stats_repo),
) -> UserContextLoader:
    return UserContextLoader(stats_repo)


def get_user_context(
    user_id: str = Depends(get_current_user),
    authorization: Optional[str] = Header(None),
    loader: UserContextLoader = Depends(get_user_context_loader),
    session_manager: WorkoutSessionManager = Depends(get_session_manager),
) -> UserContext:
    """
    Get the UserContext for the current user.

    A user with a live workout tracker keeps sharing that tracker's context,
    so XP awarded elsewhere is not overwritten when the workout completes.
    A finished tracker stops being shared once its writes have landed.
    """
    context = session_manager.shared_context(user_id)
    if context is not None:
        return context
    return loader.load(user_id, email=get_token_email(authorization))


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_progress_repo",
    "get_workout_repo",
    "get_stats_repo",
    "get_profile_repo",
    "get_challenge_repo",
    "get_achievement_repo",
    "get_chat_repo",
    "get_video_repo",
    "get_subscription_repo",
    # Gateways
    "get_payments_gateway",
    "get_completion_client",
    "close_completion_client",
    # Process-wide services
    "get_notification_outbox",
    "get_notifier",
    "get_write_queue",
    "get_session_manager",
    "get_session_manager_if_started",
    "shutdown_session_manager",
    # Domain services
    "get_ledger",
    "get_achievement_service",
    "get_challenge_service",
    "get_chat_relay",
    # Use cases
    "get_create_checkout_use_case",
    "get_check_subscription_use_case",
    "get_webhook_use_case",
    "get_sync_products_use_case",
    # Authentication
    "get_current_user",
    "get_optional_user",
    "get_user_context_loader",
    "get_user_context",
]

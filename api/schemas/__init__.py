"""
Pydantic schemas for API requests and responses.

Organized by feature/domain:
- chat: AI trainer chat
- billing: Checkout, subscription status, webhooks, product sync
- workouts: Live workout sessions
- challenges: Community challenges
- profile: Profile, stats, achievements, notifications
"""

from api.schemas.chat import (
    FitnessChatRequest,
    FitnessChatResponse,
    FitnessChatErrorResponse,
    SuggestedVideo,
    ChatSuggestion,
)
from api.schemas.billing import (
    CheckoutRequest,
    CheckoutResponse,
    CheckSubscriptionRequest,
    CheckSubscriptionResponse,
    WebhookResponse,
    SyncProductsResponse,
    BillingErrorResponse,
)
from api.schemas.workouts import (
    StartSessionRequest,
    SessionStateResponse,
    EndSessionResponse,
)
from api.schemas.challenges import (
    ChallengeCreateRequest,
    ChallengeResponse,
    ProgressUpdateRequest,
    MembershipResponse,
    LeaderboardEntryResponse,
    ClaimRewardResponse,
)
from api.schemas.profile import (
    ProfileResponse,
    ProfileUpdateRequest,
    StatsResponse,
    AchievementResponse,
    NotificationResponse,
    NotificationListResponse,
)

__all__ = [
    # Chat
    "FitnessChatRequest",
    "FitnessChatResponse",
    "FitnessChatErrorResponse",
    "SuggestedVideo",
    "ChatSuggestion",
    # Billing
    "CheckoutRequest",
    "CheckoutResponse",
    "CheckSubscriptionRequest",
    "CheckSubscriptionResponse",
    "WebhookResponse",
    "SyncProductsResponse",
    "BillingErrorResponse",
    # Workouts
    "StartSessionRequest",
    "SessionStateResponse",
    "EndSessionResponse",
    # Challenges
    "ChallengeCreateRequest",
    "ChallengeResponse",
    "ProgressUpdateRequest",
    "MembershipResponse",
    "LeaderboardEntryResponse",
    "ClaimRewardResponse",
    # Profile
    "ProfileResponse",
    "ProfileUpdateRequest",
    "StatsResponse",
    "AchievementResponse",
    "NotificationResponse",
    "NotificationListResponse",
]

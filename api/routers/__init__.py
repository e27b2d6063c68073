"""
Router package for the FitCoach API.

This package contains all API routers organized by domain:
- health: Health and readiness checks
- chat: AI trainer chat
- billing: Checkout, subscription status, payments webhook, product sync
- workouts: Plan, live workout sessions and workout history
- challenges: Community challenges
- profile: Profile, stats and achievements
- notifications: Per-user notification outbox
"""

from api.routers.health import router as health_router
from api.routers.chat import router as chat_router
from api.routers.billing import router as billing_router
from api.routers.workouts import router as workouts_router
from api.routers.challenges import router as challenges_router
from api.routers.profile import router as profile_router
from api.routers.notifications import router as notifications_router

__all__ = [
    "health_router",
    "chat_router",
    "billing_router",
    "workouts_router",
    "challenges_router",
    "profile_router",
    "notifications_router",
]

"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter, Depends

from api.deps import get_session_manager_if_started, get_settings
from backend.services.workout_sessions import WorkoutSessionManager
from backend.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok"}


@router.get("/health/ready")
def readiness(
    settings: Settings = Depends(get_settings),
    session_manager: WorkoutSessionManager = Depends(get_session_manager_if_started),
):
    """
    Readiness details: which integrations are configured and how many
    workout sessions this process is running.
    """
    return {
        "status": "ok",
        "environment": settings.environment,
        "database": bool(settings.supabase_url and settings.supabase_key),
        "payments": bool(settings.stripe_secret_key),
        "ai": bool(settings.openai_api_key),
        "active_sessions": session_manager.active_count if session_manager else 0,
    }

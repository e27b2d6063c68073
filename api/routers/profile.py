"""
Profile router.

This router contains endpoints for:
- GET /profile - Get the caller's profile
- PATCH /profile - Update username, full name or avatar URL
- GET /stats - Level, XP, streak and workout count
- GET /achievements - Achievements the caller has earned
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.deps import (
    get_achievement_service,
    get_current_user,
    get_profile_repo,
    get_user_context,
)
from api.schemas.profile import (
    AchievementResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    StatsResponse,
)
from application.ports import ProfileRepository
from application.user_context import UserContext
from backend.core.gamification import AchievementService

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Profile"],
)


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_current_user),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
):
    """Get the caller's profile."""
    profile = profile_repo.get(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/profile", response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
):
    """
    Update the caller's profile.

    Only fields present in the body are changed. Avatar images are uploaded
    to storage by the client; only the resulting URL is stored here.
    """
    fields = request.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No profile fields to update")

    updated = profile_repo.update(user_id, fields)
    if updated is None:
        raise HTTPException(status_code=500, detail="Failed to update profile")

    logger.info(f"Profile updated for {user_id}")
    return updated


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    context: UserContext = Depends(get_user_context),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
):
    """Get the caller's stats with level title and progress to the next level."""
    profile = profile_repo.get(context.user_id) or {}
    return StatsResponse.from_stats(context.stats, profile.get("username"))


@router.get("/achievements", response_model=List[AchievementResponse])
def list_achievements(
    user_id: str = Depends(get_current_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
):
    """List achievements the caller has earned, newest first."""
    return [
        AchievementResponse(
            **earned.achievement.model_dump(),
            earned_at=earned.earned_at,
        )
        for earned in achievement_service.list_for_user(user_id)
    ]

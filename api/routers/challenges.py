"""
Challenges router.

This router contains endpoints for:
- GET /challenges - List challenges (all/joined/active/upcoming, search)
- POST /challenges - Create a challenge (creator joins for free)
- POST /challenges/{challenge_id}/join - Join, paying the XP join price
- PATCH /challenges/{challenge_id}/progress - Update progress (0..100)
- GET /challenges/{challenge_id}/leaderboard - Top 20 by progress
- POST /challenges/{challenge_id}/claim - Claim the completion reward

Domain errors (unknown challenge, wrong membership state, not enough XP)
are mapped to HTTP status codes by the application's exception handlers.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_challenge_service, get_current_user, get_user_context
from api.schemas.challenges import (
    ChallengeCreateRequest,
    ChallengeResponse,
    ClaimRewardResponse,
    LeaderboardEntryResponse,
    MembershipResponse,
    ProgressUpdateRequest,
)
from application.user_context import UserContext
from backend.core.challenge_service import ChallengeFilter, ChallengeService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/challenges",
    tags=["Challenges"],
)


@router.get("", response_model=List[ChallengeResponse])
def list_challenges(
    user_id: str = Depends(get_current_user),
    status_filter: ChallengeFilter = Query(ChallengeFilter.ALL, alias="filter"),
    search: Optional[str] = Query(None, max_length=200),
    service: ChallengeService = Depends(get_challenge_service),
):
    """
    List challenges as seen by the caller.

    Query Params:
        filter: all | joined | active | upcoming
        search: Case-insensitive text matched against title and description
    """
    listings = service.list_challenges(user_id, status_filter=status_filter, search=search)
    return [ChallengeResponse.from_listing(listing) for listing in listings]


@router.post("", response_model=ChallengeResponse, status_code=201)
def create_challenge(
    request: ChallengeCreateRequest,
    context: UserContext = Depends(get_user_context),
    service: ChallengeService = Depends(get_challenge_service),
):
    """Create a challenge. The creator is joined automatically."""
    created = service.create_challenge(context, request.to_challenge())
    return ChallengeResponse(**created.model_dump(), participants=1, is_joined=True)


@router.post("/{challenge_id}/join", response_model=MembershipResponse)
def join_challenge(
    challenge_id: str,
    context: UserContext = Depends(get_user_context),
    service: ChallengeService = Depends(get_challenge_service),
):
    """Join a challenge. The join price is deducted and a joining bonus awarded."""
    membership = service.join(context, challenge_id)
    return MembershipResponse.from_membership(membership)


@router.patch("/{challenge_id}/progress", response_model=MembershipResponse)
def update_challenge_progress(
    challenge_id: str,
    request: ProgressUpdateRequest,
    user_id: str = Depends(get_current_user),
    service: ChallengeService = Depends(get_challenge_service),
):
    """Set the caller's progress in a challenge."""
    membership = service.update_progress(user_id, challenge_id, request.progress)
    return MembershipResponse.from_membership(membership)


@router.get("/{challenge_id}/leaderboard", response_model=List[LeaderboardEntryResponse])
def get_leaderboard(
    challenge_id: str,
    user_id: str = Depends(get_current_user),
    service: ChallengeService = Depends(get_challenge_service),
):
    """Top 20 participants by progress, with the caller flagged."""
    entries = service.leaderboard(challenge_id, current_user_id=user_id)
    return [
        LeaderboardEntryResponse(
            user_id=entry.user_id,
            username=entry.username,
            progress=entry.progress,
            rank=entry.rank,
            is_current_user=entry.is_current_user,
            completed_at=entry.completed_at,
        )
        for entry in entries
    ]


@router.post("/{challenge_id}/claim", response_model=ClaimRewardResponse)
def claim_reward(
    challenge_id: str,
    context: UserContext = Depends(get_user_context),
    service: ChallengeService = Depends(get_challenge_service),
):
    """Claim the completion reward plus any top-three placement bonus."""
    result = service.claim_reward(context, challenge_id)
    return ClaimRewardResponse(
        reward=result.reward,
        rank=result.rank,
        level=result.level,
        xp=result.xp,
        leveled_up=result.leveled_up,
    )

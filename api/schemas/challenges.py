"""
Challenge Schemas.

Request/response bodies for the community challenge endpoints.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from backend.core.challenge_service import ChallengeListing
from domain.models.challenge import Challenge, ChallengeMembership, MAX_PROGRESS


class ChallengeCreateRequest(BaseModel):
    """Request body for POST /challenges."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: str = Field(default="general", max_length=50)
    difficulty: str = Field(default="beginner", max_length=50)
    duration_days: int = Field(..., gt=0, le=365)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    xp_reward: int = Field(default=100, ge=0)
    join_price_xp: int = Field(default=0, ge=0)
    first_place_reward: Optional[int] = Field(default=None, ge=0)
    second_place_reward: Optional[int] = Field(default=None, ge=0)
    third_place_reward: Optional[int] = Field(default=None, ge=0)

    def to_challenge(self) -> Challenge:
        return Challenge(**self.model_dump())


class ChallengeResponse(Challenge):
    """A challenge with the caller's membership state."""
    participants: int = 0
    is_joined: bool = False
    progress: int = 0
    completed: bool = False
    reward_claimed: bool = False

    @classmethod
    def from_listing(cls, listing: ChallengeListing) -> "ChallengeResponse":
        membership = listing.membership
        return cls(
            **listing.challenge.model_dump(),
            participants=listing.participants,
            is_joined=listing.is_joined,
            progress=membership.progress if membership else 0,
            completed=membership.is_completed if membership else False,
            reward_claimed=membership.reward_claimed if membership else False,
        )


class ProgressUpdateRequest(BaseModel):
    """Request body for PATCH /challenges/{id}/progress. Values are clamped to 0..100."""
    progress: int = Field(..., description=f"Progress percentage, clamped to 0..{MAX_PROGRESS}")


class MembershipResponse(ChallengeMembership):
    completed: bool = False

    @classmethod
    def from_membership(cls, membership: ChallengeMembership) -> "MembershipResponse":
        return cls(**membership.model_dump(), completed=membership.is_completed)


class LeaderboardEntryResponse(BaseModel):
    user_id: str
    username: str
    progress: int
    rank: int
    is_current_user: bool
    completed_at: Optional[datetime] = None


class ClaimRewardResponse(BaseModel):
    success: bool = True
    reward: int
    rank: Optional[int] = None
    level: int
    xp: int
    leveled_up: bool

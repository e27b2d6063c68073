"""
Community challenge models.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

MAX_PROGRESS = 100


class Challenge(BaseModel):
    """A challenge definition (challenges row)."""

    id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: str = Field(default="general")
    difficulty: str = Field(default="beginner")
    duration_days: int = Field(..., gt=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    xp_reward: int = Field(default=100, ge=0)
    join_price_xp: int = Field(default=0, ge=0)
    first_place_reward: Optional[int] = Field(default=None, ge=0)
    second_place_reward: Optional[int] = Field(default=None, ge=0)
    third_place_reward: Optional[int] = Field(default=None, ge=0)
    created_by: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self) -> "Challenge":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def has_started(self, today: date) -> bool:
        return self.start_date is None or self.start_date <= today

    def has_ended(self, today: date) -> bool:
        return self.end_date is not None and self.end_date < today

    def is_active(self, today: date) -> bool:
        return self.has_started(today) and not self.has_ended(today)

    def placement_reward(self, rank: Optional[int]) -> int:
        rewards = {
            1: self.first_place_reward,
            2: self.second_place_reward,
            3: self.third_place_reward,
        }
        return rewards.get(rank or 0) or 0


class ChallengeMembership(BaseModel):
    """A user's participation in a challenge (user_challenges row)."""

    id: Optional[str] = None
    user_id: str
    challenge_id: str
    progress: int = Field(default=0, ge=0, le=MAX_PROGRESS)
    joined_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rank: Optional[int] = None
    reward_claimed: bool = False

    @property
    def is_completed(self) -> bool:
        return self.progress >= MAX_PROGRESS or self.completed_at is not None

"""
Achievement definitions and awards.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Achievement(BaseModel):
    """An achievement definition (achievements row)."""

    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    xp_reward: int = 0


class EarnedAchievement(BaseModel):
    """An achievement the user has earned, joined with its definition."""

    achievement: Achievement
    earned_at: Optional[datetime] = None

"""
Profile, Stats and Notification Schemas.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from domain.models.stats import UserStats, level_title

DEFAULT_USERNAME = "Fitness Warrior"


class ProfileResponse(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """Request body for PATCH /profile. Only provided fields are changed."""
    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    full_name: Optional[str] = Field(default=None, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=2048)


class StatsResponse(BaseModel):
    """User progression stats for the dashboard and profile pages."""
    username: str
    level: int
    level_title: str
    xp: int
    xp_to_next_level: int
    percent_to_next_level: float
    streak: int
    workouts_completed: int
    last_workout_date: Optional[date] = None

    @classmethod
    def from_stats(cls, stats: UserStats, username: Optional[str]) -> "StatsResponse":
        return cls(
            username=username or DEFAULT_USERNAME,
            level=stats.level,
            level_title=level_title(stats.level),
            xp=stats.xp,
            xp_to_next_level=stats.xp_to_next_level,
            percent_to_next_level=stats.percent_to_next_level,
            streak=stats.streak,
            workouts_completed=stats.workouts_completed,
            last_workout_date=stats.last_workout_date,
        )


class AchievementResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    xp_reward: int = 0
    earned_at: Optional[datetime] = None


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    variant: str
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse] = Field(default_factory=list)

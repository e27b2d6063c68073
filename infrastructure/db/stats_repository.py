"""
Supabase Stats Repository Implementation.

Implements the StatsRepository protocol over the user_stats table.
"""
from typing import Optional
from supabase import Client
import logging

from domain.models.stats import UserStats

logger = logging.getLogger(__name__)


class SupabaseStatsRepository:
    """
    Supabase implementation of StatsRepository.
    """

    def __init__(self, client: Client):
        self._client = client

    def get(
        self,
        user_id: str,
    ) -> Optional[UserStats]:
        try:
            result = self._client.table("user_stats") \
                .select("user_id, level, xp, streak, workouts_completed, last_workout_date") \
                .eq("user_id", user_id) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return UserStats.model_validate(result.data[0])
            return None

        except Exception as e:
            logger.error(f"Error fetching stats for {user_id}: {e}")
            return None

    def create(
        self,
        user_id: str,
    ) -> Optional[UserStats]:
        stats = UserStats(user_id=user_id)
        try:
            result = self._client.table("user_stats").insert(stats.to_row()).execute()

            if result.data and len(result.data) > 0:
                logger.info(f"Created stats row for user {user_id}")
                return UserStats.model_validate(result.data[0])

            logger.error(f"Failed to create stats row for user {user_id}")
            return None

        except Exception as e:
            logger.error(f"Error creating stats for {user_id}: {e}")
            return None

    def update(
        self,
        stats: UserStats,
    ) -> bool:
        row = stats.to_row()
        row.pop("user_id")
        try:
            result = self._client.table("user_stats") \
                .update(row) \
                .eq("user_id", stats.user_id) \
                .execute()
            return bool(result.data)

        except Exception as e:
            logger.error(f"Error updating stats for {stats.user_id}: {e}")
            return False

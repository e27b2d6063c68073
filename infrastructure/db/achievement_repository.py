"""
Supabase Achievement Repository Implementation.

Achievement definitions live in achievements; user_achievements records
who earned what.
"""
from typing import Optional, List
from supabase import Client
import logging

from domain.models.achievement import Achievement, EarnedAchievement

logger = logging.getLogger(__name__)


class SupabaseAchievementRepository:
    """
    Supabase implementation of AchievementRepository.
    """

    def __init__(self, client: Client):
        self._client = client

    def get_by_name(
        self,
        name: str,
    ) -> Optional[Achievement]:
        try:
            result = self._client.table("achievements") \
                .select("id, name, description, icon, xp_reward") \
                .eq("name", name) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return Achievement.model_validate(result.data[0])
            return None

        except Exception as e:
            logger.error(f"Error fetching achievement '{name}': {e}")
            return None

    def list_earned(
        self,
        user_id: str,
    ) -> List[EarnedAchievement]:
        try:
            result = self._client.table("user_achievements") \
                .select("earned_at, achievements(id, name, description, icon, xp_reward)") \
                .eq("user_id", user_id) \
                .order("earned_at", desc=True) \
                .execute()
        except Exception as e:
            logger.error(f"Error listing achievements for {user_id}: {e}")
            return []

        earned = []
        for row in result.data or []:
            definition = row.get("achievements")
            if not definition:
                continue
            earned.append(EarnedAchievement(
                achievement=Achievement.model_validate(definition),
                earned_at=row.get("earned_at"),
            ))
        return earned

    def award(
        self,
        user_id: str,
        achievement_id: str,
    ) -> bool:
        try:
            result = self._client.table("user_achievements").insert({
                "user_id": user_id,
                "achievement_id": achievement_id,
            }).execute()
            return bool(result.data)

        except Exception as e:
            logger.error(f"Error awarding achievement {achievement_id} to {user_id}: {e}")
            return False

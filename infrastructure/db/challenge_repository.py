"""
Supabase Challenge Repository Implementation.

Implements the ChallengeRepository protocol over the challenges and
user_challenges tables.
"""
from typing import Optional, Dict, Any, List
from supabase import Client
import logging

from domain.models.challenge import Challenge, ChallengeMembership

logger = logging.getLogger(__name__)


class SupabaseChallengeRepository:
    """
    Supabase implementation of ChallengeRepository.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    # =========================================================================
    # Challenge definitions
    # =========================================================================

    def list_challenges(self) -> List[Challenge]:
        try:
            result = self._client.table("challenges") \
                .select("*") \
                .order("created_at", desc=True) \
                .execute()
            return [Challenge.model_validate(row) for row in result.data or []]

        except Exception as e:
            logger.error(f"Error listing challenges: {e}")
            return []

    def get_challenge(
        self,
        challenge_id: str,
    ) -> Optional[Challenge]:
        try:
            result = self._client.table("challenges") \
                .select("*") \
                .eq("id", challenge_id) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return Challenge.model_validate(result.data[0])
            return None

        except Exception as e:
            logger.error(f"Error fetching challenge {challenge_id}: {e}")
            return None

    def create_challenge(
        self,
        challenge: Challenge,
    ) -> Optional[Challenge]:
        row = challenge.model_dump(mode="json", exclude={"id"})
        try:
            result = self._client.table("challenges").insert(row).execute()

            if result.data and len(result.data) > 0:
                created = Challenge.model_validate(result.data[0])
                logger.info(f"Challenge created: {created.id} by {challenge.created_by}")
                return created

            logger.error("Failed to insert challenge")
            return None

        except Exception as e:
            logger.error(f"Error creating challenge: {e}")
            return None

    # =========================================================================
    # Memberships
    # =========================================================================

    def get_membership(
        self,
        user_id: str,
        challenge_id: str,
    ) -> Optional[ChallengeMembership]:
        try:
            result = self._client.table("user_challenges") \
                .select("*") \
                .eq("user_id", user_id) \
                .eq("challenge_id", challenge_id) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return ChallengeMembership.model_validate(result.data[0])
            return None

        except Exception as e:
            logger.error(f"Error fetching membership of {user_id} in {challenge_id}: {e}")
            return None

    def list_memberships(
        self,
        user_id: str,
    ) -> List[ChallengeMembership]:
        try:
            result = self._client.table("user_challenges") \
                .select("*") \
                .eq("user_id", user_id) \
                .execute()
            return [ChallengeMembership.model_validate(row) for row in result.data or []]

        except Exception as e:
            logger.error(f"Error listing memberships for {user_id}: {e}")
            return []

    def add_membership(
        self,
        membership: ChallengeMembership,
    ) -> Optional[ChallengeMembership]:
        row = membership.model_dump(mode="json", exclude={"id"}, exclude_none=True)
        try:
            result = self._client.table("user_challenges").insert(row).execute()

            if result.data and len(result.data) > 0:
                return ChallengeMembership.model_validate(result.data[0])

            logger.error(f"Failed to add {membership.user_id} to {membership.challenge_id}")
            return None

        except Exception as e:
            logger.error(f"Error joining challenge: {e}")
            return None

    def update_membership(
        self,
        membership_id: str,
        fields: Dict[str, Any],
    ) -> Optional[ChallengeMembership]:
        update_data = {
            k: v.isoformat() if hasattr(v, "isoformat") else v
            for k, v in fields.items()
        }
        try:
            result = self._client.table("user_challenges") \
                .update(update_data) \
                .eq("id", membership_id) \
                .execute()

            if result.data and len(result.data) > 0:
                return ChallengeMembership.model_validate(result.data[0])
            return None

        except Exception as e:
            logger.error(f"Error updating membership {membership_id}: {e}")
            return None

    def get_top_memberships(
        self,
        challenge_id: str,
        *,
        limit: int = 20,
    ) -> List[ChallengeMembership]:
        try:
            result = self._client.table("user_challenges") \
                .select("*") \
                .eq("challenge_id", challenge_id) \
                .order("progress", desc=True) \
                .order("completed_at") \
                .limit(limit) \
                .execute()
            return [ChallengeMembership.model_validate(row) for row in result.data or []]

        except Exception as e:
            logger.error(f"Error fetching leaderboard for {challenge_id}: {e}")
            return []

    def count_participants(
        self,
        challenge_id: str,
    ) -> int:
        try:
            result = self._client.table("user_challenges") \
                .select("id", count="exact") \
                .eq("challenge_id", challenge_id) \
                .execute()
            return result.count or 0

        except Exception as e:
            logger.error(f"Error counting participants of {challenge_id}: {e}")
            return 0

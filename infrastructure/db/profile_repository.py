"""
Supabase Profile Repository Implementation.

Implements the ProfileRepository protocol. Profile rows live in the
profiles table; account emails come from the Supabase auth admin API,
which needs the service role key.
"""
from typing import Optional, Dict, Any
from supabase import Client
import logging

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, username, full_name, avatar_url, email"
EDITABLE_FIELDS = frozenset({"username", "full_name", "avatar_url"})


class SupabaseProfileRepository:
    """
    Supabase implementation of ProfileRepository.
    """

    def __init__(self, client: Client):
        self._client = client

    def get(
        self,
        user_id: str,
    ) -> Optional[Dict[str, Any]]:
        try:
            result = self._client.table("profiles") \
                .select(PROFILE_COLUMNS) \
                .eq("id", user_id) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return result.data[0]
            return None

        except Exception as e:
            logger.error(f"Error fetching profile {user_id}: {e}")
            return None

    def update(
        self,
        user_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        update_data = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        if not update_data:
            return self.get(user_id)

        try:
            result = self._client.table("profiles") \
                .update(update_data) \
                .eq("id", user_id) \
                .execute()

            if result.data and len(result.data) > 0:
                logger.info(f"Updated profile {user_id}: {sorted(update_data)}")
                return result.data[0]

            logger.warning(f"Profile {user_id} not found for update")
            return None

        except Exception as e:
            logger.error(f"Error updating profile {user_id}: {e}")
            return None

    def get_email(
        self,
        user_id: str,
    ) -> Optional[str]:
        try:
            response = self._client.auth.admin.get_user_by_id(user_id)
            user = getattr(response, "user", None)
            return user.email if user and user.email else None

        except Exception as e:
            logger.error(f"Error fetching auth user {user_id}: {e}")
            return None

    def find_id_by_email(
        self,
        email: str,
    ) -> Optional[str]:
        try:
            result = self._client.table("profiles") \
                .select("id") \
                .eq("email", email) \
                .limit(1) \
                .execute()

            if result.data and len(result.data) > 0:
                return result.data[0]["id"]
            return None

        except Exception as e:
            logger.error(f"Error looking up profile by email: {e}")
            return None

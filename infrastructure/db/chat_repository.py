"""
Supabase Chat and Video Repository Implementations.

Chat history lives in ai_trainer_chats, one row per message. The exercise
video catalog is read from exercise_videos, and recommendations made in a
conversation are recorded in chat_video_recommendations.
"""
from typing import Optional, Dict, Any, List
from supabase import Client
import logging

from domain.models.video import VideoRecord

logger = logging.getLogger(__name__)

# Rows scanned to build the distinct session list
SESSION_SCAN_LIMIT = 100


class SupabaseChatRepository:
    """
    Supabase implementation of ChatRepository.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def save_message(
        self,
        user_id: str,
        session_id: str,
        message: str,
        *,
        is_user: bool,
        category: Optional[str] = None,
    ) -> bool:
        row: Dict[str, Any] = {
            "user_id": user_id,
            "session_id": session_id,
            "message": message,
            "is_user": is_user,
        }
        if category:
            row["category"] = category

        try:
            result = self._client.table("ai_trainer_chats").insert(row).execute()
            return bool(result.data)

        except Exception as e:
            logger.error(f"Error saving chat message for session {session_id}: {e}")
            return False

    def get_session_messages(
        self,
        user_id: str,
        session_id: str,
        *,
        limit: int = 6,
    ) -> List[Dict[str, Any]]:
        try:
            result = self._client.table("ai_trainer_chats") \
                .select("message, is_user, created_at") \
                .eq("user_id", user_id) \
                .eq("session_id", session_id) \
                .order("created_at", desc=True) \
                .limit(limit) \
                .execute()
            # Newest-first from the query; callers want chronological order
            return list(reversed(result.data or []))

        except Exception as e:
            logger.error(f"Error fetching chat history for session {session_id}: {e}")
            return []

    def list_sessions(
        self,
        user_id: str,
        *,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        try:
            result = self._client.table("ai_trainer_chats") \
                .select("session_id, created_at") \
                .eq("user_id", user_id) \
                .order("created_at", desc=True) \
                .limit(SESSION_SCAN_LIMIT) \
                .execute()
        except Exception as e:
            logger.error(f"Error listing chat sessions for {user_id}: {e}")
            return []

        sessions: List[Dict[str, Any]] = []
        seen = set()
        for row in result.data or []:
            session_id = row.get("session_id")
            if not session_id or session_id in seen:
                continue
            seen.add(session_id)
            sessions.append({"session_id": session_id, "created_at": row.get("created_at")})
            if len(sessions) >= limit:
                break
        return sessions

    def save_video_recommendations(
        self,
        session_id: str,
        video_ids: List[str],
    ) -> bool:
        if not video_ids:
            return True
        try:
            result = self._client.table("chat_video_recommendations").insert([
                {"session_id": session_id, "video_id": video_id}
                for video_id in video_ids
            ]).execute()
            return bool(result.data)

        except Exception as e:
            logger.error(f"Error saving video recommendations for session {session_id}: {e}")
            return False


class SupabaseVideoRepository:
    """
    Supabase implementation of VideoRepository.
    """

    def __init__(self, client: Client):
        self._client = client

    def find_by_terms(
        self,
        terms: List[str],
        *,
        limit: int = 3,
    ) -> List[VideoRecord]:
        if not terms:
            return []

        filters = ",".join(
            f"muscle_group.ilike.%{term}%,category.ilike.%{term}%"
            for term in terms
        )
        try:
            result = self._client.table("exercise_videos") \
                .select("id, name, description, category, muscle_group, difficulty, video_url, thumbnail_url") \
                .or_(filters) \
                .limit(limit * 2) \
                .execute()
        except Exception as e:
            logger.error(f"Error searching exercise videos for {terms}: {e}")
            return []

        videos: List[VideoRecord] = []
        seen = set()
        for row in result.data or []:
            if row.get("id") in seen:
                continue
            seen.add(row.get("id"))
            videos.append(VideoRecord.model_validate(row))
            if len(videos) >= limit:
                break
        return videos

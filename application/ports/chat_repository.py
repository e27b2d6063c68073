"""
Chat Repository Interfaces (Ports).

ChatRepository stores trainer conversations (ai_trainer_chats) and video
recommendations; VideoRepository reads the exercise video catalog.
"""
from typing import Protocol, Optional, List, Dict, Any

from domain.models.video import VideoRecord


class ChatRepository(Protocol):
    """
    Abstract interface for chat message persistence.
    """

    def save_message(
        self,
        user_id: str,
        session_id: str,
        message: str,
        *,
        is_user: bool,
        category: Optional[str] = None,
    ) -> bool:
        """
        Insert one chat message row.

        Args:
            user_id: User ID
            session_id: Conversation ID tying user and assistant rows together
            message: Message text
            is_user: True for the user's message, False for the assistant reply
            category: Optional conversation category

        Returns:
            True on success
        """
        ...

    def get_session_messages(
        self,
        user_id: str,
        session_id: str,
        *,
        limit: int = 6,
    ) -> List[Dict[str, Any]]:
        """
        Get the most recent messages of a session in chronological order.

        Returns:
            List of {message, is_user, created_at} dicts (empty on error)
        """
        ...

    def list_sessions(
        self,
        user_id: str,
        *,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        """
        Get the user's distinct sessions, newest first.

        Returns:
            List of {session_id, created_at} dicts (empty on error)
        """
        ...

    def save_video_recommendations(
        self,
        session_id: str,
        video_ids: List[str],
    ) -> bool:
        """
        Record which videos were recommended in a session.
        """
        ...


class VideoRepository(Protocol):
    """
    Abstract interface for the exercise video catalog.
    """

    def find_by_terms(
        self,
        terms: List[str],
        *,
        limit: int = 3,
    ) -> List[VideoRecord]:
        """
        Find videos whose muscle group or category matches any term.

        Args:
            terms: Lower-case muscle group / category terms
            limit: Maximum videos to return

        Returns:
            Distinct videos (empty on error)
        """
        ...

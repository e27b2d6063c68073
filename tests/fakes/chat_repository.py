"""
Fake chat trainer dependencies for testing.

In-memory implementations of ChatRepository and VideoRepository, plus a
scripted ChatCompletionClient.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime, timedelta, timezone

from domain.models.video import VideoRecord


class FakeChatRepository:
    """
    In-memory fake implementation of ChatRepository for testing.

    Usage:
        repo = FakeChatRepository()
        repo.seed([{"user_id": "u1", "session_id": "s1", "message": "hi", "is_user": True}])
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._messages: List[Dict[str, Any]] = []
        self._recommendations: Dict[str, List[str]] = {}
        self.fail_writes = False

    def reset(self) -> None:
        self._messages.clear()
        self._recommendations.clear()
        self.fail_writes = False

    def seed(self, messages: List[Dict[str, Any]]) -> None:
        """
        Seed chat rows, oldest first. created_at is generated when missing.
        """
        for message in messages:
            self._append(dict(message))

    def get_all(self) -> List[Dict[str, Any]]:
        """Get all stored message rows (test helper)."""
        return [dict(m) for m in self._messages]

    def recommendations_for(self, session_id: str) -> List[str]:
        """Video IDs recorded for a session (test helper)."""
        return list(self._recommendations.get(session_id, []))

    def _append(self, row: Dict[str, Any]) -> None:
        if "created_at" not in row:
            # Strictly increasing timestamps keep ordering deterministic
            base = datetime(2024, 1, 1, tzinfo=timezone.utc)
            row["created_at"] = base + timedelta(seconds=len(self._messages))
        self._messages.append(row)

    # =========================================================================
    # ChatRepository Protocol Methods
    # =========================================================================

    def save_message(
        self,
        user_id: str,
        session_id: str,
        message: str,
        *,
        is_user: bool,
        category: Optional[str] = None,
    ) -> bool:
        if self.fail_writes:
            return False
        self._append(
            {
                "user_id": user_id,
                "session_id": session_id,
                "message": message,
                "is_user": is_user,
                "category": category,
            }
        )
        return True

    def get_session_messages(self, user_id: str, session_id: str, *, limit: int = 6) -> List[Dict[str, Any]]:
        rows = [
            m for m in self._messages
            if m["user_id"] == user_id and m["session_id"] == session_id
        ]
        rows.sort(key=lambda m: m["created_at"])
        return [
            {"message": m["message"], "is_user": m["is_user"], "created_at": m["created_at"]}
            for m in rows[-limit:]
        ]

    def list_sessions(self, user_id: str, *, limit: int = 10) -> List[Dict[str, Any]]:
        rows = sorted(
            (m for m in self._messages if m["user_id"] == user_id),
            key=lambda m: m["created_at"],
            reverse=True,
        )
        sessions: List[Dict[str, Any]] = []
        seen = set()
        for row in rows:
            if row["session_id"] in seen:
                continue
            seen.add(row["session_id"])
            sessions.append({"session_id": row["session_id"], "created_at": row["created_at"].isoformat()})
        return sessions[:limit]

    def save_video_recommendations(self, session_id: str, video_ids: List[str]) -> bool:
        if self.fail_writes:
            return False
        self._recommendations.setdefault(session_id, []).extend(video_ids)
        return True


class FakeVideoRepository:
    """
    In-memory fake implementation of VideoRepository for testing.

    Usage:
        repo = FakeVideoRepository()
        repo.seed([VideoRecord(id="v1", name="Push-up", muscle_group="chest", video_url="...")])
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._videos: Dict[str, VideoRecord] = {}
        self.searches: List[List[str]] = []

    def reset(self) -> None:
        self._videos.clear()
        self.searches.clear()

    def seed(self, videos: List[VideoRecord]) -> None:
        for video in videos:
            self._videos[video.id] = video.model_copy()

    # =========================================================================
    # VideoRepository Protocol Methods
    # =========================================================================

    def find_by_terms(self, terms: List[str], *, limit: int = 3) -> List[VideoRecord]:
        self.searches.append(list(terms))
        matches = []
        for video in self._videos.values():
            haystack = f"{video.muscle_group} {video.category}".lower()
            if any(term.lower() in haystack for term in terms):
                matches.append(video.model_copy())
        return matches[:limit]


class FakeChatCompletionClient:
    """
    Scripted ChatCompletionClient.

    Returns replies in order (repeating the last one), or raises `error`
    when it is set. Every call's messages are recorded in `calls`.

    Usage:
        client = FakeChatCompletionClient(replies=["Try 3 sets of push-ups 💪"])
        client.error = RuntimeError("upstream down")
    """

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.replies = list(replies or ["Let's get moving! 🏋️"])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def reset(self) -> None:
        self.calls.clear()
        self.error = None

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> str:
        self.calls.append({"messages": messages, "user_id": user_id, "session_id": session_id})
        if self.error is not None:
            raise self.error
        index = min(len(self.calls) - 1, len(self.replies) - 1)
        return self.replies[index]

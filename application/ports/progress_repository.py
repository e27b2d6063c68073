"""
Progress Repository Interface (Port).

Defines persistence for in-progress workout snapshots
(user_workout_progress). Snapshots are append-only; every save is a new row.
"""
from datetime import date
from typing import Protocol, Optional, List, Dict, Any

from domain.models.snapshot import WorkoutProgressSnapshot


class ProgressRepository(Protocol):
    """
    Abstract interface for workout progress snapshot persistence.

    Implementations must never raise on datastore errors; failures are
    reported through the returned result so the caller can notify the user
    and carry on.
    """

    def save_snapshot(
        self,
        snapshot: WorkoutProgressSnapshot,
    ) -> Dict[str, Any]:
        """
        Insert a new snapshot row.

        Args:
            snapshot: Snapshot to persist

        Returns:
            Dict with "success" (bool), "id" on success, "error" on failure
        """
        ...

    def get_resumable(
        self,
        user_id: str,
        on_date: date,
    ) -> Optional[WorkoutProgressSnapshot]:
        """
        Get the most recent incomplete snapshot for a user on a given date.

        Args:
            user_id: User ID
            on_date: Calendar date the snapshot must be dated

        Returns:
            Latest incomplete snapshot, or None if none exists or it is unreadable
        """
        ...

    def get_latest_for_session(
        self,
        user_id: str,
        session_id: str,
    ) -> Optional[WorkoutProgressSnapshot]:
        """
        Get the most recent snapshot written for an explicit session.

        Args:
            user_id: User ID (for authorization)
            session_id: Session ID minted at tracker start

        Returns:
            Latest snapshot for the session, or None
        """
        ...

    def get_recent(
        self,
        user_id: str,
        *,
        limit: int = 5,
    ) -> List[WorkoutProgressSnapshot]:
        """
        Get the user's most recent snapshots, newest first.

        Args:
            user_id: User ID
            limit: Maximum rows to return

        Returns:
            List of snapshots (empty on error)
        """
        ...

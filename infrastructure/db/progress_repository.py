"""
Supabase Progress Repository Implementation.

Implements the ProgressRepository protocol over the user_workout_progress
table. Snapshots are append-only: every autosave, pause and end inserts a
new row, and readers take the newest one.
"""
from datetime import date
from typing import Optional, Dict, Any, List
from supabase import Client
import logging

from domain.models.snapshot import SnapshotFormatError, WorkoutProgressSnapshot

logger = logging.getLogger(__name__)

PROGRESS_TABLE = "user_workout_progress"


class SupabaseProgressRepository:
    """
    Supabase implementation of ProgressRepository.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def save_snapshot(
        self,
        snapshot: WorkoutProgressSnapshot,
    ) -> Dict[str, Any]:
        try:
            result = self._client.table(PROGRESS_TABLE).insert(snapshot.to_row()).execute()

            if result.data and len(result.data) > 0:
                return {"success": True, "id": result.data[0].get("id")}

            logger.error(f"Failed to insert progress snapshot for session {snapshot.session_id}")
            return {"success": False, "error": "Insert returned no rows"}

        except Exception as e:
            logger.error(f"Error saving progress snapshot: {e}")
            return {"success": False, "error": str(e)}

    def get_resumable(
        self,
        user_id: str,
        on_date: date,
    ) -> Optional[WorkoutProgressSnapshot]:
        try:
            result = self._client.table(PROGRESS_TABLE) \
                .select("*") \
                .eq("user_id", user_id) \
                .eq("is_completed", False) \
                .eq("workout_date", on_date.isoformat()) \
                .order("created_at", desc=True) \
                .limit(1) \
                .execute()

            if not result.data:
                return None
            return WorkoutProgressSnapshot.from_row(result.data[0])

        except SnapshotFormatError as e:
            logger.warning(f"Ignoring unreadable progress snapshot for {user_id}: {e}")
            return None
        except Exception as e:
            logger.error(f"Error fetching resumable progress for {user_id}: {e}")
            return None

    def get_latest_for_session(
        self,
        user_id: str,
        session_id: str,
    ) -> Optional[WorkoutProgressSnapshot]:
        try:
            result = self._client.table(PROGRESS_TABLE) \
                .select("*") \
                .eq("user_id", user_id) \
                .eq("session_id", session_id) \
                .order("created_at", desc=True) \
                .limit(1) \
                .execute()

            if not result.data:
                return None
            return WorkoutProgressSnapshot.from_row(result.data[0])

        except SnapshotFormatError as e:
            logger.warning(f"Ignoring unreadable snapshot for session {session_id}: {e}")
            return None
        except Exception as e:
            logger.error(f"Error fetching progress for session {session_id}: {e}")
            return None

    def get_recent(
        self,
        user_id: str,
        *,
        limit: int = 5,
    ) -> List[WorkoutProgressSnapshot]:
        try:
            result = self._client.table(PROGRESS_TABLE) \
                .select("*") \
                .eq("user_id", user_id) \
                .order("created_at", desc=True) \
                .limit(limit) \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching recent progress for {user_id}: {e}")
            return []

        snapshots = []
        for row in result.data or []:
            try:
                snapshots.append(WorkoutProgressSnapshot.from_row(row))
            except SnapshotFormatError as e:
                logger.warning(f"Skipping unreadable progress row {row.get('id')}: {e}")
        return snapshots

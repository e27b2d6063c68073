"""
Supabase Workout Repository Implementation.

Implements the WorkoutRepository protocol over the workouts table, which
holds one immutable row per completed workout.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Dict, Any, List
from supabase import Client
import logging

from domain.models.snapshot import SnapshotFormatError
from domain.models.stats import CompletedWorkoutRecord

logger = logging.getLogger(__name__)


class SupabaseWorkoutRepository:
    """
    Supabase implementation of WorkoutRepository.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def save(
        self,
        record: CompletedWorkoutRecord,
    ) -> Dict[str, Any]:
        try:
            result = self._client.table("workouts").insert(record.to_row()).execute()

            if result.data and len(result.data) > 0:
                workout_id = result.data[0].get("id")
                logger.info(f"Workout saved for user {record.user_id}: {workout_id}")
                return {"success": True, "id": workout_id}

            logger.error(f"Failed to insert workout for user {record.user_id}")
            return {"success": False, "error": "Insert returned no rows"}

        except Exception as e:
            logger.error(f"Error saving workout: {e}")
            return {"success": False, "error": str(e)}

    def get_recent(
        self,
        user_id: str,
        *,
        limit: int = 5,
    ) -> List[CompletedWorkoutRecord]:
        try:
            result = self._client.table("workouts") \
                .select("*") \
                .eq("user_id", user_id) \
                .order("completed_at", desc=True) \
                .limit(limit) \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching workouts for {user_id}: {e}")
            return []

        return [record for record in map(self._parse, result.data or []) if record is not None]

    def get_last_completed_on(
        self,
        user_id: str,
        on_date: date,
    ) -> Optional[CompletedWorkoutRecord]:
        day_start = datetime.combine(on_date, time.min, tzinfo=timezone.utc)
        day_end = day_start + timedelta(days=1)
        try:
            result = self._client.table("workouts") \
                .select("*") \
                .eq("user_id", user_id) \
                .gte("completed_at", day_start.isoformat()) \
                .lt("completed_at", day_end.isoformat()) \
                .order("completed_at", desc=True) \
                .limit(1) \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching workouts completed on {on_date} for {user_id}: {e}")
            return None

        if not result.data:
            return None
        return self._parse(result.data[0])

    @staticmethod
    def _parse(row: Dict[str, Any]) -> Optional[CompletedWorkoutRecord]:
        try:
            return CompletedWorkoutRecord.from_row(row)
        except SnapshotFormatError as e:
            logger.warning(f"Skipping workout {row.get('id')} with unreadable exercise data: {e}")
            return None

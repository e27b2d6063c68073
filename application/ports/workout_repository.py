"""
Workout Repository Interface (Port).

Defines persistence for completed workout records (workouts table).
A record is written exactly once per finished plan and never updated.
"""
from datetime import date
from typing import Protocol, Optional, List, Dict, Any

from domain.models.stats import CompletedWorkoutRecord


class WorkoutRepository(Protocol):
    """
    Abstract interface for completed workout persistence.
    """

    def save(
        self,
        record: CompletedWorkoutRecord,
    ) -> Dict[str, Any]:
        """
        Insert a completed workout record.

        Args:
            record: Completed workout to store

        Returns:
            Dict with "success" (bool), "id" on success, "error" on failure
        """
        ...

    def get_recent(
        self,
        user_id: str,
        *,
        limit: int = 5,
    ) -> List[CompletedWorkoutRecord]:
        """
        Get the user's most recently completed workouts, newest first.

        Args:
            user_id: User ID
            limit: Maximum records to return

        Returns:
            List of records (empty on error)
        """
        ...

    def get_last_completed_on(
        self,
        user_id: str,
        on_date: date,
    ) -> Optional[CompletedWorkoutRecord]:
        """
        Get the latest workout the user completed on a given date.

        Args:
            user_id: User ID
            on_date: Calendar date (UTC)

        Returns:
            Record or None
        """
        ...

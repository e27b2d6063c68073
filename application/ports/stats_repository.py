"""
Stats Repository Interface (Port).

Defines persistence for per-user aggregate stats (level, XP, streak).
"""
from typing import Protocol, Optional

from domain.models.stats import UserStats


class StatsRepository(Protocol):
    """
    Abstract interface for user_stats persistence.
    """

    def get(
        self,
        user_id: str,
    ) -> Optional[UserStats]:
        """
        Get stats for a user.

        Args:
            user_id: User ID

        Returns:
            UserStats or None if the user has no row (or on error)
        """
        ...

    def create(
        self,
        user_id: str,
    ) -> Optional[UserStats]:
        """
        Create a level-1 stats row for a new user.

        Args:
            user_id: User ID

        Returns:
            The created UserStats, or None on error
        """
        ...

    def update(
        self,
        stats: UserStats,
    ) -> bool:
        """
        Write level, xp, streak, workouts_completed and last_workout_date.

        Args:
            stats: Stats to persist

        Returns:
            True on success
        """
        ...

"""
Achievement Repository Interface (Port).
"""
from typing import Protocol, Optional, List

from domain.models.achievement import Achievement, EarnedAchievement


class AchievementRepository(Protocol):
    """
    Abstract interface for achievement definitions and user awards.
    """

    def get_by_name(
        self,
        name: str,
    ) -> Optional[Achievement]:
        """
        Look up an achievement definition by its name.
        """
        ...

    def list_earned(
        self,
        user_id: str,
    ) -> List[EarnedAchievement]:
        """
        Get achievements the user has earned, with definitions.
        """
        ...

    def award(
        self,
        user_id: str,
        achievement_id: str,
    ) -> bool:
        """
        Record that the user earned an achievement.

        Returns:
            True on success
        """
        ...

"""
Challenge Repository Interface (Port).

Defines persistence for challenge definitions and user memberships.
"""
from typing import Protocol, Optional, List, Dict, Any

from domain.models.challenge import Challenge, ChallengeMembership


class ChallengeRepository(Protocol):
    """
    Abstract interface for challenges and user_challenges persistence.
    """

    def list_challenges(self) -> List[Challenge]:
        """
        Get all challenge definitions.

        Returns:
            List of challenges (empty on error)
        """
        ...

    def get_challenge(
        self,
        challenge_id: str,
    ) -> Optional[Challenge]:
        """
        Get a single challenge.

        Args:
            challenge_id: Challenge ID

        Returns:
            Challenge or None
        """
        ...

    def create_challenge(
        self,
        challenge: Challenge,
    ) -> Optional[Challenge]:
        """
        Insert a challenge definition.

        Args:
            challenge: Challenge to create (id ignored)

        Returns:
            Created challenge with id, or None on failure
        """
        ...

    def get_membership(
        self,
        user_id: str,
        challenge_id: str,
    ) -> Optional[ChallengeMembership]:
        """
        Get a user's membership in a challenge.

        Returns:
            Membership or None if not joined
        """
        ...

    def list_memberships(
        self,
        user_id: str,
    ) -> List[ChallengeMembership]:
        """
        Get all memberships for a user.
        """
        ...

    def add_membership(
        self,
        membership: ChallengeMembership,
    ) -> Optional[ChallengeMembership]:
        """
        Insert a membership row.

        Returns:
            Created membership with id, or None on failure
        """
        ...

    def update_membership(
        self,
        membership_id: str,
        fields: Dict[str, Any],
    ) -> Optional[ChallengeMembership]:
        """
        Update progress/completed_at/rank/reward_claimed on a membership.

        Returns:
            Updated membership or None on failure
        """
        ...

    def get_top_memberships(
        self,
        challenge_id: str,
        *,
        limit: int = 20,
    ) -> List[ChallengeMembership]:
        """
        Get memberships ordered by progress descending.

        Args:
            challenge_id: Challenge ID
            limit: Maximum rows

        Returns:
            List of memberships (empty on error)
        """
        ...

    def count_participants(
        self,
        challenge_id: str,
    ) -> int:
        """
        Count members of a challenge.
        """
        ...

"""
Profile Repository Interface (Port).

Defines access to user profiles and the auth provider's user records
(email lookups for billing).
"""
from typing import Protocol, Optional, Dict, Any


class ProfileRepository(Protocol):
    """
    Abstract interface for profile persistence.
    """

    def get(
        self,
        user_id: str,
    ) -> Optional[Dict[str, Any]]:
        """
        Get a profile row.

        Args:
            user_id: User ID

        Returns:
            Profile dict (id, username, full_name, avatar_url, email) or None
        """
        ...

    def update(
        self,
        user_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Update editable profile fields.

        Args:
            user_id: User ID
            fields: Subset of username, full_name, avatar_url

        Returns:
            Updated profile dict or None on failure
        """
        ...

    def get_email(
        self,
        user_id: str,
    ) -> Optional[str]:
        """
        Get the user's account email from the auth provider.

        Args:
            user_id: User ID

        Returns:
            Email or None if the user is unknown
        """
        ...

    def find_id_by_email(
        self,
        email: str,
    ) -> Optional[str]:
        """
        Find a user ID by profile email.

        Args:
            email: Email address

        Returns:
            User ID or None
        """
        ...

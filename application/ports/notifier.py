"""
Notifier Interface (Port).

User-visible transient notifications ("toasts") raised by server-side
state changes: workout paused, level up, failed save, and so on.
"""
from typing import Protocol


class Notifier(Protocol):
    """
    Abstract interface for user notifications.
    """

    def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        *,
        variant: str = "default",
    ) -> None:
        """
        Queue a notification for a user.

        Args:
            user_id: Recipient
            title: Short heading
            message: Body text
            variant: "default", "success" or "destructive"
        """
        ...

"""
Application-layer exceptions.

These exceptions are used across application, backend and API layers.
Routers map them to HTTP status codes.
"""

from domain.models.snapshot import SnapshotFormatError
from domain.workout.state import TrackerStateError


class InsufficientXpError(Exception):
    """Raised when a user cannot afford an XP-priced action."""

    def __init__(self, required: int, available: int):
        super().__init__(f"Not enough XP: {required} required, {available} available")
        self.required = required
        self.available = available


class ChallengeNotFoundError(Exception):
    """Raised when a challenge ID does not exist."""

    def __init__(self, challenge_id: str):
        super().__init__(f"Challenge not found: {challenge_id}")
        self.challenge_id = challenge_id


class ChallengeStateError(Exception):
    """Raised when a challenge action conflicts with the membership state.

    Examples: joining twice, claiming a reward before completing, claiming
    twice, updating progress without having joined.
    """

    pass


class InvalidTierError(ValueError):
    """Raised for a subscription tier name outside Basic/Pro/Elite."""

    def __init__(self, tier: str):
        super().__init__(f"Invalid tier: {tier}")
        self.tier = tier


class BillingError(Exception):
    """Raised when a billing operation cannot be completed."""

    pass


class WorkoutSessionNotFoundError(Exception):
    """Raised when a user has no workout session in progress."""

    def __init__(self, user_id: str):
        super().__init__(f"No active workout session for user {user_id}")
        self.user_id = user_id


__all__ = [
    "InsufficientXpError",
    "ChallengeNotFoundError",
    "ChallengeStateError",
    "InvalidTierError",
    "BillingError",
    "WorkoutSessionNotFoundError",
    "SnapshotFormatError",
    "TrackerStateError",
]

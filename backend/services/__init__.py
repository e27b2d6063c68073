"""Backend services for the FitCoach API."""

from backend.services.chat_service import ChatRelay, ChatRelayRequest, ChatRelayResponse
from backend.services.notifications import Notification, NotificationOutbox
from backend.services.workout_sessions import TrackerRunner, WorkoutSessionManager

__all__ = [
    "ChatRelay",
    "ChatRelayRequest",
    "ChatRelayResponse",
    "Notification",
    "NotificationOutbox",
    "TrackerRunner",
    "WorkoutSessionManager",
]

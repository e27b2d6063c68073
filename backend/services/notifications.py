"""
In-process notification outbox.

Implements the Notifier port by buffering per-user notifications until the
client polls GET /notifications. Each user's buffer is bounded; the oldest
entries are dropped first.
"""

import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_MAX_PER_USER = 50
VALID_VARIANTS = {"default", "success", "destructive"}


@dataclass
class Notification:
    title: str
    message: str
    variant: str = "default"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "variant": self.variant,
            "created_at": self.created_at.isoformat(),
        }


class NotificationOutbox:
    """
    Bounded per-user notification buffer.

    notify() is called from request handlers, the tracker tick loop and
    write-queue worker results, so access is guarded by a lock.
    """

    def __init__(self, max_per_user: int = DEFAULT_MAX_PER_USER):
        self._max_per_user = max_per_user
        self._outbox: Dict[str, Deque[Notification]] = {}
        self._lock = threading.Lock()

    def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        *,
        variant: str = "default",
    ) -> None:
        if variant not in VALID_VARIANTS:
            logger.warning(f"Unknown notification variant '{variant}', using default")
            variant = "default"

        with self._lock:
            box = self._outbox.setdefault(user_id, deque(maxlen=self._max_per_user))
            box.append(Notification(title=title, message=message, variant=variant))
        logger.debug(f"Notification for {user_id}: {title}")

    def drain(self, user_id: str) -> List[Notification]:
        """Return and clear all pending notifications for a user, oldest first."""
        with self._lock:
            box = self._outbox.pop(user_id, None)
        return list(box) if box else []

    def peek(self, user_id: str) -> List[Notification]:
        with self._lock:
            return list(self._outbox.get(user_id, ()))

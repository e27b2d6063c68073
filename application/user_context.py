"""
Explicit per-user session context.

Carries the authenticated user and their in-memory stats. It is handed to
the gamification ledger and workout trackers instead of living in a global,
and exposes only get_current_user() and update_stats(delta).
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from application.ports.stats_repository import StatsRepository
from domain.models.stats import UserStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """The authenticated user a context belongs to."""

    user_id: str
    email: Optional[str] = None


class UserContext:
    """
    Read/write handle on one user's identity and stats.

    Usage:
        >>> ctx = UserContext(SessionUser("user-1"), UserStats(user_id="user-1"))
        >>> ctx.update_stats({"xp": 100}).xp
        100
    """

    def __init__(self, user: SessionUser, stats: UserStats) -> None:
        if stats.user_id != user.user_id:
            raise ValueError("stats belong to a different user")
        self._user = user
        self._stats = stats
        self._lock = threading.RLock()

    def get_current_user(self) -> SessionUser:
        return self._user

    @property
    def user_id(self) -> str:
        return self._user.user_id

    @property
    def stats(self) -> UserStats:
        """Current stats. Treat as read-only; write through update_stats()."""
        return self._stats

    @property
    def stats_lock(self) -> threading.RLock:
        """
        Held by update_stats(). Hold it across a read of stats and the
        update_stats() call that depends on it; the context is shared by the
        tick loop and request threads.
        """
        return self._lock

    def update_stats(self, delta: Mapping[str, Any]) -> UserStats:
        """
        Replace the given stat fields and return the new stats.

        Args:
            delta: Field name to new value, e.g. {"level": 2, "xp": 50}

        Returns:
            The updated UserStats

        Raises:
            ValueError: unknown field, user_id change, or invalid value
        """
        unknown = set(delta) - set(UserStats.model_fields)
        if unknown:
            raise ValueError(f"Unknown stats fields: {sorted(unknown)}")
        if "user_id" in delta and delta["user_id"] != self.user_id:
            raise ValueError("user_id cannot be changed")

        with self._lock:
            merged = {**self._stats.model_dump(), **delta}
            self._stats = UserStats.model_validate(merged)
            return self._stats

    def __repr__(self) -> str:
        return f"UserContext(user_id={self.user_id!r}, level={self._stats.level}, xp={self._stats.xp})"


class UserContextLoader:
    """
    Builds a UserContext from the stats store, creating a level-1 row for
    first-time users.
    """

    def __init__(self, stats_repo: StatsRepository) -> None:
        self._stats_repo = stats_repo

    def load(self, user_id: str, *, email: Optional[str] = None) -> UserContext:
        stats = self._stats_repo.get(user_id)
        if stats is None:
            stats = self._stats_repo.create(user_id)
            if stats is None:
                logger.warning("Could not create stats row for %s; using defaults", user_id)
                stats = UserStats(user_id=user_id)
        return UserContext(SessionUser(user_id=user_id, email=email), stats)

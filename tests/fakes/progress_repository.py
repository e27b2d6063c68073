"""
Fake Progress Repository for testing.

This module provides an in-memory implementation of ProgressRepository
for fast, isolated testing without database dependencies.
"""
from typing import Optional, List, Dict, Any
from datetime import date
import uuid

from domain.models.snapshot import WorkoutProgressSnapshot


class FakeProgressRepository:
    """
    In-memory fake implementation of ProgressRepository for testing.

    Snapshots are append-only, like the real table. Set fail_writes to make
    save_snapshot report failure.

    Usage:
        repo = FakeProgressRepository()
        repo.seed([WorkoutProgressSnapshot(user_id="user1", session_id="s1", ...)])
        snap = repo.get_resumable("user1", date.today())
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._snapshots: List[WorkoutProgressSnapshot] = []
        self.fail_writes = False

    def reset(self) -> None:
        """Clear all stored snapshots."""
        self._snapshots.clear()
        self.fail_writes = False

    def seed(self, snapshots: List[WorkoutProgressSnapshot]) -> None:
        """
        Seed the repository with test data.

        Args:
            snapshots: Snapshots to store, oldest first.
        """
        for snapshot in snapshots:
            self._snapshots.append(
                snapshot.model_copy(update={"id": snapshot.id or str(uuid.uuid4())}, deep=True)
            )

    def get_all(self) -> List[WorkoutProgressSnapshot]:
        """Get all stored snapshots in insertion order (test helper)."""
        return [s.model_copy(deep=True) for s in self._snapshots]

    # =========================================================================
    # ProgressRepository Protocol Methods
    # =========================================================================

    def save_snapshot(self, snapshot: WorkoutProgressSnapshot) -> Dict[str, Any]:
        if self.fail_writes:
            return {"success": False, "error": "simulated write failure"}
        snapshot_id = str(uuid.uuid4())
        self._snapshots.append(snapshot.model_copy(update={"id": snapshot_id}, deep=True))
        return {"success": True, "id": snapshot_id}

    def get_resumable(self, user_id: str, on_date: date) -> Optional[WorkoutProgressSnapshot]:
        candidates = [
            s for s in self._snapshots
            if s.user_id == user_id and not s.is_completed and s.workout_date == on_date
        ]
        if not candidates:
            return None
        latest = max(candidates, key=lambda s: s.created_at)
        return latest.model_copy(deep=True)

    def get_latest_for_session(self, user_id: str, session_id: str) -> Optional[WorkoutProgressSnapshot]:
        candidates = [
            s for s in self._snapshots
            if s.user_id == user_id and s.session_id == session_id
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda s: s.created_at).model_copy(deep=True)

    def get_recent(self, user_id: str, *, limit: int = 5) -> List[WorkoutProgressSnapshot]:
        rows = [s for s in self._snapshots if s.user_id == user_id]
        rows.sort(key=lambda s: s.created_at, reverse=True)
        return [s.model_copy(deep=True) for s in rows[:limit]]

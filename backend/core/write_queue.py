"""
Per-user persistence write queue.

Workout trackers never await their own writes, and request handlers hand
their stats writes over too. Every save is submitted here:

- at most one write per user is in flight at a time
- a new snapshot write replaces a queued snapshot write that has not
  started yet (only the newest state matters)
- a stats write joins a stats write that is already queued; stats jobs
  read the user's context when they run, so one write carries every
  change made before it starts
- all other writes run in submission order
- writes run on a worker thread so the tick loop is never blocked
- failures are logged and reported to the notifier; nothing is retried

submit() may be called from worker threads (sync request handlers); the
job is then scheduled on the loop the queue is bound to. Without a loop,
submitted jobs stay pending until drain().
"""

import asyncio
import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional

from application.ports.notifier import Notifier

logger = logging.getLogger(__name__)


class WriteKind(str, Enum):
    """What a write job persists."""

    SNAPSHOT = "snapshot"
    WORKOUT = "workout"
    STATS = "stats"
    ACHIEVEMENTS = "achievements"


class WriteStatus(str, Enum):
    """Status states for write jobs."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SUPERSEDED = "superseded"


@dataclass
class WriteJob:
    """
    A single queued write.

    Attributes:
        user_id: Owner; jobs for one user never overlap
        kind: What is being written
        fn: Blocking callable performing the write
        description: Human-readable name used in failure notifications
        id: Unique identifier for the job
        status: Current status of the job
        error: Error message if the job fails
    """

    user_id: str
    kind: WriteKind
    fn: Callable[[], Any]
    description: str = "your progress"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: WriteStatus = WriteStatus.PENDING
    error: Optional[str] = None


def _write_succeeded(result: Any) -> bool:
    """Repository writes signal failure with False or {"success": False}."""
    if result is False:
        return False
    if isinstance(result, dict) and result.get("success") is False:
        return False
    return True


class WriteQueue:
    """
    Serialises persistence writes per user.

    Usage:
        >>> queue = WriteQueue(notifier=outbox)
        >>> queue.submit("user-1", WriteKind.SNAPSHOT, lambda: repo.save_snapshot(snap))
        >>> await queue.drain()
    """

    def __init__(self, notifier: Optional[Notifier] = None):
        self._notifier = notifier
        self._pending: Dict[str, Deque[WriteJob]] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._in_flight: Dict[str, WriteJob] = {}
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Run jobs submitted from other threads on this loop."""
        self._loop = loop

    def submit(
        self,
        user_id: str,
        kind: WriteKind,
        fn: Callable[[], Any],
        *,
        description: str = "your progress",
    ) -> WriteJob:
        """
        Queue a write for a user.

        Args:
            user_id: Owner of the write
            kind: Write kind; SNAPSHOT and STATS jobs coalesce
            fn: Blocking callable performing the write
            description: Used in the failure notification

        Returns:
            The queued WriteJob (for STATS, possibly one already queued)
        """
        with self._lock:
            pending = self._pending.setdefault(user_id, deque())

            if kind is WriteKind.STATS:
                queued = next((j for j in pending if j.kind is WriteKind.STATS), None)
                if queued is not None:
                    logger.debug(f"Stats write for {user_id} joined queued job {queued.id}")
                    return queued

            job = WriteJob(user_id=user_id, kind=kind, fn=fn, description=description)
            if kind is WriteKind.SNAPSHOT and pending and pending[-1].kind is WriteKind.SNAPSHOT:
                superseded = pending.pop()
                superseded.status = WriteStatus.SUPERSEDED
                logger.debug(f"Snapshot job {superseded.id} superseded by {job.id}")

            pending.append(job)

        self._schedule(user_id)
        return job

    def pending_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._pending.get(user_id, ()))

    def in_flight(self, user_id: str) -> Optional[WriteJob]:
        return self._in_flight.get(user_id)

    def has_unfinished(self, user_id: str) -> bool:
        """True while any write for the user is queued or running."""
        return self.pending_count(user_id) > 0 or self.in_flight(user_id) is not None

    def _schedule(self, user_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._loop is not None and self._loop.is_running():
                self._loop.call_soon_threadsafe(self._schedule, user_id)
            return

        if self._loop is None:
            self._loop = loop
        task = self._tasks.get(user_id)
        if task is not None and not task.done():
            return
        self._tasks[user_id] = loop.create_task(self._run(user_id))

    def _next_job(self, user_id: str) -> Optional[WriteJob]:
        with self._lock:
            pending = self._pending.get(user_id)
            if not pending:
                self._pending.pop(user_id, None)
                return None
            job = pending.popleft()
            self._in_flight[user_id] = job
            return job

    async def _run(self, user_id: str) -> None:
        while True:
            job = self._next_job(user_id)
            if job is None:
                return
            try:
                await self._execute(job)
            finally:
                self._in_flight.pop(user_id, None)

    async def _execute(self, job: WriteJob) -> None:
        job.status = WriteStatus.RUNNING
        try:
            result = await asyncio.to_thread(job.fn)
        except Exception as e:
            self._fail(job, str(e))
            return

        if not _write_succeeded(result):
            error = result.get("error") if isinstance(result, dict) else None
            self._fail(job, error or "write returned failure")
            return

        job.status = WriteStatus.COMPLETED
        logger.debug(f"Write job {job.id} ({job.kind.value}) completed for {job.user_id}")

    def _fail(self, job: WriteJob, error: str) -> None:
        job.status = WriteStatus.FAILED
        job.error = error
        logger.error(f"Write job {job.id} ({job.kind.value}) failed for {job.user_id}: {error}")
        if self._notifier is not None:
            self._notifier.notify(
                job.user_id,
                "Save failed",
                f"We couldn't save {job.description}.",
                variant="destructive",
            )

    async def drain(self) -> None:
        """Wait until every submitted write has finished."""
        while True:
            with self._lock:
                users = list(self._pending)
            for user_id in users:
                self._schedule(user_id)
            tasks: List[asyncio.Task] = [t for t in self._tasks.values() if not t.done()]
            if not tasks:
                break
            await asyncio.gather(*tasks)
        self._tasks = {uid: t for uid, t in self._tasks.items() if not t.done()}

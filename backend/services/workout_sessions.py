"""
Workout session runtime.

TrackerRunner drives one WorkoutTracker with two asyncio tasks: a tick loop
(one tick per tick_interval) and an autosave loop. Both run only while the
tracker is RUNNING and are cancelled on pause, end, completion, replacement
and shutdown.

WorkoutSessionManager keeps at most one tracker per user. Replacing a
user's tracker tears the old runner down first, so loops never pile up.
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Awaitable, Callable, Dict, Optional

from application.exceptions import WorkoutSessionNotFoundError
from application.ports.notifier import Notifier
from application.ports.progress_repository import ProgressRepository
from application.ports.workout_repository import WorkoutRepository
from application.user_context import UserContext
from backend.core.gamification import AchievementService, GamificationLedger
from backend.core.workout_tracker import WorkoutTracker
from backend.core.write_queue import WriteQueue
from domain.models.plan import WorkoutPlan
from domain.models.snapshot import WorkoutProgressSnapshot
from domain.workout import TrackerState

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrackerRunner:
    """Owns the tick and autosave tasks of one tracker."""

    def __init__(
        self,
        tracker: WorkoutTracker,
        *,
        tick_interval: float = 1.0,
        autosave_interval: float = 5.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.tracker = tracker
        self.tick_interval = tick_interval
        self.autosave_interval = autosave_interval
        self._sleep = sleep
        self._tick_task: Optional[asyncio.Task] = None
        self._autosave_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return any(t is not None and not t.done() for t in (self._tick_task, self._autosave_task))

    def start(self) -> None:
        """Start both loops. Must be called from a running event loop."""
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._tick_task = loop.create_task(self._tick_loop())
        self._autosave_task = loop.create_task(self._autosave_loop())

    def stop(self) -> None:
        """Cancel both loops. Safe to call any number of times."""
        current = asyncio.current_task() if self._has_loop() else None
        for task in (self._tick_task, self._autosave_task):
            if task is not None and task is not current and not task.done():
                task.cancel()
        self._tick_task = None
        self._autosave_task = None

    async def _tick_loop(self) -> None:
        while True:
            await self._sleep(self.tick_interval)
            if self.tracker.tick() is None:
                break
            if self.tracker.state is TrackerState.COMPLETED:
                logger.info(f"Runner for {self.tracker.user_id} finished: workout completed")
                self.stop()
                break

    async def _autosave_loop(self) -> None:
        while True:
            await self._sleep(self.autosave_interval)
            if not self.tracker.autosave():
                break

    @staticmethod
    def _has_loop() -> bool:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        return True


class WorkoutSessionManager:
    """
    One live tracker (and runner) per user.

    Usage:
        >>> manager = WorkoutSessionManager(progress_repo=..., workout_repo=...,
        ...                                 ledger=ledger, write_queue=queue)
        >>> tracker = manager.start(context, DEFAULT_WORKOUT_PLAN)
        >>> manager.pause(context.user_id)
    """

    def __init__(
        self,
        *,
        progress_repo: ProgressRepository,
        workout_repo: WorkoutRepository,
        ledger: GamificationLedger,
        write_queue: WriteQueue,
        notifier: Optional[Notifier] = None,
        achievements: Optional[AchievementService] = None,
        tick_interval: float = 1.0,
        autosave_interval: float = 5.0,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.progress_repo = progress_repo
        self.workout_repo = workout_repo
        self.ledger = ledger
        self.write_queue = write_queue
        self.notifier = notifier
        self.achievements = achievements
        self.tick_interval = tick_interval
        self.autosave_interval = autosave_interval
        self.clock = clock
        self._sessions: Dict[str, TrackerRunner] = {}

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    def get(self, user_id: str) -> Optional[WorkoutTracker]:
        runner = self._sessions.get(user_id)
        return runner.tracker if runner else None

    def runner_for(self, user_id: str) -> Optional[TrackerRunner]:
        return self._sessions.get(user_id)

    def shared_context(self, user_id: str) -> Optional[UserContext]:
        """
        The UserContext other requests must use for this user, or None when
        a fresh one should be loaded from storage.

        A RUNNING or PAUSED tracker's context is always shared. A COMPLETED
        tracker's context is shared only while its writes are still queued;
        once they have finished the tracker is released, so it cannot pin
        stale stats for the rest of the process.
        """
        runner = self._sessions.get(user_id)
        if runner is None:
            return None

        tracker = runner.tracker
        if tracker.state in (TrackerState.RUNNING, TrackerState.PAUSED):
            return tracker.context
        if tracker.state is TrackerState.COMPLETED and self.write_queue.has_unfinished(user_id):
            return tracker.context

        if self._sessions.get(user_id) is runner:
            self._sessions.pop(user_id, None)
            logger.info(f"Released finished workout session for {user_id}")
        return None

    def find_resumable(self, user_id: str, on_date: Optional[date] = None) -> Optional[WorkoutProgressSnapshot]:
        """Latest incomplete snapshot dated today (defaults to the clock's date), or None."""
        on_date = on_date or self.clock().date()
        return self.progress_repo.get_resumable(user_id, on_date)

    def start(
        self,
        context: UserContext,
        plan: WorkoutPlan,
        *,
        resume_from: Optional[WorkoutProgressSnapshot] = None,
    ) -> WorkoutTracker:
        """
        Create a new tracker for the user, replacing any existing one.

        A fresh tracker starts RUNNING. A tracker restored from a snapshot
        waits in PAUSED until resume().
        """
        self.discard(context.user_id)

        tracker = WorkoutTracker(
            plan,
            context,
            progress_repo=self.progress_repo,
            workout_repo=self.workout_repo,
            ledger=self.ledger,
            write_queue=self.write_queue,
            notifier=self.notifier,
            achievements=self.achievements,
            clock=self.clock,
        )
        runner = TrackerRunner(
            tracker,
            tick_interval=self.tick_interval,
            autosave_interval=self.autosave_interval,
        )

        if resume_from is not None:
            tracker.restore(resume_from)
        else:
            tracker.start()
            runner.start()

        self._sessions[context.user_id] = runner
        return tracker

    def pause(self, user_id: str) -> WorkoutTracker:
        runner = self._require(user_id)
        runner.tracker.pause()
        runner.stop()
        return runner.tracker

    def resume(self, user_id: str) -> WorkoutTracker:
        runner = self._require(user_id)
        runner.tracker.resume()
        runner.start()
        return runner.tracker

    def end(self, user_id: str) -> bool:
        """
        End the user's session early.

        Returns:
            True if a partial snapshot was queued
        """
        runner = self._require(user_id)
        saved = runner.tracker.end()
        runner.stop()
        self._sessions.pop(user_id, None)
        return saved

    def discard(self, user_id: str) -> None:
        """Tear down a user's runner without ending the workout."""
        runner = self._sessions.pop(user_id, None)
        if runner is None:
            return
        runner.tracker.autosave()
        runner.stop()
        logger.info(f"Replaced workout session for {user_id}")

    async def shutdown(self) -> None:
        """Stop every runner and wait for queued writes to finish."""
        for user_id in list(self._sessions):
            runner = self._sessions.pop(user_id)
            runner.tracker.autosave()
            runner.stop()
        await self.write_queue.drain()
        logger.info("Workout session manager shut down")

    def _require(self, user_id: str) -> TrackerRunner:
        runner = self._sessions.get(user_id)
        if runner is None:
            raise WorkoutSessionNotFoundError(user_id)
        return runner

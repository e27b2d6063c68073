"""
Workout Progress Tracker.

State machine composing the SessionTimer and ExerciseSequencer:

    IDLE -> RUNNING <-> PAUSED -> COMPLETED
    RUNNING/PAUSED --end--> IDLE

The tracker is synchronous and never waits on the datastore. Every write
(snapshots, the completed-workout record, stats) is handed to the
per-user WriteQueue. Scheduling of tick() and autosave() lives in
backend.services.workout_sessions.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from application.ports.notifier import Notifier
from application.ports.progress_repository import ProgressRepository
from application.ports.workout_repository import WorkoutRepository
from application.user_context import UserContext
from backend.core.gamification import AchievementService, GamificationLedger
from backend.core.write_queue import WriteKind, WriteQueue
from domain.models.exercise import ExerciseRuntimeState
from domain.models.plan import WorkoutPlan
from domain.models.snapshot import ExerciseStateBlob, WorkoutProgressSnapshot
from domain.models.stats import CompletedWorkoutRecord
from domain.workout import (
    ExerciseSequencer,
    SessionTimer,
    TickOutcome,
    TrackerState,
    TrackerStateError,
)

logger = logging.getLogger(__name__)

# Early ends at or below this many seconds are discarded
MIN_SAVED_SESSION_SECONDS = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutTracker:
    """
    One workout instance for one user.

    A COMPLETED tracker is finished for good; start a new tracker to train
    again.

    Usage:
        >>> tracker = WorkoutTracker(plan, ctx, progress_repo=..., workout_repo=...,
        ...                          ledger=ledger, write_queue=queue)
        >>> tracker.start()
        >>> for _ in range(60):
        ...     tracker.tick()
    """

    def __init__(
        self,
        plan: WorkoutPlan,
        context: UserContext,
        *,
        progress_repo: ProgressRepository,
        workout_repo: WorkoutRepository,
        ledger: GamificationLedger,
        write_queue: WriteQueue,
        notifier: Optional[Notifier] = None,
        achievements: Optional[AchievementService] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.plan = plan
        self.context = context
        self._progress_repo = progress_repo
        self._workout_repo = workout_repo
        self._ledger = ledger
        self._queue = write_queue
        self._notifier = notifier
        self._achievements = achievements
        self._clock = clock

        self.timer = SessionTimer()
        self.sequencer = ExerciseSequencer(plan.exercises)
        self.state = TrackerState.IDLE
        self.session_id: Optional[str] = None
        self.xp_earned: Optional[int] = None
        self.completed_record: Optional[CompletedWorkoutRecord] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> str:
        return self.context.user_id

    @property
    def current_exercise_index(self) -> int:
        return self.sequencer.current_exercise_index

    @property
    def is_resting(self) -> bool:
        return self.sequencer.is_resting

    @property
    def exercises(self) -> List[ExerciseRuntimeState]:
        return self.sequencer.exercises

    @property
    def segment_elapsed_seconds(self) -> int:
        return self.timer.segment_elapsed

    @property
    def total_elapsed_seconds(self) -> int:
        return self.timer.total_elapsed

    @property
    def is_running(self) -> bool:
        return self.state is TrackerState.RUNNING

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> str:
        """
        Begin a fresh session.

        Returns:
            The new session ID

        Raises:
            TrackerStateError: unless IDLE
        """
        self._require("start", TrackerState.IDLE)
        self.session_id = str(uuid.uuid4())
        self.sequencer.reset()
        self.timer.reset()
        self.state = TrackerState.RUNNING
        logger.info(f"Workout '{self.plan.title}' started for {self.user_id} (session {self.session_id})")
        self._notify("Workout started", f"{self.plan.title} has begun. Let's go!")
        return self.session_id

    def pause(self) -> None:
        self._require("pause", TrackerState.RUNNING)
        self.state = TrackerState.PAUSED
        self._save_snapshot()
        self._notify("Workout paused", "Your progress has been saved.")

    def resume(self) -> None:
        """Continue from exactly where the tracker stopped. Nothing is written."""
        self._require("resume", TrackerState.PAUSED)
        self.state = TrackerState.RUNNING

    def tick(self) -> Optional[TickOutcome]:
        """
        Advance one second. Ignored unless RUNNING.

        Returns:
            The sequencer outcome, or None when the tick was ignored
        """
        if self.state is not TrackerState.RUNNING:
            return None

        self.timer.advance()
        outcome = self.sequencer.tick(self.timer.segment_elapsed)
        if outcome.ends_segment:
            self.timer.reset_segment()
        if outcome is TickOutcome.PLAN_EXHAUSTED:
            self._complete()
        return outcome

    def autosave(self) -> bool:
        """Queue a periodic snapshot. Only RUNNING trackers save."""
        if self.state is not TrackerState.RUNNING:
            return False
        self._save_snapshot()
        return True

    def end(self) -> bool:
        """
        Stop early without awarding XP.

        Returns:
            True if a partial snapshot was queued (more than a minute elapsed)

        Raises:
            TrackerStateError: unless RUNNING or PAUSED
        """
        self._require("end", TrackerState.RUNNING, TrackerState.PAUSED)
        self.state = TrackerState.IDLE

        if self.timer.total_elapsed > MIN_SAVED_SESSION_SECONDS:
            self._save_snapshot()
            logger.info(f"Workout ended early for {self.user_id} after {self.timer.total_elapsed}s; saved")
            return True

        logger.info(f"Workout ended early for {self.user_id} after {self.timer.total_elapsed}s; discarded")
        return False

    def restore(self, snapshot: WorkoutProgressSnapshot) -> None:
        """
        Load a stored session and wait in PAUSED for an explicit resume.

        The in-segment counter restarts at zero; only the total elapsed time,
        cursor and completion flags are restored.

        Raises:
            TrackerStateError: unless IDLE
            ValueError: if the snapshot belongs to another user or was taken
                from a different plan (title or exercise count)
        """
        self._require("restore", TrackerState.IDLE)
        if snapshot.user_id != self.user_id:
            raise ValueError("Snapshot belongs to a different user")
        if snapshot.workout_type != self.plan.title:
            raise ValueError(
                f"Snapshot is for '{snapshot.workout_type}', not '{self.plan.title}'"
            )
        stored = snapshot.exercise_state.exercises
        if stored and len(stored) != len(self.plan.exercises):
            raise ValueError(
                f"Snapshot has {len(stored)} exercises; plan has {len(self.plan.exercises)}"
            )

        self.sequencer.restore(
            snapshot.current_exercise_index,
            snapshot.is_resting,
            snapshot.exercise_state.exercises,
        )
        self.timer.restore(snapshot.total_elapsed_seconds)
        self.session_id = snapshot.session_id
        self.state = TrackerState.PAUSED
        logger.info(f"Restored session {self.session_id} for {self.user_id}")

    def snapshot(self, *, is_completed: bool = False) -> WorkoutProgressSnapshot:
        """Build a snapshot of the current state (not persisted)."""
        now = self._clock()
        return WorkoutProgressSnapshot(
            user_id=self.user_id,
            session_id=self.session_id or "",
            workout_type=self.plan.title,
            current_exercise_index=self.sequencer.current_exercise_index,
            elapsed_timer_seconds=self.timer.segment_elapsed,
            is_resting=self.sequencer.is_resting,
            total_elapsed_seconds=self.timer.total_elapsed,
            exercise_state=ExerciseStateBlob(
                exercises=[ex.model_copy() for ex in self.sequencer.exercises]
            ),
            is_completed=is_completed,
            calories=self.plan.estimate_calories(self.timer.total_elapsed),
            intensity=self.plan.difficulty,
            workout_date=now.date(),
            created_at=now,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _complete(self) -> None:
        xp = self.plan.xp_reward
        now = self._clock()

        change = self._ledger.apply(self.context, xp)
        self._ledger.record_workout(self.context, now.date())

        record = CompletedWorkoutRecord(
            user_id=self.user_id,
            workout_type=self.plan.title,
            duration_seconds=self.timer.total_elapsed,
            calories_burned=self.plan.calories_burn,
            exercise_data=[ex.model_copy() for ex in self.sequencer.exercises],
            xp_earned=xp,
            completed_at=now,
            notes=CompletedWorkoutRecord.summary_note(self.sequencer.exercises),
        )
        final_snapshot = self.snapshot(is_completed=True)

        self._queue.submit(
            self.user_id,
            WriteKind.WORKOUT,
            lambda: self._workout_repo.save(record),
            description="your completed workout",
        )
        # Stats are read from the context when the job runs, not now
        self._ledger.persist(self.context, queue=self._queue)
        self._queue.submit(
            self.user_id,
            WriteKind.SNAPSHOT,
            lambda: self._progress_repo.save_snapshot(final_snapshot),
        )
        if self._achievements is not None:
            context = self.context
            self._queue.submit(
                self.user_id,
                WriteKind.ACHIEVEMENTS,
                lambda: self._achievements.evaluate(context),
                description="your achievements",
            )

        self.xp_earned = xp
        self.completed_record = record
        self.state = TrackerState.COMPLETED
        logger.info(f"Workout '{self.plan.title}' completed by {self.user_id}: +{xp} XP")

        self._ledger.announce(self.context, change)
        self._notify("Workout completed!", f"Great job! You earned {xp} XP.", variant="success")

    def _save_snapshot(self) -> None:
        snap = self.snapshot()
        self._queue.submit(
            self.user_id,
            WriteKind.SNAPSHOT,
            lambda: self._progress_repo.save_snapshot(snap),
        )

    def _require(self, operation: str, *allowed: TrackerState) -> None:
        if self.state not in allowed:
            raise TrackerStateError(operation, self.state)

    def _notify(self, title: str, message: str, *, variant: str = "default") -> None:
        if self._notifier is not None:
            self._notifier.notify(self.user_id, title, message, variant=variant)

    def __repr__(self) -> str:
        return (
            f"WorkoutTracker(user={self.user_id!r}, state={self.state.value}, "
            f"index={self.current_exercise_index}, resting={self.is_resting}, {self.timer!r})"
        )

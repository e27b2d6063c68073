"""
Gamification Ledger and Achievements.

This module converts XP awards into level state and grants the built-in
milestone achievements:
- Level math: single level-up per award, overflow carried as XP
- Join-price deductions for challenges (no level-down)
- Workout count and daily streak bookkeeping
- Idempotent milestone achievements
"""
from typing import Optional, List, Callable
from dataclasses import dataclass
from datetime import date, timedelta
import logging

from application.exceptions import InsufficientXpError
from application.ports.achievement_repository import AchievementRepository
from application.ports.notifier import Notifier
from application.ports.stats_repository import StatsRepository
from application.user_context import UserContext
from backend.core.write_queue import WriteKind, WriteQueue
from domain.models.achievement import Achievement, EarnedAchievement
from domain.models.stats import UserStats, xp_threshold

logger = logging.getLogger(__name__)


# =============================================================================
# Level math
# =============================================================================


@dataclass(frozen=True)
class LevelChange:
    """Outcome of applying an XP award."""

    awarded: int
    previous_level: int
    level: int
    xp: int

    @property
    def leveled_up(self) -> bool:
        return self.level > self.previous_level


def compute_award(level: int, xp: int, amount: int) -> LevelChange:
    """
    Apply an XP award to (level, xp).

    threshold = level * 500. At or above it the level increases by exactly
    one and the overflow is kept as XP, however large it is.

    Examples:
        >>> compute_award(1, 450, 100)
        LevelChange(awarded=100, previous_level=1, level=2, xp=50)
    """
    if amount < 0:
        raise ValueError("XP award must be non-negative")

    new_xp = xp + amount
    threshold = xp_threshold(level)
    if new_xp >= threshold:
        return LevelChange(awarded=amount, previous_level=level, level=level + 1, xp=new_xp - threshold)
    return LevelChange(awarded=amount, previous_level=level, level=level, xp=new_xp)


def next_streak(stats: UserStats, today: date) -> int:
    """Same day keeps the streak, the next day extends it, anything else restarts at 1."""
    last = stats.last_workout_date
    if last == today:
        return max(stats.streak, 1)
    if last == today - timedelta(days=1):
        return stats.streak + 1
    return 1


# =============================================================================
# Ledger
# =============================================================================


class GamificationLedger:
    """
    Applies XP and workout bookkeeping to a UserContext and persists it.

    In-memory state always advances first. A failed write is logged and
    reported, and the context is not rolled back.

    With a write queue, persist() hands the write to it as a STATS job that
    reads the context when it runs, so every stats write for a user goes
    through one ordered queue and the newest stats always win.
    """

    def __init__(
        self,
        stats_repo: StatsRepository,
        notifier: Optional[Notifier] = None,
        write_queue: Optional[WriteQueue] = None,
    ):
        self.stats_repo = stats_repo
        self.notifier = notifier
        self.write_queue = write_queue

    def apply(self, context: UserContext, amount: int) -> LevelChange:
        """Apply an award to the in-memory stats only."""
        with context.stats_lock:
            stats = context.stats
            change = compute_award(stats.level, stats.xp, amount)
            context.update_stats({"level": change.level, "xp": change.xp})
        if change.leveled_up:
            logger.info(f"User {context.user_id} reached level {change.level}")
        return change

    def write(self, stats: UserStats) -> bool:
        """Persist a stats value as-is. Used directly by the write queue."""
        return self.stats_repo.update(stats)

    def persist(self, context: UserContext, *, queue: Optional[WriteQueue] = None) -> bool:
        """
        Write the context's current stats.

        Queued when a write queue is given or configured (returns True once
        queued); otherwise written immediately.
        """
        queue = queue or self.write_queue
        if queue is not None:
            queue.submit(
                context.user_id,
                WriteKind.STATS,
                lambda: self.write(context.stats),
                description="your XP",
            )
            return True

        ok = self.write(context.stats)
        if not ok:
            logger.error(f"Failed to persist stats for user {context.user_id}")
            self._notify(context.user_id, "Error", "Failed to update your XP.", "destructive")
        return ok

    def announce(self, context: UserContext, change: LevelChange) -> None:
        """Notify the user about a level-up."""
        if change.leveled_up:
            self._notify(
                context.user_id,
                "Level up!",
                f"Congratulations! You've reached level {change.level}!",
                "success",
            )

    def award(self, context: UserContext, amount: int) -> LevelChange:
        """Apply, persist and announce an XP award."""
        change = self.apply(context, amount)
        self.persist(context)
        self.announce(context, change)
        return change

    def deduct(self, context: UserContext, amount: int) -> UserStats:
        """
        Spend XP (challenge join price). The level never decreases.

        Raises:
            InsufficientXpError: if the user has less XP than amount
        """
        if amount <= 0:
            return context.stats
        with context.stats_lock:
            available = context.stats.xp
            if available < amount:
                raise InsufficientXpError(required=amount, available=available)
            stats = context.update_stats({"xp": available - amount})
        self.persist(context)
        return stats

    def record_workout(self, context: UserContext, today: date) -> UserStats:
        """Count a finished workout and update the daily streak (in memory)."""
        with context.stats_lock:
            stats = context.stats
            return context.update_stats(
                {
                    "workouts_completed": stats.workouts_completed + 1,
                    "streak": next_streak(stats, today),
                    "last_workout_date": today,
                }
            )

    def _notify(self, user_id: str, title: str, message: str, variant: str) -> None:
        if self.notifier is not None:
            self.notifier.notify(user_id, title, message, variant=variant)


# =============================================================================
# Achievements
# =============================================================================


@dataclass(frozen=True)
class Milestone:
    """A built-in achievement rule, matched to its definition by name."""

    name: str
    reached: Callable[[UserStats], bool]


MILESTONES: List[Milestone] = [
    Milestone("First Workout", lambda s: s.workouts_completed >= 1),
    Milestone("3-Day Streak", lambda s: s.streak >= 3),
    Milestone("Level 5 Reached", lambda s: s.level >= 5),
    Milestone("Workout Warrior", lambda s: s.workouts_completed >= 10),
]


class AchievementService:
    """Grants milestone achievements the user has reached but not yet earned."""

    def __init__(
        self,
        achievement_repo: AchievementRepository,
        notifier: Optional[Notifier] = None,
        milestones: Optional[List[Milestone]] = None,
    ):
        self.achievement_repo = achievement_repo
        self.notifier = notifier
        self.milestones = milestones if milestones is not None else MILESTONES

    def list_for_user(self, user_id: str) -> List[EarnedAchievement]:
        return self.achievement_repo.list_earned(user_id)

    def evaluate(self, context: UserContext) -> List[Achievement]:
        """
        Award every reached milestone not already earned.

        Returns:
            Newly awarded achievements
        """
        stats = context.stats
        earned_names = {e.achievement.name for e in self.achievement_repo.list_earned(context.user_id)}
        awarded: List[Achievement] = []

        for milestone in self.milestones:
            if milestone.name in earned_names or not milestone.reached(stats):
                continue

            achievement = self.achievement_repo.get_by_name(milestone.name)
            if achievement is None:
                logger.warning(f"Achievement definition missing: {milestone.name}")
                continue

            if not self.achievement_repo.award(context.user_id, achievement.id):
                logger.error(f"Failed to award '{milestone.name}' to {context.user_id}")
                continue

            awarded.append(achievement)
            if self.notifier is not None:
                self.notifier.notify(
                    context.user_id,
                    "Achievement unlocked!",
                    f"You earned \"{achievement.name}\".",
                    variant="success",
                )

        return awarded

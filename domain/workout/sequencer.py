"""
Exercise sequencer: which exercise is active and whether it is resting.

Segment rules, checked after the timer has advanced for the tick:

- work phase reaches work_seconds: the exercise is marked completed and the
  slot flips to resting; the index does not move.
- rest phase reaches rest_seconds: the exercise is (again) marked completed;
  on the last exercise the plan is exhausted, otherwise the index advances
  and the resting flag clears.

A zero-second rest still costs one tick, because the rest check only runs
on the tick after the flip.
"""

from enum import Enum
from typing import List

from domain.models.exercise import ExerciseDefinition, ExerciseRuntimeState, fresh_runtime_states


class TickOutcome(str, Enum):
    """What a tick did to the sequence."""

    CONTINUE = "continue"
    REST_STARTED = "rest_started"
    EXERCISE_ADVANCED = "exercise_advanced"
    PLAN_EXHAUSTED = "plan_exhausted"

    @property
    def ends_segment(self) -> bool:
        return self is not TickOutcome.CONTINUE


class ExerciseSequencer:
    """Cursor over an ordered exercise list with a work/rest flag."""

    def __init__(self, definitions: List[ExerciseDefinition]):
        if not definitions:
            raise ValueError("A workout plan needs at least one exercise")
        self._definitions = list(definitions)
        self.exercises: List[ExerciseRuntimeState] = fresh_runtime_states(self._definitions)
        self.current_exercise_index = 0
        self.is_resting = False

    @property
    def current(self) -> ExerciseRuntimeState:
        return self.exercises[self.current_exercise_index]

    @property
    def is_last(self) -> bool:
        return self.current_exercise_index == len(self.exercises) - 1

    @property
    def segment_duration(self) -> int:
        """Length of the active segment in seconds."""
        current = self.current
        return current.rest_seconds if self.is_resting else current.work_seconds

    @property
    def completed_count(self) -> int:
        return sum(1 for ex in self.exercises if ex.completed)

    def reset(self) -> None:
        self.exercises = fresh_runtime_states(self._definitions)
        self.current_exercise_index = 0
        self.is_resting = False

    def restore(
        self,
        current_exercise_index: int,
        is_resting: bool,
        exercises: List[ExerciseRuntimeState],
    ) -> None:
        """
        Load persisted sequencer state.

        Completion flags are taken from the stored list by position; the
        plan's own definitions stay authoritative for durations.

        Raises:
            ValueError: if the index is outside the plan
        """
        if not 0 <= current_exercise_index < len(self._definitions):
            raise ValueError(
                f"Exercise index {current_exercise_index} outside plan of {len(self._definitions)}"
            )
        self.reset()
        for runtime, stored in zip(self.exercises, exercises):
            runtime.completed = stored.completed
        self.current_exercise_index = current_exercise_index
        self.is_resting = is_resting

    def tick(self, segment_elapsed: int) -> TickOutcome:
        """
        Evaluate the active segment after a one-second timer advance.

        Args:
            segment_elapsed: Seconds spent in the current segment so far

        Returns:
            TickOutcome describing any transition
        """
        if segment_elapsed < self.segment_duration:
            return TickOutcome.CONTINUE

        self.current.completed = True

        if not self.is_resting:
            self.is_resting = True
            return TickOutcome.REST_STARTED

        if self.is_last:
            return TickOutcome.PLAN_EXHAUSTED

        self.current_exercise_index += 1
        self.is_resting = False
        return TickOutcome.EXERCISE_ADVANCED

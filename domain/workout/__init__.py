"""
Workout session primitives: timer, sequencer and lifecycle states.

These are pure, synchronous objects. Scheduling and persistence are wired
around them in backend.core.workout_tracker and
backend.services.workout_sessions.
"""

from domain.workout.sequencer import ExerciseSequencer, TickOutcome
from domain.workout.state import TrackerState, TrackerStateError
from domain.workout.timer import SessionTimer

__all__ = [
    "ExerciseSequencer",
    "SessionTimer",
    "TickOutcome",
    "TrackerState",
    "TrackerStateError",
]

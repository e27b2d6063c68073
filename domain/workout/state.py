"""
Tracker lifecycle states.
"""

from enum import Enum


class TrackerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class TrackerStateError(Exception):
    """Raised when an operation is not allowed in the tracker's current state."""

    def __init__(self, operation: str, state: TrackerState):
        super().__init__(f"Cannot {operation} a workout that is {state.value}")
        self.operation = operation
        self.state = state

"""
Workout Session Schemas.

Schemas for:
- StartSessionRequest: body for POST /workouts/sessions/start
- SessionStateResponse: live tracker view returned by every session endpoint
- EndSessionResponse: result of POST /workouts/sessions/end
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from backend.core.workout_tracker import WorkoutTracker
from domain.models.exercise import ExerciseRuntimeState
from domain.models.plan import WorkoutPlan


class StartSessionRequest(BaseModel):
    """Request body for POST /workouts/sessions/start."""
    resume: bool = Field(
        default=False,
        description="Restore today's latest unfinished session instead of starting fresh",
    )
    plan: Optional[WorkoutPlan] = Field(
        default=None,
        description="Plan to run. Defaults to the built-in full body plan.",
    )


class SessionStateResponse(BaseModel):
    """Snapshot of a live tracker."""
    session_id: Optional[str] = None
    state: str
    workout_type: str
    current_exercise_index: int
    current_exercise: Optional[str] = None
    is_resting: bool
    segment_elapsed_seconds: int
    segment_duration_seconds: int
    total_elapsed_seconds: int
    completed_exercises: int
    total_exercises: int
    exercises: List[ExerciseRuntimeState]
    xp_earned: Optional[int] = None

    @classmethod
    def from_tracker(cls, tracker: WorkoutTracker) -> "SessionStateResponse":
        sequencer = tracker.sequencer
        return cls(
            session_id=tracker.session_id,
            state=tracker.state.value,
            workout_type=tracker.plan.title,
            current_exercise_index=tracker.current_exercise_index,
            current_exercise=sequencer.current.name,
            is_resting=tracker.is_resting,
            segment_elapsed_seconds=tracker.segment_elapsed_seconds,
            segment_duration_seconds=sequencer.segment_duration,
            total_elapsed_seconds=tracker.total_elapsed_seconds,
            completed_exercises=sequencer.completed_count,
            total_exercises=len(tracker.exercises),
            exercises=[ex.model_copy() for ex in tracker.exercises],
            xp_earned=tracker.xp_earned,
        )


class EndSessionResponse(BaseModel):
    success: bool = True
    saved: bool = Field(..., description="Whether a partial snapshot was queued")

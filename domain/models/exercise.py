"""
Exercise value objects for timed interval workouts.

An ExerciseDefinition is the immutable prescription (work and rest
durations); ExerciseRuntimeState adds the per-session completion flag.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ExerciseDefinition(BaseModel):
    """
    Value object describing one timed exercise slot in a plan.

    Examples:
        >>> ex = ExerciseDefinition(name="Jumping Jacks", work_seconds=45, rest_seconds=15)
        >>> ex.cycle_seconds
        60
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=200, description="Exercise name")
    work_seconds: int = Field(..., gt=0, description="Duration of the work phase")
    rest_seconds: int = Field(default=0, ge=0, description="Duration of the rest phase")

    @property
    def cycle_seconds(self) -> int:
        """Work plus rest, in seconds."""
        return self.work_seconds + self.rest_seconds


class ExerciseRuntimeState(ExerciseDefinition):
    """
    ExerciseDefinition plus the completion flag for the running session.

    Mutated in place by the sequencer as exercises complete.
    """

    model_config = ConfigDict(frozen=False)

    completed: bool = Field(default=False, description="Whether the work phase has finished")

    @classmethod
    def from_definition(cls, definition: ExerciseDefinition) -> "ExerciseRuntimeState":
        return cls(
            name=definition.name,
            work_seconds=definition.work_seconds,
            rest_seconds=definition.rest_seconds,
            completed=False,
        )


def fresh_runtime_states(definitions: List[ExerciseDefinition]) -> List[ExerciseRuntimeState]:
    """Build an all-incomplete runtime list in plan order."""
    return [ExerciseRuntimeState.from_definition(d) for d in definitions]

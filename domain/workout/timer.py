"""
Session timer: per-segment and whole-session second counters.

The timer does not schedule anything itself; the tracker calls advance()
once per elapsed second while running.
"""


class SessionTimer:
    """Two monotonically increasing counters driven by tracker ticks."""

    def __init__(self) -> None:
        self.segment_elapsed = 0
        self.total_elapsed = 0

    def advance(self, seconds: int = 1) -> None:
        self.segment_elapsed += seconds
        self.total_elapsed += seconds

    def reset_segment(self) -> None:
        """Start a new work/rest segment. Total elapsed is untouched."""
        self.segment_elapsed = 0

    def reset(self) -> None:
        self.segment_elapsed = 0
        self.total_elapsed = 0

    def restore(self, total_elapsed: int) -> None:
        """Load a persisted total; the segment always restarts at zero."""
        self.segment_elapsed = 0
        self.total_elapsed = total_elapsed

    def __repr__(self) -> str:
        return f"SessionTimer(segment={self.segment_elapsed}, total={self.total_elapsed})"

"""
Wall-clock budget carried through a single invocation.

Serverless triggers are killed at a hard ceiling, so every outbound call
clamps its own timeout to whatever is left of the invocation budget.

Usage:
    deadline = Deadline(55.0)
    timeout = deadline.clamp(25.0)   # never longer than the remaining budget
    if deadline.expired:
        ...
"""

import time
from typing import Callable, Optional


class Deadline:
    """Monotonic countdown from a fixed budget in seconds."""

    def __init__(
        self,
        budget_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.budget_seconds = budget_seconds
        self._clock = clock
        self._started = clock()

    def elapsed(self) -> float:
        return self._clock() - self._started

    def remaining(self) -> float:
        return max(0.0, self.budget_seconds - self.elapsed())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def elapsed_ms(self) -> int:
        return int(self.elapsed() * 1000)

    def clamp(self, timeout: float, floor: Optional[float] = None) -> float:
        """
        Clamp a per-call timeout to the remaining budget.

        Args:
            timeout: Timeout the caller would use with unlimited budget
            floor: Optional minimum to return (for calls that cannot
                   meaningfully run shorter)

        Returns:
            min(timeout, remaining), raised to floor when given
        """
        clamped = min(timeout, self.remaining())
        if floor is not None:
            clamped = max(clamped, floor)
        return clamped

    def __repr__(self) -> str:
        return f"Deadline(budget={self.budget_seconds}, remaining={self.remaining():.1f})"

"""Time sources for the auction deadline."""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        """Current time in whole seconds."""
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """
    Clock that only moves when told to.

    Used by tests and the simulator to jump past the deadline.
    """

    def __init__(self, start: int = 1_700_000_000):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError("Cannot move the clock backwards")
        self._now = timestamp

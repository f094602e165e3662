"""
Clock sources
- A clock only needs now() -> float seconds; differences are durations in seconds
- MonotonicClock: process clock, unaffected by wall-clock adjustments
- ManualClock: explicit time for tests and replaying recorded streams
"""

import time


class Clock:
    def now(self) -> float:
        raise NotImplementedError


class MonotonicClock(Clock):
    def now(self) -> float:
        return time.monotonic()


class ManualClock(Clock):
    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move the clock forward by `seconds` and return the new time."""
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += float(seconds)
        return self._now

    def set(self, timestamp: float) -> None:
        self._now = float(timestamp)

"""
Clock sources for the auction engine.

The engine only reads time. Phase boundaries are integer seconds, like
block timestamps, so every clock reports whole seconds.
"""

import time

from blindbid.utils.logger import get_logger

logger = get_logger("clock")


class Clock:
    """Timestamp source read by the auction engine."""

    def now(self) -> int:
        raise NotImplementedError


class SystemClock(Clock):
    """Wall-clock time in whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock(Clock):
    """
    Externally driven clock for tests and simulations.

    Time only moves forward; attempts to go back raise ValueError.
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"Start time must be >= 0, got {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move the clock forward by `seconds` and return the new time."""
        if seconds < 0:
            raise ValueError(f"Cannot advance by negative amount {seconds}")
        self._now += seconds
        logger.debug(f"Clock advanced to {self._now}")
        return self._now

    def increase_to(self, timestamp: int) -> int:
        """Move the clock to `timestamp`, which must not be in the past."""
        if timestamp < self._now:
            raise ValueError(f"Timestamp {timestamp} is lower than current time {self._now}")
        self._now = timestamp
        logger.debug(f"Clock set to {self._now}")
        return self._now

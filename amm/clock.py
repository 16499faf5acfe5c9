"""Timestamp sources for deadline checks."""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current timestamp in unix seconds."""

    def now(self) -> int: ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to.

    Usage:
        clock = ManualClock(1_700_000_000)
        clock.advance(60)
    """

    def __init__(self, timestamp: int = 0) -> None:
        self.timestamp = timestamp

    def now(self) -> int:
        return self.timestamp

    def advance(self, seconds: int) -> None:
        self.timestamp += seconds

    def set(self, timestamp: int) -> None:
        self.timestamp = timestamp

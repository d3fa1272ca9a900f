"""Tick clock.

Markets measure deadlines in integer ticks. In production a tick is
TICK_SECONDS of wall-clock UTC time; tests inject a clock they can advance.
"""

from datetime import datetime, timezone
from typing import Protocol

from config.settings import settings


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class TickClock(Protocol):
    def now(self) -> int: ...


class SystemTickClock:
    def __init__(self, tick_seconds: int | None = None) -> None:
        self._tick_seconds = tick_seconds or settings.TICK_SECONDS

    def now(self) -> int:
        return int(utc_now().timestamp()) // self._tick_seconds

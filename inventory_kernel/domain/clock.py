"""
Clock -- injectable time source.

Services never call ``datetime.now()`` directly; they receive a Clock.
created_at and deleted_at are stamped from it, which keeps listing order
deterministic under test.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock interface. ``now()`` is always timezone-aware."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    """Production clock returning the current UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    ``now()`` returns the same value until ``advance()``, ``tick()`` or
    ``set_time()`` is called.  With ``auto_tick_seconds`` set, every call
    to ``now()`` first advances the clock, so consecutive records get
    strictly increasing timestamps.
    """

    def __init__(
        self,
        fixed_time: datetime | None = None,
        auto_tick_seconds: int = 0,
    ):
        self._fixed_time = fixed_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self._advance_seconds = 0
        self._auto_tick_seconds = auto_tick_seconds

    def now(self) -> datetime:
        self._advance_seconds += self._auto_tick_seconds
        return self._fixed_time + timedelta(seconds=self._advance_seconds)

    def set_time(self, time: datetime) -> None:
        self._fixed_time = time
        self._advance_seconds = 0

    def advance(self, seconds: int = 1) -> None:
        self._advance_seconds += seconds

    def tick(self) -> datetime:
        """Advance by 1 second and return new time."""
        self.advance(1)
        return self.now()

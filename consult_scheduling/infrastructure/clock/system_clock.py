from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from consult_scheduling.application.ports.clock import ClockPort


class SystemClock(ClockPort):
    """Wall-clock time of the business timezone, returned naive."""

    def __init__(self, timezone: str = "UTC") -> None:
        self._timezone = _safe_timezone(timezone)

    def now(self) -> datetime:
        return datetime.now(self._timezone).replace(tzinfo=None, microsecond=0)


class FixedClock(ClockPort):
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return ZoneInfo("UTC")

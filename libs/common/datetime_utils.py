"""Datetime utilities: UTC timestamps and injectable clocks.

Usage:
    from libs.common.datetime_utils import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

Anything that depends on "today" (membership years, lapse checks) takes a
``Clock`` instead of calling ``datetime.now()`` so tests and time-travel
requests can pin the date without touching global state.
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Protocol, Union
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    Always use this for timestamps in the database.
    """
    return datetime.now(timezone.utc)


class Clock(Protocol):
    """Source of the current moment."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock, optionally localised to an IANA time zone."""

    def __init__(self, tz: Optional[str] = None):
        self._tz = ZoneInfo(tz) if tz else timezone.utc

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock:
    """Clock frozen at a given moment. A bare date is pinned to noon UTC."""

    def __init__(self, moment: Union[date, datetime]):
        if not isinstance(moment, datetime):
            moment = datetime.combine(moment, time(12, 0), tzinfo=timezone.utc)
        elif moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def __repr__(self) -> str:
        return f"<FixedClock {self._moment.isoformat()}>"


def parse_mock_date(value: str) -> datetime:
    """Parse an ISO date or datetime string (``Z`` suffix allowed).

    Raises ValueError for anything else.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    if len(value) == 10:
        return datetime.combine(
            date.fromisoformat(value), time(12, 0), tzinfo=timezone.utc
        )
    return datetime.fromisoformat(value)

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional


def now_local() -> datetime:
    """Current server time.

    Note: Wrapped so services can take it as an injectable clock.
    """
    return datetime.now()


def week_dates(start: Optional[date], week_number: int) -> tuple[Optional[date], Optional[date]]:
    """First and last calendar day of a placement week, if the start is known."""
    if start is None:
        return None, None
    week_start = start + timedelta(days=(int(week_number) - 1) * 7)
    return week_start, week_start + timedelta(days=6)


def fmt_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None


def fmt_time(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


def fmt_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None

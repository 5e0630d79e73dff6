"""
Market Hours Utility

IST analysis window used by the batch scheduler.
"""

from datetime import datetime, date, timedelta
from typing import Optional
import pytz

from techscore.core.config import settings

IST = pytz.timezone("Asia/Kolkata")


def get_ist_now() -> datetime:
    """Get current time in IST."""
    return datetime.now(IST)


def is_weekend(dt: date) -> bool:
    """Check if date is a weekend."""
    return dt.weekday() >= 5  # Saturday = 5, Sunday = 6


def _parse_hhmm(value: str) -> tuple[int, int]:
    hour, minute = value.split(":")
    return int(hour), int(minute)


def is_analysis_window_open(
    dt: Optional[datetime] = None,
    window_start: Optional[str] = None,
    window_end: Optional[str] = None,
) -> bool:
    """
    Check if the batch analysis window is open.

    The window runs on weekdays from window_start (inclusive) to
    window_end (exclusive), IST.
    """
    if dt is None:
        dt = get_ist_now()
    start = _parse_hhmm(window_start or settings.analysis_window_start)
    end = _parse_hhmm(window_end or settings.analysis_window_end)

    if is_weekend(dt.date()):
        return False

    current = (dt.hour, dt.minute)
    return start <= current < end


def get_next_run_time(
    dt: Optional[datetime] = None,
    interval_minutes: Optional[int] = None,
    window_start: Optional[str] = None,
    window_end: Optional[str] = None,
) -> datetime:
    """
    Get the next scheduled analysis run.

    Inside the window the next run is one interval away; otherwise it is
    the start of the window on the next weekday (today if the window has
    not opened yet).
    """
    if dt is None:
        dt = get_ist_now()
    if interval_minutes is None:
        interval_minutes = settings.schedule_interval_minutes

    if is_analysis_window_open(dt, window_start, window_end):
        return dt + timedelta(minutes=interval_minutes)

    start_hour, start_minute = _parse_hhmm(window_start or settings.analysis_window_start)
    candidate = dt.replace(hour=start_hour, minute=start_minute, second=0, microsecond=0)

    if candidate <= dt:
        candidate += timedelta(days=1)
    while is_weekend(candidate.date()):
        candidate += timedelta(days=1)

    return candidate


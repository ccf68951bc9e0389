"""
Event time-window policy.

All comparisons are between timezone-aware UTC instants. Naive datetimes
(from the store or from callers) are read as UTC. No civil timezone is
involved, so booking close, check-in window and expiry agree everywhere.
"""

from datetime import datetime, timezone
from typing import Optional, Union

from utils.error_handling import (
    EventEndedError,
    EventNotStartedError,
    SalesClosedError,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 store value into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    # fromisoformat only accepts a trailing "Z" from 3.11 onwards
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def compute_expired(now: datetime, event_end_time: datetime) -> bool:
    """A ticket is expired once the observation time passes the event end."""
    return ensure_utc(now) > ensure_utc(event_end_time)


def check_booking_window(now: datetime, start_time: datetime, end_time: datetime) -> None:
    """Sales close at event start; a finished event can never be booked."""
    now = ensure_utc(now)
    if not now < ensure_utc(start_time):
        raise SalesClosedError()
    if not now < ensure_utc(end_time):
        raise EventEndedError("Event has already ended")


def check_verification_window(
    now: datetime, start_time: datetime, end_time: datetime
) -> None:
    """Check-in is allowed within [start_time, end_time] inclusive."""
    now = ensure_utc(now)
    if now < ensure_utc(start_time):
        raise EventNotStartedError("Event has not started yet. You cannot check in.")
    if now > ensure_utc(end_time):
        raise EventEndedError()

"""Date helpers shared by the models, analytics and store."""

from datetime import date, datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Return a fresh opaque entity id."""
    return uuid4().hex


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_of(value: datetime) -> date:
    """Calendar day (UTC) a timestamp falls on."""
    return as_utc(value).date()


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """
    Move a (year, month) pair by ``delta`` months.

    >>> shift_month(2025, 1, -1)
    (2024, 12)
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1

"""Shared helpers for TaskOrbit."""

from taskorbit.utils.dates import as_utc, day_of, new_id, shift_month, utcnow

__all__ = [
    "as_utc",
    "day_of",
    "new_id",
    "shift_month",
    "utcnow",
]

"""Utility functions for time handling and cancellation."""

from .cancellation import CancellationToken
from .timestamps import age_in_hours, ensure_utc, parse_iso_datetime, unix_to_timestamp, utc_now

__all__ = [
    "CancellationToken",
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "unix_to_timestamp",
    "age_in_hours",
]

"""UTC helpers shared by fetchers, models and scoring.

Every datetime that enters the engine is normalized to an aware UTC value so
that age and freshness comparisons never mix naive and aware datetimes.
"""

from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return dt as an aware UTC datetime; naive values are assumed to be UTC.

    >>> ensure_utc(datetime(2026, 3, 2, 12)).tzinfo is UTC
    True
    """
    if dt is None:
        return None
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def parse_iso_datetime(iso_string: Optional[str]) -> Optional[datetime]:
    """Lenient ISO 8601 parsing for timestamps found in source payloads.

    A trailing ``Z`` and bare dates are accepted. Anything unparsable yields
    None rather than an error, since a missing date only disables the
    freshness check for that item.
    """
    text = (iso_string or "").strip()
    if not text:
        return None
    if text[-1] in "Zz":
        text = f"{text[:-1]}+00:00"

    for parse in (datetime.fromisoformat, lambda value: datetime.strptime(value, "%Y-%m-%d")):
        try:
            return ensure_utc(parse(text))
        except ValueError:
            continue
    return None


def unix_to_timestamp(unix_seconds: float) -> datetime:
    return datetime.fromtimestamp(unix_seconds, tz=UTC)


def age_in_hours(created_at: Optional[datetime], reference: datetime) -> Optional[float]:
    """Hours from created_at to reference, or None when created_at is unknown.

    Items stamped after reference get a negative age.
    """
    if created_at is None:
        return None
    return (ensure_utc(reference) - ensure_utc(created_at)).total_seconds() / 3600.0

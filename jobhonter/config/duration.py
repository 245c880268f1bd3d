"""Duration strings used for timeouts and freshness windows.

Two spellings are accepted: compact unit strings such as ``30s``, ``15m``,
``48h``, ``2d`` or ``1h30m``, and ISO-8601 durations such as ``PT30S`` or
``P2D``. Both resolve to a positive whole number of seconds.
"""

import re


class DurationParseError(ValueError):
    """A duration string was empty, malformed or zero."""


_UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1}

_ISO_PATTERN = re.compile(
    r"P(?:(?P<d>\d+)D)?(?:T(?:(?P<h>\d+)H)?(?:(?P<m>\d+)M)?(?:(?P<s>\d+(?:\.\d+)?)S)?)?"
)
_COMPACT_PATTERN = re.compile(r"(?:\d+\s*[smhd]\s*)+")
_COMPACT_PART = re.compile(r"(\d+)\s*([smhd])")


def parse_duration(duration_str: str) -> int:
    """
    Convert a duration string to seconds.

    Examples:
        >>> parse_duration("1h30m")
        5400
        >>> parse_duration("PT48H")
        172800
    """
    text = duration_str.strip()
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text[0] in "Pp":
        seconds = _iso_seconds(text)
    else:
        seconds = _compact_seconds(text)

    if seconds <= 0:
        raise DurationParseError(f"Duration must be greater than zero: '{duration_str}'")
    return seconds


def _iso_seconds(text: str) -> int:
    match = _ISO_PATTERN.fullmatch(text.upper())
    if match is None or not any(match.groupdict().values()):
        raise DurationParseError(f"'{text}' is not an ISO-8601 duration (try 'PT30S' or 'P2D')")
    return sum(
        int(float(match.group(unit) or 0) * _UNIT_SECONDS[unit.lower()])
        for unit in ("d", "h", "m", "s")
    )


def _compact_seconds(text: str) -> int:
    lowered = text.lower()
    if not _COMPACT_PATTERN.fullmatch(lowered):
        raise DurationParseError(
            f"'{text}' is not a duration; use digits followed by s, m, h or d (e.g. '15m', '1h30m')"
        )
    return sum(int(amount) * _UNIT_SECONDS[unit] for amount, unit in _COMPACT_PART.findall(lowered))


def validate_duration_range(
    duration_seconds: int, min_seconds: int, max_seconds: int, label: str = "Duration"
) -> None:
    """Raise DurationParseError unless min_seconds <= duration_seconds <= max_seconds."""
    if duration_seconds < min_seconds:
        bound, problem = min_seconds, "too short"
    elif duration_seconds > max_seconds:
        bound, problem = max_seconds, "too long"
    else:
        return

    limit = "Minimum" if problem == "too short" else "Maximum"
    raise DurationParseError(
        f"{label} {problem}: {seconds_to_human_readable(duration_seconds)} "
        f"({limit} is {seconds_to_human_readable(bound)})"
    )


def seconds_to_human_readable(seconds: int) -> str:
    """Largest whole unit, e.g. ``"15 minutes"`` or ``"1 day"``."""
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            value = seconds // size
            break
    else:
        unit, value = "second", seconds
    return f"{value} {unit}" + ("" if value == 1 else "s")

"""Soft configuration checks that warn instead of failing."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect raw configuration for settings that are legal but suspicious.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    for source in config_dict.get("sources", []) or []:
        if not isinstance(source, dict):
            continue
        name = source.get("name", "Unknown")
        if not source.get("enabled", True):
            warning_messages.append(f"Source '{name}' is disabled and will be skipped")

        delay = source.get("min_request_delay")
        if isinstance(delay, (int, float)) and delay < 1.0:
            warning_messages.append(
                f"Source '{name}' has min_request_delay {delay}s, which may trigger rate limits"
            )

        subreddits = source.get("subreddits")
        if isinstance(subreddits, list) and len(subreddits) > 25:
            warning_messages.append(
                f"Source '{name}' searches {len(subreddits)} subreddits; requests will be slow"
            )

    scoring = config_dict.get("scoring", {})
    if isinstance(scoring, dict):
        coverage = scoring.get("coverage_weight", 0.55)
        bonuses = [scoring.get(k, 0) for k in ("remote_bonus", "salary_bonus", "freshness_bonus")]
        if all(isinstance(x, (int, float)) for x in [coverage, *bonuses]) and sum(bonuses) >= coverage:
            warning_messages.append(
                "Auxiliary bonuses outweigh keyword coverage; ranking will favour remote/salary/fresh items"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message through the warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)

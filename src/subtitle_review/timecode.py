"""Timestamp parsing for ``HH:MM:SS`` subtitle timecodes."""

from __future__ import annotations

import re
from typing import Optional, Tuple

TIMESTAMP_PATTERN = re.compile(r"^\d{2}:\d{2}:\d{2}$")
_INT_PART = re.compile(r"[+-]?[0-9]+")


def is_valid_timestamp(timestamp: str) -> bool:
    """Return True if the timestamp is strictly two-digit ``HH:MM:SS``."""
    if not isinstance(timestamp, str):
        return False
    return TIMESTAMP_PATTERN.fullmatch(timestamp) is not None


def components_from_timestamp(timestamp: str) -> Optional[Tuple[int, int, int]]:
    """
    Split a timestamp into (hours, minutes, seconds).

    Looser than is_valid_timestamp: "1:2:3" parses, "00:00", "aa:00:00"
    and " 1:2:3" do not.
    """
    if not isinstance(timestamp, str):
        return None

    parts = timestamp.split(":")
    if len(parts) != 3:
        return None

    if not all(_INT_PART.fullmatch(p) for p in parts):
        return None

    hour, minute, second = (int(p) for p in parts)

    return hour, minute, second


def seconds_from_timestamp(timestamp: str) -> Optional[float]:
    """Convert a timestamp to seconds, or None if it cannot be parsed."""
    components = components_from_timestamp(timestamp)
    if components is None:
        return None
    hour, minute, second = components
    return float(hour * 3600 + minute * 60 + second)

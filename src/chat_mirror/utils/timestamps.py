"""Timestamp conversion helpers.

Every timestamp stored by chat_mirror is an integer count of epoch
milliseconds, whatever encoding the remote service used.
"""

import time
from datetime import datetime, timezone
from typing import Any

from chat_mirror.errors import MalformedDataError

__all__ = [
    "iso_to_epoch_ms",
    "now_ms",
    "optional_iso_to_epoch_ms",
    "optional_unix_to_epoch_ms",
    "unix_to_epoch_ms",
]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def iso_to_epoch_ms(value: Any) -> int:
    """Convert an ISO-8601 string to epoch milliseconds.

    Naive timestamps are treated as UTC.

    Raises:
        MalformedDataError: If the value is not a parseable ISO string
    """
    if not isinstance(value, str) or not value:
        raise MalformedDataError(f"Expected ISO-8601 timestamp, got {value!r}")
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise MalformedDataError(f"Invalid ISO-8601 timestamp: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return round(dt.timestamp() * 1000)


def unix_to_epoch_ms(value: Any) -> int:
    """Convert unix seconds (int or float) to epoch milliseconds.

    Raises:
        MalformedDataError: If the value is not numeric
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedDataError(f"Expected unix timestamp, got {value!r}")
    return round(value * 1000)


def optional_iso_to_epoch_ms(value: Any) -> int | None:
    """Like iso_to_epoch_ms, but missing or invalid values become None."""
    try:
        return iso_to_epoch_ms(value)
    except MalformedDataError:
        return None


def optional_unix_to_epoch_ms(value: Any) -> int | None:
    """Like unix_to_epoch_ms, but missing or invalid values become None."""
    try:
        return unix_to_epoch_ms(value)
    except MalformedDataError:
        return None

"""
Time utilities: nanosecond wall clock and ISO rendering.

Item timestamps are unsigned nanoseconds since the Unix epoch.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def now_ns() -> int:
    """Return current UTC wall time in nanoseconds since the epoch."""
    return time.time_ns()


def not_before(ts: int, *floors: int | None) -> int:
    """
    Return ts, raised to the largest non-None floor if it falls behind one.
    Keeps timestamps monotonic when the wall clock steps backwards.

    >>> not_before(5, 10, None)
    10
    >>> not_before(12, 10, 11)
    12
    """
    bounds = [f for f in floors if f is not None]
    return max([ts, *bounds])


def ns_to_iso(ts: int) -> str:
    """
    Render a nanosecond timestamp as ISO 8601 UTC with Z suffix.
    Sub-microsecond precision is dropped.

    >>> ns_to_iso(1_700_000_000_123_456_789)
    '2023-11-14T22:13:20.123456Z'
    """
    seconds, rem = divmod(ts, 1_000_000_000)
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=rem // 1_000)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")

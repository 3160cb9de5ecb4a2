"""Time and arithmetic helpers shared by the engines."""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from datetime import date, datetime

MS_PER_DAY = 24 * 60 * 60 * 1000

# Epoch-millisecond clock; injected so tests can move time.
Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def local_date(timestamp_ms: int) -> date:
    """Calendar date (local time) of an epoch-millisecond timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def day_key(value: int | date) -> str:
    """`YYYY-MM-DD` key for a timestamp or date, in local time."""
    if isinstance(value, date):
        return value.isoformat()
    return local_date(value).isoformat()


def percent(part: int | float, whole: int | float) -> int | None:
    """
    Whole-number percentage, rounding halves up.

    Returns None when `whole` is zero.
    """
    if not whole:
        return None
    return math.floor(100 * part / whole + 0.5)


def whole_days(elapsed_ms: int) -> int:
    """Elapsed milliseconds floored to whole days."""
    return elapsed_ms // MS_PER_DAY

"""
Circular distance over the weekly clock.

A point is ``(day_of_week, minutes_since_midnight)``. Both axes wrap, and
the time axis is scaled so four hours apart weighs the same as one day
apart.
"""
from __future__ import annotations

import math
import re

import numpy as np

DAYS_PER_WEEK = 7
MINUTES_PER_DAY = 1440
MINUTES_PER_DAY_UNIT = 240

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def time_to_minutes(time_of_day: str) -> int:
    """Convert ``"HH:MM"`` into minutes since midnight."""
    match = _TIME_RE.match(time_of_day.strip()) if isinstance(time_of_day, str) else None
    if not match:
        raise ValueError(f"Expected HH:MM, got {time_of_day!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: {time_of_day!r}")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def distance(target: tuple[int, int], sample: tuple[int, int]) -> float:
    day_gap = abs(target[0] - sample[0])
    day_diff = min(day_gap, DAYS_PER_WEEK - day_gap)

    time_gap = abs(target[1] - sample[1])
    time_diff = min(time_gap, MINUTES_PER_DAY - time_gap)

    return math.hypot(day_diff, time_diff / MINUTES_PER_DAY_UNIT)


def distances(target: tuple[int, int], days: np.ndarray, minutes: np.ndarray) -> np.ndarray:
    """Vectorised :func:`distance` from one target to many samples."""
    day_gap = np.abs(np.asarray(days, dtype=float) - target[0])
    day_diff = np.minimum(day_gap, DAYS_PER_WEEK - day_gap)

    time_gap = np.abs(np.asarray(minutes, dtype=float) - target[1])
    time_diff = np.minimum(time_gap, MINUTES_PER_DAY - time_gap)

    return np.hypot(day_diff, time_diff / MINUTES_PER_DAY_UNIT)

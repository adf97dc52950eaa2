# habitlens/reporting/report_utils.py
'''
habitlens - Reporting Utilities Module
Small statistics and calendar helpers shared by the analyzers, predictors and narrators.
Everything here is pure and tolerant of empty input.
'''

import calendar
import statistics
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from habitlens.models import Habit, HabitEntry

DAY_NAMES = list(calendar.day_name)  # Monday .. Sunday

MORNING = (6, 12)
AFTERNOON = (12, 17)
EVENING = (17, 21)


def day_name(weekday: int) -> str:
    return DAY_NAMES[weekday]


def chronological(entries: Iterable[HabitEntry]) -> List[HabitEntry]:
    """Entries oldest first."""
    return sorted(entries, key=lambda e: e.date)


def recent_entries(habit: Habit, count: int) -> List[HabitEntry]:
    """The last `count` entries of a habit, oldest first."""
    ordered = chronological(habit.entries)
    return ordered[-count:] if count > 0 else []


def completion_rate(entries: Sequence[HabitEntry]) -> float:
    if not entries:
        return 0.0
    return sum(1 for e in entries if e.completed) / len(entries)


def population_variance(values: Sequence[float]) -> float:
    """Variance over the whole sample (divides by N)."""
    if len(values) == 0:
        return 0.0
    return float(np.var(np.asarray(values, dtype=float)))


def safe_mean(values, default: Optional[float] = None) -> Optional[float]:
    """Return mean or `default` if no values."""
    try:
        return statistics.mean(values)
    except statistics.StatisticsError:
        return default


def in_hours(hour: int, window: Tuple[int, int]) -> bool:
    start, end = window
    return start <= hour < end


def hour_bucket(hour: int) -> str:
    """Coarse label for an hour of day."""
    if in_hours(hour, MORNING):
        return "morning"
    if in_hours(hour, AFTERNOON):
        return "afternoon"
    if in_hours(hour, EVENING):
        return "evening"
    return "night"


def format_time_ranges(hours: Sequence[int]) -> str:
    if not hours:
        return "various times"
    buckets = []
    for hour in hours:
        bucket = hour_bucket(hour)
        if bucket not in buckets:
            buckets.append(bucket)
    return " and ".join(buckets)


def rate_by_key(pairs: Iterable[Tuple[object, bool]]) -> Dict[object, Tuple[int, int]]:
    """Aggregate (key, completed) pairs into {key: (completed, total)}."""
    stats = defaultdict(lambda: [0, 0])
    for key, completed in pairs:
        stats[key][1] += 1
        if completed:
            stats[key][0] += 1
    return {k: (v[0], v[1]) for k, v in stats.items()}


def weekday_rate(entries: Iterable[HabitEntry], weekday: int, min_samples: int,
                 default: float = 0.5) -> float:
    """Completion rate of entries falling on `weekday`, `default` when sparse."""
    matching = [e for e in entries if e.date.weekday() == weekday]
    if len(matching) < min_samples:
        return default
    return completion_rate(matching)


def percent(rate: float) -> int:
    """Rate as a whole percentage, halves rounded up."""
    return int(np.floor(rate * 100 + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

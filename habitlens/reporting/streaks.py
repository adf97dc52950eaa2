# habitlens/reporting/streaks.py
'''
habitlens - Streak Statistics Module
Current and best completion streaks for a habit, with a streak level and a short
motivational message.
'''

import logging
from datetime import date, timedelta
from typing import Optional

from habitlens.models import Habit, StreakStats
from habitlens.reporting.report_utils import completion_rate, percent
from habitlens.utils.shared_utils import today_local

logger = logging.getLogger(__name__)

LEVELS = (
    (100, "LEGENDARY"),
    (50, "MASTER"),
    (30, "EXPERT"),
    (14, "ADVANCED"),
    (7, "INTERMEDIATE"),
    (3, "BEGINNER"),
)

MESSAGES = (
    (100, "Incredible! You're a habit master!"),
    (50, "Amazing consistency! You're unstoppable!"),
    (30, "Fantastic! You've built a solid habit!"),
    (21, "Great job! They say 21 days makes a habit!"),
    (14, "Two weeks strong! Keep it up!"),
    (7, "One week completed! You're building momentum!"),
    (3, "Great start! Consistency is key!"),
)


def streak_level(streak: int) -> str:
    for minimum, level in LEVELS:
        if streak >= minimum:
            return level
    return "STARTING"


def streak_message(streak: int) -> Optional[str]:
    for minimum, message in MESSAGES:
        if streak >= minimum:
            return message
    return None


def current_streak(habit: Habit, today: Optional[date] = None) -> int:
    """Consecutive completed days ending today, or yesterday if today is still open."""
    done = {e.date for e in habit.entries if e.completed}
    day = today or today_local()
    if day not in done:
        day -= timedelta(days=1)
    streak = 0
    while day in done:
        streak += 1
        day -= timedelta(days=1)
    return streak


def best_streak(habit: Habit) -> int:
    best = run = 0
    previous = None
    for day in sorted({e.date for e in habit.entries if e.completed}):
        if previous is not None and (day - previous).days == 1:
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day
    return best


def calculate_streak_stats(habit: Habit, today: Optional[date] = None) -> StreakStats:
    current = current_streak(habit, today)
    stats = StreakStats(
        habit_id=habit.id,
        current_streak=current,
        best_streak=best_streak(habit),
        completion_rate=percent(completion_rate(habit.entries)),
        total_completed=sum(1 for e in habit.entries if e.completed),
        level=streak_level(current),
        message=streak_message(current),
    )
    logger.debug(f"Streak stats for '{habit.title}': current={current} best={stats.best_streak}")
    return stats

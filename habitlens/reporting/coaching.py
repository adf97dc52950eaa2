# habitlens/reporting/coaching.py
'''
habitlens - Coaching Module
Turns the last week of habit activity into a motivational message, a focus area, an
action plan and weekly goals.
'''

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from habitlens.models import Coaching, Habit
from habitlens.reporting.report_utils import completion_rate, safe_mean
from habitlens.utils.shared_utils import today_local

logger = logging.getLogger(__name__)

WINDOW_DAYS = 7

# (min rate exclusive, message, encouragement, focus area), checked top down
TIERS = (
    (0.8, "You're absolutely crushing it! Your consistency is inspiring.",
     "You've built incredible momentum - keep riding this wave!",
     "Habit Optimization"),
    (0.6, "Solid progress! You're building strong foundations.",
     "Every habit you complete is an investment in your future self.",
     "Consistency Building"),
    (0.4, "You're learning and growing. Progress isn't always linear.",
     "Small steps still move you forward. You've got this!",
     "Momentum Recovery"),
    (None, "Every expert was once a beginner. Today is a fresh start.",
     "Focus on one habit at a time. Small wins build big victories.",
     "Foundation Building"),
)

FOUNDATION_PLAN = (
    ["Choose your easiest habit and commit to it for 3 days straight",
     "Set reminders for your most important habit",
     "Prepare your environment the night before"],
    ["Complete at least 3 habits this week",
     "Track your mood after each completion"],
)

CONSISTENCY_PLAN = (
    ["Link your newest habit to an existing routine",
     "Focus on your top 3 priority habits this week",
     "Experiment with different times of day"],
    ["Achieve 70% completion rate across all habits",
     "Try habit stacking with your strongest habit"],
)

OPTIMIZATION_PLAN = (
    ["Consider adding a challenging new habit",
     "Mentor someone else in habit building",
     "Optimize your routine for maximum efficiency"],
    ["Maintain your excellent streak",
     "Help optimize your habit timing based on energy"],
)


def generate_personalized_coaching(habits: Sequence[Habit],
                                   today: Optional[date] = None) -> Coaching:
    today = today or today_local()
    start = today - timedelta(days=WINDOW_DAYS - 1)

    def in_window(entry):
        return start <= entry.date <= today

    recent = [e for h in habits for e in h.entries if in_window(e)]
    active_habits = sum(1 for h in habits if any(in_window(e) for e in h.entries))

    rate = completion_rate(recent)
    avg_mood = safe_mean([e.mood for e in recent if e.completed and e.mood is not None],
                         default=5)
    avg_difficulty = safe_mean([e.difficulty for e in recent
                                if e.completed and e.difficulty is not None], default=5)

    for threshold, message, encouragement, focus_area in TIERS:
        if threshold is None or rate > threshold:
            break

    if rate < 0.5:
        plan, goals = FOUNDATION_PLAN
    elif rate < 0.8:
        plan, goals = CONSISTENCY_PLAN
    else:
        plan, goals = OPTIMIZATION_PLAN
    action_plan = list(plan)
    weekly_goals = list(goals)

    if avg_mood < 6:
        action_plan.insert(0, "Focus on habits that boost your mood first")
        weekly_goals.append("Aim for an average mood of 7+ after habit completion")
    if avg_difficulty > 7:
        action_plan.append("Consider breaking down difficult habits into smaller steps")
        weekly_goals.append("Reduce average difficulty to 6 or below")

    logger.debug(
        f"Coaching: {len(recent)} recent entries, rate={rate:.2f}, "
        f"mood={avg_mood:.1f}, difficulty={avg_difficulty:.1f}")
    return Coaching(
        motivational_message=message,
        focus_area=focus_area,
        action_plan=tuple(action_plan),
        encouragement=encouragement,
        weekly_goals=tuple(weekly_goals),
        completion_rate=rate,
        avg_mood=avg_mood,
        avg_difficulty=avg_difficulty,
        active_habits=active_habits,
    )

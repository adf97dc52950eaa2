# habitlens/reporting/prediction.py
'''
habitlens - Prediction Module
Heuristic success and difficulty predictions for a single habit: tomorrow's completion
probability, per-weekday probabilities for the coming week, and the expected difficulty
at a given date and hour.
'''

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from habitlens.models import DifficultyPrediction, Habit, TomorrowPrediction, WeekPrediction
from habitlens.reporting.report_utils import (
    DAY_NAMES,
    chronological,
    clamp,
    completion_rate,
    recent_entries,
    safe_mean,
    weekday_rate,
)
from habitlens.utils.shared_utils import today_local

logger = logging.getLogger(__name__)


def predict_tomorrow_success(habit: Habit, today: Optional[date] = None) -> TomorrowPrediction:
    recent = recent_entries(habit, 14)
    if len(recent) < 3:
        return TomorrowPrediction(
            probability=0.5,
            factors=("Insufficient data",),
            recommendation="Keep tracking to get better predictions!",
        )

    recent_rate = completion_rate(recent[-7:])
    tomorrow = (today or today_local()) + timedelta(days=1)
    day_of_week_rate = weekday_rate(habit.entries, tomorrow.weekday(), min_samples=3)
    probability = recent_rate * 0.7 + day_of_week_rate * 0.3

    factors = []
    if recent_rate > 0.8:
        factors.append("Strong recent performance")
    if recent_rate < 0.4:
        factors.append("Recent struggles")
    if day_of_week_rate > 0.7:
        factors.append("Good day-of-week track record")
    if day_of_week_rate < 0.4:
        factors.append("Challenging day of week historically")

    if probability < 0.4:
        recommendation = "Consider setting a reminder or simplifying this habit for tomorrow."
    elif probability > 0.8:
        recommendation = "You're on track for success! Keep up the great work."
    else:
        recommendation = "Focus extra attention on this habit tomorrow to maintain momentum."

    logger.debug(
        f"Tomorrow prediction for '{habit.title}': recent={recent_rate:.2f} "
        f"weekday={day_of_week_rate:.2f} raw={probability:.2f}")
    return TomorrowPrediction(
        probability=clamp(probability, 0.1, 0.9),
        factors=tuple(factors),
        recommendation=recommendation,
    )


def predict_week_success(habit: Habit) -> WeekPrediction:
    if len(recent_entries(habit, 30)) < 7:
        return WeekPrediction(
            daily_probabilities={},
            weekly_probability=0.5,
            risk_factors=("Insufficient historical data",),
            success_factors=(),
            recommendations=("Continue tracking to get better predictions",),
        )

    daily = {DAY_NAMES[day]: weekday_rate(habit.entries, day, min_samples=2)
             for day in range(7)}
    weekly_probability = sum(daily.values()) / len(daily)

    if weekly_probability < 0.5:
        return WeekPrediction(
            daily_probabilities=daily,
            weekly_probability=weekly_probability,
            risk_factors=("Low weekly completion rate",),
            success_factors=(),
            recommendations=("Consider increasing the frequency or intensity of your habits",),
        )
    return WeekPrediction(
        daily_probabilities=daily,
        weekly_probability=weekly_probability,
        risk_factors=(),
        success_factors=("High weekly completion rate",),
        recommendations=("Keep up the great work!",),
    )


def predict_habit_difficulty(habit: Habit, target: Union[date, datetime]) -> DifficultyPrediction:
    """
    Expected difficulty (1-10) of doing `habit` at `target`.
    A plain date is read as midnight of that day.

    Starts from the mean rating of the last 30 rated completions and shifts it by how much
    harder or easier the target weekday and the hours around the target hour have been.
    """
    if not isinstance(target, datetime):
        target = datetime.combine(target, time.min)
    rated = chronological(e for e in habit.entries
                          if e.completed and e.difficulty is not None)[-30:]
    if len(rated) < 5:
        return DifficultyPrediction(
            predicted_difficulty=5,
            factors=("Insufficient difficulty data",),
            recommendations=("Start tracking difficulty ratings for better predictions",),
            confidence=0.3,
        )

    base = safe_mean([e.difficulty for e in rated])

    day_adjustment = 0.0
    same_day = [e.difficulty for e in habit.entries
                if e.completed and e.difficulty is not None
                and e.date.weekday() == target.weekday()]
    if len(same_day) >= 3:
        day_adjustment = safe_mean(same_day) - base

    time_adjustment = 0.0
    timed = [e for e in rated if e.completed_at]
    if len(timed) >= 3:
        nearby = [e.difficulty for e in timed if abs(e.completed_at.hour - target.hour) <= 2]
        if len(nearby) >= 2:
            time_adjustment = safe_mean(nearby) - base

    predicted = clamp(base + day_adjustment + time_adjustment, 1, 10)

    factors = []
    recommendations = []
    if day_adjustment > 1:
        factors.append("This day of week tends to be more challenging")
        recommendations.append("Consider preparing extra motivation for this day")
    elif day_adjustment < -1:
        factors.append("This day of week is typically easier")
        recommendations.append("Good day to tackle this habit")

    if time_adjustment > 1:
        factors.append("This time of day shows higher difficulty")
        recommendations.append("Consider scheduling this habit at a different time")
    elif time_adjustment < -1:
        factors.append("This time of day is optimal for this habit")

    if predicted > 7:
        recommendations.append("Consider breaking this habit into smaller steps today")
    elif predicted < 4:
        recommendations.append("Great day to push yourself a bit harder")

    return DifficultyPrediction(
        predicted_difficulty=round(predicted, 1),
        factors=tuple(factors),
        recommendations=tuple(recommendations),
        confidence=min(0.9, len(rated) / 20),
    )

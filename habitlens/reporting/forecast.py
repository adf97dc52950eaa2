# habitlens/reporting/forecast.py
'''
habitlens - Performance Forecast Module
Projects completions and mood over the coming days from each habit's weekday history,
and flags the days that look risky or promising.
'''

import logging
from datetime import date
from typing import Optional, Sequence

from habitlens.models import ForecastDay, ForecastSummary, Habit, PerformanceForecast
from habitlens.reporting.report_utils import completion_rate, safe_mean
from habitlens.utils.shared_utils import date_range, today_local

logger = logging.getLogger(__name__)

DEFAULT_DAYS = 7
DEFAULT_COMPLETION = 0.6
BASE_MOOD = 5.0


def _forecast_day(habits: Sequence[Habit], day: date) -> ForecastDay:
    predicted = 0.0
    mood = BASE_MOOD
    risks = []
    opportunities = []

    for habit in habits:
        same_weekday = [e for e in habit.entries if e.date.weekday() == day.weekday()]
        if len(same_weekday) < 2:
            predicted += DEFAULT_COMPLETION
            continue
        rate = completion_rate(same_weekday)
        predicted += rate
        day_mood = safe_mean([e.mood for e in same_weekday
                              if e.completed and e.mood is not None])
        if day_mood is not None:
            mood = max(mood, day_mood)
        if rate < 0.5:
            risks.append(f"{habit.title} typically struggles on this day")
        elif rate > 0.8:
            opportunities.append(f"{habit.title} performs excellently on this day")

    if day.weekday() >= 5:
        if predicted < len(habits) * 0.5:
            risks.append("Weekend schedule disruption")
        else:
            opportunities.append("Good weekend structure")

    return ForecastDay(
        date=day,
        predicted_completions=round(predicted, 1),
        predicted_mood=round(mood, 1),
        risk_factors=tuple(risks),
        opportunities=tuple(opportunities),
    )


def generate_performance_forecast(habits: Sequence[Habit], days: int = DEFAULT_DAYS,
                                  today: Optional[date] = None) -> PerformanceForecast:
    start = today or today_local()
    forecast = [_forecast_day(habits, day) for day in date_range(start, max(0, days))]

    risk_days = tuple(d.date for d in forecast
                      if d.predicted_completions < len(habits) * 0.4)
    opportunity_days = tuple(d.date for d in forecast
                             if d.predicted_completions > len(habits) * 0.8)

    streak_risk = []
    if risk_days:
        streak_risk.append(
            "Risk of streak breaks on: " + ", ".join(d.isoformat() for d in risk_days))
    improvement = []
    if opportunity_days:
        improvement.append(
            "Leverage high-energy days: " + ", ".join(d.isoformat() for d in opportunity_days))

    total = round(sum(d.predicted_completions for d in forecast), 1)
    logger.debug(f"Forecast over {len(forecast)} day(s): {total} predicted completion(s)")
    return PerformanceForecast(
        forecast=tuple(forecast),
        summary=ForecastSummary(
            total_predicted_completions=total,
            streak_risk=tuple(streak_risk),
            improvement_opportunities=tuple(improvement),
            risk_days=risk_days,
            opportunity_days=opportunity_days,
        ),
    )

# habitlens/reporting/patterns.py
'''
habitlens - Pattern Analyzers Module
Each analyzer scans the entry history for one statistical signature (weekday performance,
streak variance, completion timing, energy periods, mood and difficulty) and returns a list
of Insight objects. Analyzers are independent and never raise on sparse data: below their
sample minimum they simply return nothing.
'''

import logging
from typing import List, Optional, Sequence

from habitlens.models import (
    DayPayload,
    DayPerformancePayload,
    DifficultyAdjustmentPayload,
    EnergyPayload,
    Habit,
    HabitTimingPayload,
    HourRate,
    IncreaseChallengePayload,
    Insight,
    InsightType,
    MoodAdjustmentPayload,
    MoodBoostPayload,
    PeakTimePayload,
    Priority,
    RecoveryPayload,
    SimplifyHabitPayload,
    StreakRiskPayload,
    TimeOfDay,
    TimeOfDayPayload,
    TimingPayload,
)
from habitlens.reporting.recommendations import RecommendationStore, generate_recommendation_key
from habitlens.reporting.report_utils import (
    chronological,
    completion_rate,
    day_name,
    format_time_ranges,
    percent,
    population_variance,
    rate_by_key,
    recent_entries,
    safe_mean,
)

logger = logging.getLogger(__name__)

MIN_DAY_SAMPLES = 3
MIN_WORST_DAY_SAMPLES = 5
STREAK_WINDOW = 14
MIN_STREAK_SAMPLES = 7
MIN_HOUR_SAMPLES = 3
MIN_PERIOD_SAMPLES = 3
MIN_PEAK_SAMPLES = 5
ADJUSTMENT_WINDOW = 21
MIN_ADJUSTMENT_SAMPLES = 14
RECOVERY_WINDOW = 7
MIN_RECOVERY_SAMPLES = 5
MIN_MOOD_SAMPLES = 5
MIN_TREND_SAMPLES = 7
TREND_SPAN = 5

ENERGY_PERIODS = (
    ("morning", 6, 12),
    ("afternoon", 12, 17),
    ("evening", 17, 22),
)


def _actionable(insight_type, title, description, confidence, priority, payload,
                show_action_button=True) -> Insight:
    return Insight(
        type=insight_type,
        title=title,
        description=description,
        confidence=confidence,
        priority=priority,
        actionable=True,
        show_action_button=show_action_button,
        data=payload,
        recommendation_id=generate_recommendation_key(payload) if show_action_button else None,
    )


def _already_used(store: Optional[RecommendationStore], payload) -> bool:
    return store is not None and store.is_used(payload)


def _informational(insight_type, title, description, confidence, priority, payload) -> Insight:
    return Insight(
        type=insight_type,
        title=title,
        description=description,
        confidence=confidence,
        priority=priority,
        actionable=False,
        show_action_button=False,
        data=payload,
    )


# ─── Weekday performance ──────────────────────────────────────────────────────


def analyze_weekday_patterns(habits: Sequence[Habit], store: RecommendationStore) -> List[Insight]:
    stats = rate_by_key((e.date.weekday(), e.completed)
                        for habit in habits for e in habit.entries)
    performances = [
        {"day": day, "name": day_name(day), "rate": stats[day][0] / stats[day][1],
         "total": stats[day][1]}
        for day in range(7)
        if day in stats and stats[day][1] >= MIN_DAY_SAMPLES
    ]
    if not performances:
        logger.debug("Weekday analysis skipped: no day has enough samples")
        return []

    best = performances[0]
    worst = performances[0]
    for perf in performances[1:]:
        if perf["rate"] > best["rate"]:
            best = perf
        if perf["rate"] < worst["rate"]:
            worst = perf

    insights = []
    if best["rate"] > 0.8:
        payload = DayPayload(best_day=best["name"], rate=best["rate"])
        if not store.is_used(payload):
            insights.append(_actionable(
                InsightType.PATTERN,
                f"{best['name']} Champion",
                f"You perform exceptionally well on {best['name']}s with a "
                f"{percent(best['rate'])}% completion rate. Consider scheduling your most "
                f"important habits on this day.",
                0.9, Priority.MEDIUM, payload))

    if worst["rate"] < 0.5 and worst["total"] >= MIN_WORST_DAY_SAMPLES:
        payload = DayPayload(worst_day=worst["name"], rate=worst["rate"])
        if not store.is_used(payload):
            insights.append(_actionable(
                InsightType.OPTIMIZATION,
                f"{worst['name']} Needs Attention",
                f"Your completion rate drops to {percent(worst['rate'])}% on {worst['name']}s. "
                f"Consider reducing habit load or creating special motivation for this day.",
                0.8, Priority.HIGH, payload))

    if 0.6 < best["rate"] <= 0.8:
        insights.append(_informational(
            InsightType.PATTERN,
            f"{best['name']} Performance",
            f"You have a solid {percent(best['rate'])}% completion rate on {best['name']}s. "
            f"This is a reliable day for your habits.",
            0.7, Priority.LOW,
            DayPerformancePayload(best_day=best["name"], rate=best["rate"])))

    return insights


# ─── Streak vulnerability ─────────────────────────────────────────────────────


def analyze_streak_vulnerability(habits: Sequence[Habit]) -> List[Insight]:
    insights = []
    for habit in habits:
        recent = recent_entries(habit, STREAK_WINDOW)
        if len(recent) < MIN_STREAK_SAMPLES:
            continue
        pattern = [1 if e.completed else 0 for e in recent]
        rate = sum(pattern) / len(pattern)
        variance = population_variance(pattern)
        if rate > 0.7 and variance > 0.15:
            logger.debug(
                f"Streak risk for '{habit.title}': rate={rate:.2f} variance={variance:.3f}")
            insights.append(_actionable(
                InsightType.PREDICTION,
                f'"{habit.title}" Streak at Risk',
                f"Your {habit.title} habit shows inconsistent patterns recently. There's a "
                f"{percent(1 - rate)}% chance of missing it tomorrow. Consider setting a "
                f"reminder or simplifying the habit.",
                0.75, Priority.HIGH,
                StreakRiskPayload(habit_id=habit.id, risk_score=1 - rate),
                show_action_button=False))
    return insights


# ─── Timing ───────────────────────────────────────────────────────────────────


def hourly_performance(habits: Sequence[Habit]) -> List[HourRate]:
    """Per-hour success rates with enough samples, best first."""
    stats = rate_by_key((e.hour, e.completed) for habit in habits for e in habit.entries)
    rows = [HourRate(hour=hour, rate=completed / total, total=total)
            for hour, (completed, total) in stats.items()
            if total >= MIN_HOUR_SAMPLES]
    return sorted(rows, key=lambda h: (-h.rate, h.hour))


def _period_rates(habits: Sequence[Habit], min_samples: int):
    order = [t.value for t in TimeOfDay]
    stats = rate_by_key((e.time_of_day.value, e.completed)
                        for habit in habits for e in habit.entries if e.time_of_day)
    rows = [(period, completed / total, total)
            for period, (completed, total) in stats.items()
            if total >= min_samples]
    return sorted(rows, key=lambda p: (-p[1], order.index(p[0])))


def analyze_optimal_timing(habits: Sequence[Habit], store: RecommendationStore) -> List[Insight]:
    insights = []
    hours = hourly_performance(habits)

    if hours:
        best_hours = tuple(hours[:3])
        payload = TimingPayload(optimal_hours=best_hours)
        if not store.is_used(payload):
            ranges = format_time_ranges([h.hour for h in best_hours])
            insights.append(_informational(
                InsightType.OPTIMIZATION,
                "Your Peak Performance Hours",
                f"You're most successful with habits during {ranges}. Consider scheduling new "
                f"habits during these windows for better success rates.",
                0.8, Priority.MEDIUM, payload))

    periods = _period_rates(habits, MIN_PERIOD_SAMPLES)
    if periods:
        period, rate, _ = periods[0]
        insights.append(_informational(
            InsightType.PATTERN,
            f"Best Time of Day: {period.capitalize()}",
            f"You complete {percent(rate)}% of your habits during {period} sessions. "
            f"This is your optimal productivity window.",
            0.85, Priority.MEDIUM,
            TimeOfDayPayload(best_period=period, rate=rate)))

    insights.extend(analyze_energy_patterns(hours))
    return insights


def analyze_energy_patterns(hours: Sequence[HourRate]) -> List[Insight]:
    """Compare average hourly success across morning, afternoon and evening."""
    if len(hours) < 4:
        return []

    periods = []
    for name, start, end in ENERGY_PERIODS:
        rates = [h.rate for h in hours if start <= h.hour < end]
        if rates:
            periods.append((name, sum(rates) / len(rates)))
    if len(periods) < 2:
        return []

    periods.sort(key=lambda p: -p[1])
    best_name, best_rate = periods[0]
    worst_name, worst_rate = periods[-1]
    difference = best_rate - worst_rate
    if difference <= 0.2:
        return []

    return [_informational(
        InsightType.PATTERN,
        "Energy Level Pattern Detected",
        f"You perform {percent(difference)}% better in the {best_name} compared to "
        f"{worst_name}. Plan your most important habits accordingly.",
        0.75, Priority.MEDIUM,
        EnergyPayload(best_period=best_name, worst_period=worst_name, difference=difference))]


def analyze_habit_timing(habits: Sequence[Habit]) -> List[Insight]:
    """When each habit usually gets done, from its completion timestamps."""
    insights = []
    for habit in habits:
        completed = [e for e in habit.entries if e.completed]
        if len(completed) < 5:
            continue
        hours = [e.completed_at.hour for e in completed if e.completed_at]
        if len(hours) < 3:
            continue
        avg_hour = sum(hours) / len(hours)
        if avg_hour < 12:
            label = "morning"
        elif avg_hour < 17:
            label = "afternoon"
        else:
            label = "evening"
        insights.append(_actionable(
            InsightType.PATTERN,
            f"Optimal Time Pattern for {habit.title}",
            f'You typically complete "{habit.title}" in the {label} (around '
            f"{int(avg_hour + 0.5)}:00). Consider scheduling it during this time consistently.",
            0.8, Priority.MEDIUM,
            HabitTimingPayload(habit_id=habit.id, optimal_time=label, avg_hour=avg_hour),
            show_action_button=False))
    return insights


def analyze_peak_time_of_day(habits: Sequence[Habit], store: RecommendationStore) -> List[Insight]:
    periods = _period_rates(habits, MIN_PEAK_SAMPLES)
    if not periods:
        return []
    period, rate, _ = periods[0]
    if rate <= 0.8:
        return []
    payload = PeakTimePayload(best_time=period, success_rate=rate)
    if store.is_used(payload):
        return []
    return [_actionable(
        InsightType.OPTIMIZATION,
        "Peak Performance Time Identified",
        f"Your {period} habits have a {percent(rate)}% success rate. Consider moving "
        f"struggling habits to this time slot.",
        0.85, Priority.HIGH, payload)]


# ─── Difficulty and recovery ──────────────────────────────────────────────────


def analyze_difficulty_adjustments(habits: Sequence[Habit]) -> List[Insight]:
    insights = []
    for habit in habits:
        recent = recent_entries(habit, ADJUSTMENT_WINDOW)
        if len(recent) < MIN_ADJUSTMENT_SAMPLES:
            continue
        rate = completion_rate(recent)
        if rate < 0.3:
            insights.append(_actionable(
                InsightType.OPTIMIZATION,
                f'Simplify "{habit.title}"',
                f"Your completion rate for this habit is {percent(rate)}%. Consider breaking it "
                f"into smaller steps or reducing the target to build momentum.",
                0.8, Priority.HIGH,
                DifficultyAdjustmentPayload(habit_id=habit.id, current_rate=rate,
                                            adjustment="simplify"),
                show_action_button=False))
        elif rate > 0.9 and len(recent) >= ADJUSTMENT_WINDOW:
            insights.append(_actionable(
                InsightType.OPTIMIZATION,
                f'Level Up "{habit.title}"',
                f"You're crushing this habit with {percent(rate)}% completion! Consider "
                f"increasing the challenge or adding a related habit.",
                0.7, Priority.MEDIUM,
                DifficultyAdjustmentPayload(habit_id=habit.id, current_rate=rate,
                                            adjustment="challenge"),
                show_action_button=False))
    return insights


def generate_recovery_strategies(habits: Sequence[Habit]) -> List[Insight]:
    insights = []
    for habit in habits:
        recent = recent_entries(habit, RECOVERY_WINDOW)
        if len(recent) < MIN_RECOVERY_SAMPLES:
            continue
        completed_days = sum(1 for e in recent if e.completed)
        missed_days = len(recent) - completed_days
        if missed_days >= 2 and completed_days >= 2:
            insights.append(_actionable(
                InsightType.OPTIMIZATION,
                f'Recovery Plan for "{habit.title}"',
                f"You've missed {missed_days} days recently but also succeeded "
                f"{completed_days} times. Focus on consistency over perfection - aim for just "
                f"completing it once in the next 2 days.",
                0.75, Priority.MEDIUM,
                RecoveryPayload(habit_id=habit.id, missed_days=missed_days,
                                completed_days=completed_days),
                show_action_button=False))
    return insights


# ─── Mood and difficulty trend ────────────────────────────────────────────────


def analyze_mood_correlations(habits: Sequence[Habit],
                              store: Optional[RecommendationStore] = None) -> List[Insight]:
    insights = []
    for habit in habits:
        moods = [e.mood for e in habit.entries if e.completed and e.mood is not None]
        if len(moods) < MIN_MOOD_SAMPLES:
            continue
        avg_mood = safe_mean(moods)
        if avg_mood >= 8:
            insights.append(_informational(
                InsightType.RECOMMENDATION,
                f"{habit.title} Boosts Your Mood",
                f'Completing "{habit.title}" consistently improves your mood (average: '
                f"{avg_mood:.1f}/10). This habit is a key contributor to your wellbeing.",
                0.9, Priority.MEDIUM,
                MoodBoostPayload(habit_id=habit.id, avg_mood=avg_mood)))
        elif avg_mood <= 4:
            payload = MoodAdjustmentPayload(habit_id=habit.id, avg_mood=avg_mood)
            if _already_used(store, payload):
                continue
            insights.append(_actionable(
                InsightType.OPTIMIZATION,
                f"{habit.title} May Need Adjustment",
                f'Your mood after "{habit.title}" averages {avg_mood:.1f}/10. Consider '
                f"modifying the approach or timing to make it more enjoyable.",
                0.8, Priority.HIGH,
                payload))
    return insights


def analyze_difficulty_trends(habits: Sequence[Habit],
                              store: Optional[RecommendationStore] = None) -> List[Insight]:
    insights = []
    for habit in habits:
        rated = chronological(e for e in habit.entries
                              if e.completed and e.difficulty is not None)
        if len(rated) < MIN_TREND_SAMPLES:
            continue
        earlier_avg = safe_mean([e.difficulty for e in rated[:TREND_SPAN]])
        recent_avg = safe_mean([e.difficulty for e in rated[-TREND_SPAN:]])
        change = recent_avg - earlier_avg

        if change <= -2:
            payload = IncreaseChallengePayload(habit_id=habit.id, difficulty_change=change,
                                               recent_avg=recent_avg, earlier_avg=earlier_avg)
            if _already_used(store, payload):
                continue
            insights.append(_actionable(
                InsightType.RECOMMENDATION,
                f"{habit.title} is Getting Easier",
                f'The difficulty of "{habit.title}" has decreased from {earlier_avg:.1f} to '
                f"{recent_avg:.1f}. Great progress! Consider increasing the challenge slightly.",
                0.85, Priority.MEDIUM,
                payload))
        elif change >= 2:
            payload = SimplifyHabitPayload(habit_id=habit.id, difficulty_change=change,
                                           recent_avg=recent_avg, earlier_avg=earlier_avg)
            if _already_used(store, payload):
                continue
            insights.append(_actionable(
                InsightType.OPTIMIZATION,
                f"{habit.title} Becoming More Challenging",
                f'The difficulty of "{habit.title}" has increased from {earlier_avg:.1f} to '
                f"{recent_avg:.1f}. Consider breaking it into smaller steps.",
                0.8, Priority.HIGH,
                payload))
    return insights

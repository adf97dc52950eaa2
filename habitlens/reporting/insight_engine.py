# habitlens/reporting/insight_engine.py
'''
habitlens Insight Engine Module
Runs every pattern analyzer over a habit snapshot, then ranks the combined insights by
priority and confidence and keeps the top few. With no habits at all it returns a single
onboarding insight instead.
'''

import logging
from typing import List, Optional, Sequence

from habitlens.models import Habit, Insight, InsightType, OnboardingPayload, Priority
from habitlens.reporting import correlation, patterns
from habitlens.reporting.recommendations import RecommendationStore, generate_smart_recommendations

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 8


def onboarding_insight() -> Insight:
    return Insight(
        type=InsightType.RECOMMENDATION,
        title="Start Your Journey",
        description="Create your first habit to begin receiving AI-powered insights and "
                    "recommendations!",
        confidence=1.0,
        priority=Priority.HIGH,
        actionable=True,
        show_action_button=False,
        data=OnboardingPayload(),
    )


def rank_insights(insights: Sequence[Insight], limit: int = MAX_INSIGHTS) -> List[Insight]:
    """Highest priority first, then highest confidence. Ties keep analyzer order."""
    ordered = sorted(insights, key=lambda i: (-i.priority.weight, -i.confidence))
    return ordered[:max(0, min(limit, MAX_INSIGHTS))]


def analyze_habits(habits: Sequence[Habit],
                   store: Optional[RecommendationStore] = None,
                   max_insights: int = MAX_INSIGHTS) -> List[Insight]:
    """
    Produce the ranked insight list for a habit snapshot.

    Args:
        habits: the user's habits with their entries.
        store: recommendations already acted on. Insights whose dedup key is in the
            store are not produced again. A fresh empty store is used when omitted.
        max_insights: upper bound on the result length, capped at 8.
    """
    if not habits:
        logger.info("No habits to analyze, returning onboarding insight")
        return [onboarding_insight()]

    if store is None:
        store = RecommendationStore()

    insights: List[Insight] = []
    insights.extend(patterns.analyze_weekday_patterns(habits, store))
    insights.extend(patterns.analyze_streak_vulnerability(habits))
    insights.extend(correlation.find_habit_correlations(habits, store))
    insights.extend(correlation.generate_habit_stacking(habits, store))
    insights.extend(patterns.analyze_optimal_timing(habits, store))
    insights.extend(patterns.analyze_habit_timing(habits))
    insights.extend(patterns.analyze_peak_time_of_day(habits, store))
    insights.extend(generate_smart_recommendations(habits, store))
    insights.extend(patterns.analyze_difficulty_adjustments(habits))
    insights.extend(patterns.generate_recovery_strategies(habits))
    insights.extend(patterns.analyze_mood_correlations(habits, store))
    insights.extend(patterns.analyze_difficulty_trends(habits, store))

    ranked = rank_insights(insights, max_insights)
    logger.info(
        f"Analyzed {len(habits)} habit(s): {len(insights)} candidate insight(s), "
        f"{len(ranked)} kept")
    return ranked

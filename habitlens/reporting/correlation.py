# habitlens/reporting/correlation.py
'''
habitlens - Correlation Analysis Module
Pairwise relationships between habits: how often two habits succeed together on the days
both were tracked, and which habits keep getting completed on the same day (stacking).
Also provides the numeric Pearson/Spearman helper used by the habit summary table.
'''

import logging
import math
import warnings
from collections import Counter, defaultdict
from itertools import combinations
from typing import Dict, List, Sequence

from scipy.stats import pearsonr, spearmanr

from habitlens.models import (
    CorrelationPayload,
    Habit,
    Insight,
    InsightType,
    Priority,
    StackingPayload,
)
from habitlens.reporting.recommendations import RecommendationStore, generate_recommendation_key
from habitlens.reporting.report_utils import percent

logger = logging.getLogger(__name__)

MIN_COMMON_DATES = 5
CORRELATION_THRESHOLD = 0.6
MIN_STACK_OCCURRENCES = 5


def calculate_habit_correlation(habit1: Habit, habit2: Habit) -> float:
    """
    Share of days either habit was completed on which both were, over the dates both
    habits have an entry. Symmetric. 0.0 with fewer than five shared dates.
    """
    by_date1 = {e.date: e for e in habit1.entries}
    by_date2 = {e.date: e for e in habit2.entries}
    common = set(by_date1) & set(by_date2)
    if len(common) < MIN_COMMON_DATES:
        return 0.0

    both = either = 0
    for day in common:
        done1 = by_date1[day].completed
        done2 = by_date2[day].completed
        if done1 and done2:
            both += 1
        if done1 or done2:
            either += 1
    return both / either if either else 0.0


def find_habit_correlations(habits: Sequence[Habit], store: RecommendationStore) -> List[Insight]:
    insights = []
    for first, second in combinations(habits, 2):
        correlation = calculate_habit_correlation(first, second)
        if correlation <= CORRELATION_THRESHOLD:
            continue
        payload = CorrelationPayload(habit1=first.title, habit2=second.title,
                                     correlation=correlation)
        if store.is_used(payload):
            continue
        insights.append(Insight(
            type=InsightType.PATTERN,
            title="Strong Connection Found",
            description=(
                f'"{first.title}" and "{second.title}" show a {percent(correlation)}% '
                f"correlation. When you complete one, you're very likely to complete the "
                f"other. Consider pairing them together."),
            confidence=correlation,
            priority=Priority.MEDIUM,
            actionable=True,
            show_action_button=True,
            data=payload,
            recommendation_id=generate_recommendation_key(payload),
        ))
    logger.debug(f"Correlation scan produced {len(insights)} insight(s)")
    return insights


def generate_habit_stacking(habits: Sequence[Habit], store: RecommendationStore) -> List[Insight]:
    """Pairs of habits completed on the same calendar day at least five times."""
    daily = defaultdict(set)
    for habit in habits:
        for entry in habit.entries:
            if entry.completed:
                daily[entry.date].add(habit.id)

    pair_counts = Counter()
    for habit_ids in daily.values():
        for pair in combinations(sorted(habit_ids), 2):
            pair_counts[pair] += 1

    by_id: Dict[str, Habit] = {}
    for habit in habits:
        by_id.setdefault(habit.id, habit)

    insights = []
    for (id1, id2), count in sorted(pair_counts.items()):
        if count < MIN_STACK_OCCURRENCES:
            continue
        habit1, habit2 = by_id[id1], by_id[id2]
        payload = StackingPayload(habit1=habit1.title, habit2=habit2.title, frequency=count)
        if store.is_used(payload):
            continue
        insights.append(Insight(
            type=InsightType.PATTERN,
            title="Habit Stacking Opportunity",
            description=(
                f'You often complete "{habit1.title}" and "{habit2.title}" on the same day. '
                f"Consider doing them consecutively to build a powerful habit stack."),
            confidence=min(0.9, count / 10),
            priority=Priority.MEDIUM,
            actionable=True,
            show_action_button=True,
            data=payload,
            recommendation_id=generate_recommendation_key(payload),
        ))
    return insights


def compute_correlation(x: List[float], y: List[float]) -> Dict[str, float]:
    if len(x) < 2 or len(x) != len(y):
        return {"pearson": 0.0, "spearman": 0.0}
    with warnings.catch_warnings():
        # constant series make scipy warn and return nan
        warnings.simplefilter("ignore")
        try:
            pearson = pearsonr(x, y)[0]
            spearman = spearmanr(x, y)[0]
        except ValueError:
            return {"pearson": 0.0, "spearman": 0.0}
    return {
        "pearson": 0.0 if math.isnan(pearson) else round(float(pearson), 3),
        "spearman": 0.0 if math.isnan(spearman) else round(float(spearman), 3),
    }

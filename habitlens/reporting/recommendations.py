# habitlens/reporting/recommendations.py
'''
habitlens - Recommendation Bookkeeping Module
Deterministic dedup keys for insight payloads, the caller-owned store of keys the user
has already acted on, and the category-gap habit suggestions.
'''

import json
import logging
import re
from dataclasses import fields
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from habitlens.models import (
    CorrelationPayload,
    DayPayload,
    DayPerformancePayload,
    DifficultyAdjustmentPayload,
    EnergyPayload,
    Habit,
    HabitSuggestion,
    HabitTimingPayload,
    HourRate,
    IncreaseChallengePayload,
    Insight,
    InsightPayload,
    InsightType,
    MoodAdjustmentPayload,
    MoodBoostPayload,
    OnboardingPayload,
    PeakTimePayload,
    Priority,
    RecoveryPayload,
    SimplifyHabitPayload,
    StackingPayload,
    StreakRiskPayload,
    SuggestionPayload,
    TimeOfDayPayload,
    TimingPayload,
)
from habitlens.utils.error_handler import ValidationError

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 2

PAYLOAD_TYPES = {
    cls.recommendation_type: cls
    for cls in (
        OnboardingPayload, DayPayload, DayPerformancePayload, StreakRiskPayload,
        CorrelationPayload, StackingPayload, TimingPayload, TimeOfDayPayload,
        EnergyPayload, HabitTimingPayload, PeakTimePayload, SuggestionPayload,
        DifficultyAdjustmentPayload, RecoveryPayload, MoodBoostPayload,
        MoodAdjustmentPayload, IncreaseChallengePayload, SimplifyHabitPayload,
    )
}


def generate_recommendation_key(payload: InsightPayload) -> str:
    """Stable string identifying one recommendation instance."""
    if isinstance(payload, TimingPayload):
        return "timing_" + ",".join(str(h.hour) for h in payload.optimal_hours)
    if isinstance(payload, DayPayload):
        return f"day_{payload.best_day or payload.worst_day}"
    if isinstance(payload, CorrelationPayload):
        return f"correlation_{payload.habit1}_{payload.habit2}"
    if isinstance(payload, SuggestionPayload):
        return f"suggestion_{payload.recommended_habit.title}"
    if isinstance(payload, StackingPayload):
        return f"stacking_{payload.habit1}_{payload.habit2}"
    if isinstance(payload, PeakTimePayload):
        return f"time_{payload.best_time}"
    return _fallback_key(payload.recommendation_type, payload.to_dict())


def _fallback_key(recommendation_type: str, data: Mapping[str, Any]) -> str:
    blob = json.dumps(data, separators=(",", ":"), default=str)
    return f"{recommendation_type}_{blob[:50]}"


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def payload_from_mapping(recommendation_type: str, data: Mapping[str, Any]) -> Optional[InsightPayload]:
    """
    Rebuild a payload variant from the JSON form a caller sends back.
    Returns None for recommendation types this engine never produces.
    """
    cls = PAYLOAD_TYPES.get(recommendation_type)
    if cls is None:
        return None
    names = {f.name for f in fields(cls)}
    try:
        kwargs = {}
        for key, value in data.items():
            name = _snake(key)
            if name not in names:
                continue
            if name == "recommended_habit" and isinstance(value, Mapping):
                value = HabitSuggestion(**{_snake(k): v for k, v in value.items()
                                           if _snake(k) in {"title", "description", "confidence", "category"}})
            elif name == "optimal_hours":
                value = tuple(HourRate(hour=int(h["hour"]), rate=float(h.get("rate", 0.0)),
                                       total=int(h.get("total", 0)))
                              for h in value)
            kwargs[name] = value
        return cls(**kwargs)
    except (TypeError, KeyError, ValueError) as e:
        raise ValidationError(f"Incomplete data for '{recommendation_type}': {e}")


def _hour_of(item: Any) -> int:
    return int(item["hour"] if isinstance(item, Mapping) else item.hour)


def key_from_mapping(recommendation_type: str, data: Mapping[str, Any]) -> Optional[str]:
    """
    Key for the variants whose key needs only a few fields, read straight from `data`.
    Returns None for every other type.
    """
    values = {_snake(k): v for k, v in data.items()}
    try:
        if recommendation_type == TimingPayload.recommendation_type:
            return "timing_" + ",".join(str(_hour_of(h)) for h in values["optimal_hours"])
        if recommendation_type == DayPayload.recommendation_type:
            day = values.get("best_day") or values.get("worst_day")
            if not day:
                raise KeyError("best_day or worst_day")
            return f"day_{day}"
        if recommendation_type == CorrelationPayload.recommendation_type:
            return f"correlation_{values['habit1']}_{values['habit2']}"
        if recommendation_type == SuggestionPayload.recommendation_type:
            habit = values["recommended_habit"]
            title = habit["title"] if isinstance(habit, Mapping) else habit.title
            return f"suggestion_{title}"
        if recommendation_type == StackingPayload.recommendation_type:
            return f"stacking_{values['habit1']}_{values['habit2']}"
        if recommendation_type == PeakTimePayload.recommendation_type:
            return f"time_{values['best_time']}"
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise ValidationError(f"Incomplete data for '{recommendation_type}': missing {e}")
    return None


class RecommendationStore:
    """
    Keys of recommendations the user already acted on.
    Owned by the caller: hydrate it from storage, pass it to analyze_habits,
    and persist keys() after marking.
    """

    def __init__(self, keys: Optional[Iterable[str]] = None):
        self._keys = set(keys or ())

    def set_used(self, keys: Iterable[str]) -> None:
        self._keys = set(keys)

    def is_used(self, payload: InsightPayload) -> bool:
        return generate_recommendation_key(payload) in self._keys

    def mark_used(self, payload: InsightPayload) -> str:
        return self.add(generate_recommendation_key(payload))

    def add(self, key: str) -> str:
        self._keys.add(key)
        logger.debug(f"Recommendation marked as used: {key}")
        return key

    def keys(self) -> List[str]:
        return sorted(self._keys)

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


def set_used_recommendations(store: RecommendationStore, keys: Sequence[str]) -> RecommendationStore:
    store.set_used(keys)
    return store


def mark_recommendation_as_used(
    store: RecommendationStore,
    recommendation_type: str,
    data: Union[InsightPayload, Mapping[str, Any]],
) -> str:
    """Record a recommendation as acted on and return its key."""
    if isinstance(data, InsightPayload):
        return store.mark_used(data)
    key = key_from_mapping(recommendation_type, data)
    if key is not None:
        return store.add(key)
    payload = payload_from_mapping(recommendation_type, data)
    if payload is not None:
        return store.mark_used(payload)
    return store.add(_fallback_key(recommendation_type, dict(data)))


# ─── Smart suggestions ────────────────────────────────────────────────────────


def get_complementary_habits(habits: Sequence[Habit]) -> List[HabitSuggestion]:
    suggestions = []
    categories = [h.category or "General" for h in habits]
    titles = [h.title.lower() for h in habits]

    if "Health" in categories and not any("water" in t for t in titles):
        suggestions.append(HabitSuggestion(
            title="Drink 8 glasses of water",
            description="Since you have health habits, staying hydrated will amplify their benefits.",
            confidence=0.8,
            category="Health",
        ))

    if "Productivity" in categories and not any("meditation" in t for t in titles):
        suggestions.append(HabitSuggestion(
            title="10-minute morning meditation",
            description="Meditation can significantly boost your existing productivity habits.",
            confidence=0.75,
            category="Wellness",
        ))

    if len(habits) >= 3 and "Learning" not in categories:
        suggestions.append(HabitSuggestion(
            title="Read for 20 minutes",
            description="Adding a learning habit can create synergy with your existing routine.",
            confidence=0.7,
            category="Learning",
        ))

    return suggestions[:MAX_SUGGESTIONS]


def generate_smart_recommendations(habits: Sequence[Habit],
                                   store: RecommendationStore) -> List[Insight]:
    insights = []
    for suggestion in get_complementary_habits(habits):
        payload = SuggestionPayload(recommended_habit=suggestion)
        if store.is_used(payload):
            logger.debug(f"Suggestion '{suggestion.title}' already used, skipping")
            continue
        insights.append(Insight(
            type=InsightType.RECOMMENDATION,
            title=f"Suggested: {suggestion.title}",
            description=suggestion.description,
            confidence=suggestion.confidence,
            priority=Priority.MEDIUM,
            actionable=True,
            show_action_button=True,
            data=payload,
            recommendation_id=generate_recommendation_key(payload),
        ))
    return insights

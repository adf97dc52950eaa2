# tests/test_recommendations.py

import pytest

from habitlens.models import (
    CorrelationPayload,
    DayPayload,
    HabitSuggestion,
    HourRate,
    InsightType,
    PeakTimePayload,
    Priority,
    RecoveryPayload,
    StackingPayload,
    SuggestionPayload,
    TimingPayload,
)
from habitlens.reporting.recommendations import (
    RecommendationStore,
    generate_recommendation_key,
    generate_smart_recommendations,
    get_complementary_habits,
    mark_recommendation_as_used,
    payload_from_mapping,
    set_used_recommendations,
)
from habitlens.utils.error_handler import ValidationError

from conftest import make_habit

WATER = HabitSuggestion(title="Drink 8 glasses of water", description="...",
                        confidence=0.8, category="Health")


# ─── Keys ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("payload, key", [
    (TimingPayload(optimal_hours=(HourRate(7, 1.0, 3), HourRate(8, 0.9, 4))), "timing_7,8"),
    (DayPayload(best_day="Monday", rate=0.95), "day_Monday"),
    (DayPayload(worst_day="Sunday", rate=0.2), "day_Sunday"),
    (CorrelationPayload(habit1="Run", habit2="Read", correlation=0.8), "correlation_Run_Read"),
    (SuggestionPayload(recommended_habit=WATER), "suggestion_Drink 8 glasses of water"),
    (StackingPayload(habit1="Run", habit2="Read", frequency=6), "stacking_Run_Read"),
    (PeakTimePayload(best_time="morning", success_rate=0.9), "time_morning"),
])
def test_keys_for_dedicated_variants(payload, key):
    assert generate_recommendation_key(payload) == key


def test_key_ignores_volatile_numbers_for_day_and_timing():
    a = DayPayload(best_day="Monday", rate=0.81)
    b = DayPayload(best_day="Monday", rate=0.99)
    assert generate_recommendation_key(a) == generate_recommendation_key(b)


def test_fallback_key_uses_type_and_truncated_json():
    payload = RecoveryPayload(habit_id="habit-with-a-rather-long-identifier",
                              missed_days=3, completed_days=2)
    key = generate_recommendation_key(payload)
    assert key.startswith("recovery_{")
    assert len(key) == len("recovery_") + 50
    assert key == generate_recommendation_key(
        RecoveryPayload(habit_id="habit-with-a-rather-long-identifier",
                        missed_days=3, completed_days=2))


# ─── Store ────────────────────────────────────────────────────────────────────

def test_store_marks_and_checks_payloads():
    store = RecommendationStore()
    payload = PeakTimePayload(best_time="evening", success_rate=0.85)
    assert not store.is_used(payload)
    assert store.mark_used(payload) == "time_evening"
    assert store.is_used(payload)
    assert "time_evening" in store
    assert len(store) == 1


def test_set_used_recommendations_replaces_keys():
    store = RecommendationStore(["day_Monday"])
    set_used_recommendations(store, ["time_morning", "day_Friday"])
    assert store.keys() == ["day_Friday", "time_morning"]
    assert "day_Monday" not in store


def test_mark_from_camel_case_mapping_matches_payload_key():
    store = RecommendationStore()
    key = mark_recommendation_as_used(store, "day_optimization", {"bestDay": "Monday"})
    assert key == "day_Monday"
    assert store.is_used(DayPayload(best_day="Monday", rate=0.9))


def test_mark_nested_suggestion_mapping():
    store = RecommendationStore()
    key = mark_recommendation_as_used(store, "habit_suggestion", {
        "recommendedHabit": {"title": "Read for 20 minutes", "description": "...",
                             "confidence": 0.7, "category": "Learning"},
    })
    assert key == "suggestion_Read for 20 minutes"


def test_mark_timing_mapping_rebuilds_hours():
    store = RecommendationStore()
    key = mark_recommendation_as_used(store, "timing_optimization", {
        "optimalHours": [{"hour": 7, "rate": 1.0, "total": 3}, {"hour": 21}],
    })
    assert key == "timing_7,21"


def test_mark_unknown_type_uses_fallback_key():
    store = RecommendationStore()
    key = mark_recommendation_as_used(store, "custom", {"a": 1})
    assert key == 'custom_{"a":1}'
    assert key in store


def test_mark_accepts_payload_instance():
    store = RecommendationStore()
    payload = StackingPayload(habit1="A", habit2="B", frequency=5)
    assert mark_recommendation_as_used(store, "habit_stacking", payload) == "stacking_A_B"


@pytest.mark.parametrize("recommendation_type, data, key", [
    ("habit_correlation", {"habit1": "Run", "habit2": "Read"}, "correlation_Run_Read"),
    ("habit_stacking", {"habit1": "Run", "habit2": "Read"}, "stacking_Run_Read"),
    ("habit_suggestion", {"recommendedHabit": {"title": "Read for 20 minutes"}},
     "suggestion_Read for 20 minutes"),
    ("day_optimization", {"worstDay": "Sunday"}, "day_Sunday"),
    ("time_optimization", {"bestTime": "evening"}, "time_evening"),
    ("timing_optimization", {"optimalHours": [{"hour": 6}]}, "timing_6"),
])
def test_mark_minimal_mapping_uses_key_fields_only(recommendation_type, data, key):
    store = RecommendationStore()
    assert mark_recommendation_as_used(store, recommendation_type, data) == key
    assert key in store


def test_minimal_correlation_mapping_dedups_generated_insight():
    store = RecommendationStore()
    mark_recommendation_as_used(store, "habit_correlation", {"habit1": "Run", "habit2": "Read"})
    assert store.is_used(CorrelationPayload(habit1="Run", habit2="Read", correlation=0.92))


@pytest.mark.parametrize("recommendation_type, data", [
    ("habit_correlation", {"habit1": "Run"}),
    ("habit_suggestion", {"recommendedHabit": {"description": "no title"}}),
    ("day_optimization", {"rate": 0.9}),
])
def test_mark_mapping_missing_key_fields_is_rejected(recommendation_type, data):
    with pytest.raises(ValidationError):
        mark_recommendation_as_used(RecommendationStore(), recommendation_type, data)


def test_incomplete_mapping_is_rejected():
    with pytest.raises(ValidationError):
        payload_from_mapping("habit_correlation", {"habit1": "Run"})


def test_partial_suggestion_payload_raises_validation_error():
    with pytest.raises(ValidationError):
        payload_from_mapping("habit_suggestion", {"recommendedHabit": {"title": "Read"}})


def test_unknown_type_has_no_payload():
    assert payload_from_mapping("nope", {}) is None


# ─── Suggestions ──────────────────────────────────────────────────────────────

def test_complementary_habits_capped_at_two_in_rule_order():
    habits = [
        make_habit("Gym", category="Health"),
        make_habit("Inbox zero", category="Productivity"),
        make_habit("Cook", category="Home"),
    ]
    titles = [s.title for s in get_complementary_habits(habits)]
    assert titles == ["Drink 8 glasses of water", "10-minute morning meditation"]


def test_complementary_habits_respect_existing_titles():
    habits = [
        make_habit("Drink WATER", category="Health"),
        make_habit("Meditation", category="Productivity"),
        make_habit("Cook", category="Home"),
    ]
    titles = [s.title for s in get_complementary_habits(habits)]
    assert titles == ["Read for 20 minutes"]


def test_no_learning_suggestion_below_three_habits():
    habits = [make_habit("Cook"), make_habit("Clean")]
    assert get_complementary_habits(habits) == []


def test_smart_recommendations_skip_used_suggestions():
    habits = [make_habit("Gym", category="Health"),
              make_habit("Plan", category="Productivity")]
    store = RecommendationStore(["suggestion_Drink 8 glasses of water"])
    insights = generate_smart_recommendations(habits, store)
    assert [i.title for i in insights] == ["Suggested: 10-minute morning meditation"]
    insight = insights[0]
    assert insight.type is InsightType.RECOMMENDATION
    assert insight.priority is Priority.MEDIUM
    assert insight.actionable and insight.show_action_button
    assert insight.recommendation_id == "suggestion_10-minute morning meditation"
    assert insight.confidence == 0.75

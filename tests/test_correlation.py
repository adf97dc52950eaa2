# tests/test_correlation.py

from itertools import combinations

import pytest

from habitlens.reporting.correlation import (
    calculate_habit_correlation,
    compute_correlation,
    find_habit_correlations,
    generate_habit_stacking,
)
from habitlens.reporting.recommendations import RecommendationStore

from conftest import days_back, make_entry, make_habit


def _habit(title, pattern, habit_id=None, days=None):
    days = days or days_back(len(pattern))
    return make_habit(title, [make_entry(d, completed=c) for d, c in zip(days, pattern)],
                      habit_id=habit_id)


def test_five_shared_completed_dates_correlate_fully():
    run = _habit("Run", [True] * 5)
    read = _habit("Read", [True] * 5)
    assert calculate_habit_correlation(run, read) == 1.0

    insights = find_habit_correlations([run, read], RecommendationStore())
    assert len(insights) == 1
    found = insights[0]
    assert found.title == "Strong Connection Found"
    assert found.confidence == 1.0
    assert found.recommendation_id == "correlation_Run_Read"
    assert '"Run" and "Read" show a 100% correlation' in found.description


def test_correlation_is_symmetric():
    a = _habit("A", [True, False, True, True, False, True, True])
    b = _habit("B", [True, True, False, True, False, True, False])
    assert calculate_habit_correlation(a, b) == calculate_habit_correlation(b, a)
    # both on 3 days, either on 6
    assert calculate_habit_correlation(a, b) == pytest.approx(3 / 6)


def test_fewer_than_five_shared_dates_is_zero():
    a = _habit("A", [True] * 4)
    b = _habit("B", [True] * 4)
    assert calculate_habit_correlation(a, b) == 0.0


def test_no_completions_on_shared_dates_is_zero():
    a = _habit("A", [False] * 6)
    b = _habit("B", [False] * 6)
    assert calculate_habit_correlation(a, b) == 0.0


def test_each_unordered_pair_reported_once():
    habits = [_habit(t, [True] * 6) for t in ("A", "B", "C")]
    insights = find_habit_correlations(habits, RecommendationStore())
    pairs = [(i.data.habit1, i.data.habit2) for i in insights]
    assert pairs == list(combinations(["A", "B", "C"], 2))


def test_used_correlation_is_suppressed():
    habits = [_habit("Run", [True] * 5), _habit("Read", [True] * 5)]
    store = RecommendationStore(["correlation_Run_Read"])
    assert find_habit_correlations(habits, store) == []


def test_threshold_is_exclusive():
    # both on 3 of 5 days where either was done => 0.6, not reported
    a = _habit("A", [True, True, True, True, False])
    b = _habit("B", [True, True, True, False, True])
    assert calculate_habit_correlation(a, b) == pytest.approx(0.6)
    assert find_habit_correlations([a, b], RecommendationStore()) == []


# ─── Stacking ─────────────────────────────────────────────────────────────────

def test_habits_done_together_five_times_stack():
    run = _habit("Run", [True] * 5, habit_id="a")
    read = _habit("Read", [True] * 5, habit_id="b")
    insights = generate_habit_stacking([read, run], RecommendationStore())
    assert len(insights) == 1
    stack = insights[0]
    assert stack.title == "Habit Stacking Opportunity"
    assert stack.data.frequency == 5
    assert stack.confidence == 0.5
    assert stack.recommendation_id == "stacking_Run_Read"


def test_stacking_confidence_caps_at_point_nine():
    run = _habit("Run", [True] * 12, habit_id="a")
    read = _habit("Read", [True] * 12, habit_id="b")
    assert generate_habit_stacking([run, read], RecommendationStore())[0].confidence == 0.9


def test_four_shared_days_do_not_stack():
    run = _habit("Run", [True] * 4, habit_id="a")
    read = _habit("Read", [True] * 4, habit_id="b")
    assert generate_habit_stacking([run, read], RecommendationStore()) == []


# ─── Numeric correlation ──────────────────────────────────────────────────────

def test_compute_correlation_linear():
    scores = compute_correlation([1, 2, 3, 4], [2, 4, 6, 8])
    assert scores == {"pearson": 1.0, "spearman": 1.0}


def test_compute_correlation_inverse():
    scores = compute_correlation([1, 2, 3, 4], [8, 6, 4, 2])
    assert scores["spearman"] == -1.0


@pytest.mark.parametrize("x, y", [([1], [2]), ([1, 2], [1]), ([3, 3, 3], [1, 2, 3])])
def test_compute_correlation_degenerate_input(x, y):
    assert compute_correlation(x, y) == {"pearson": 0.0, "spearman": 0.0}

# tests/test_forecast.py

from datetime import timedelta

import pytest

from habitlens.reporting.forecast import generate_performance_forecast

from conftest import MONDAY, make_entry, make_habit


def _past_weekdays(offset, count):
    """`count` past occurrences of weekday MONDAY + offset, before MONDAY."""
    first = MONDAY + timedelta(days=offset) - timedelta(weeks=1)
    return [first - timedelta(weeks=w) for w in range(count)]


def test_habits_without_history_use_default_rate():
    habits = [make_habit("A"), make_habit("B")]
    result = generate_performance_forecast(habits, days=7, today=MONDAY)

    assert [d.date for d in result.forecast] == [MONDAY + timedelta(days=i) for i in range(7)]
    assert all(d.predicted_completions == pytest.approx(1.2) for d in result.forecast)
    assert all(d.predicted_mood == 5.0 for d in result.forecast)
    weekend = [d for d in result.forecast if d.date.weekday() >= 5]
    assert [d.opportunities for d in weekend] == [("Good weekend structure",)] * 2
    assert result.summary.total_predicted_completions == pytest.approx(8.4)
    assert result.summary.streak_risk == ()
    assert result.summary.improvement_opportunities == ()


def test_strong_weekday_becomes_an_opportunity():
    habit = make_habit("Run", [make_entry(d, mood=8) for d in _past_weekdays(0, 3)])
    result = generate_performance_forecast([habit], days=7, today=MONDAY)

    monday = result.forecast[0]
    assert monday.predicted_completions == 1.0
    assert monday.predicted_mood == 8.0
    assert monday.opportunities == ("Run performs excellently on this day",)
    assert result.forecast[1].predicted_completions == 0.6
    assert result.summary.opportunity_days == (MONDAY,)
    assert result.summary.improvement_opportunities == (
        f"Leverage high-energy days: {MONDAY.isoformat()}",)


def test_weak_weekend_day_is_a_risk():
    habit = make_habit("Run", [make_entry(d, completed=False) for d in _past_weekdays(5, 2)])
    result = generate_performance_forecast([habit], days=7, today=MONDAY)

    saturday = result.forecast[5]
    assert saturday.date.weekday() == 5
    assert saturday.predicted_completions == 0.0
    assert saturday.risk_factors == (
        "Run typically struggles on this day",
        "Weekend schedule disruption",
    )
    assert result.summary.risk_days == (saturday.date,)
    assert result.summary.streak_risk == (
        f"Risk of streak breaks on: {saturday.date.isoformat()}",)


def test_forecast_length_follows_days():
    habits = [make_habit("A")]
    assert len(generate_performance_forecast(habits, days=3, today=MONDAY).forecast) == 3
    empty = generate_performance_forecast(habits, days=0, today=MONDAY)
    assert empty.forecast == ()
    assert empty.summary.total_predicted_completions == 0


def test_predicted_mood_only_rises_above_baseline():
    habit = make_habit("Run", [make_entry(d, mood=3) for d in _past_weekdays(0, 2)])
    result = generate_performance_forecast([habit], days=1, today=MONDAY)
    assert result.forecast[0].predicted_mood == 5.0

# tests/test_models.py

from datetime import date

import pytest

from habitlens.models import (
    DayPayload,
    Frequency,
    Habit,
    Insight,
    InsightType,
    Priority,
    TimeOfDay,
    entry_from_dict,
    habit_from_dict,
    habits_from_snapshot,
)
from habitlens.utils.error_handler import ValidationError


def test_entry_from_dict_accepts_camel_case():
    entry = entry_from_dict({
        "date": "2025-06-05",
        "completed": True,
        "completedAt": "2025-06-05T07:30:00Z",
        "timeOfDay": "Morning",
        "mood": "8",
        "difficulty": 4,
        "notes": "  felt good  ",
    })
    assert entry.date == date(2025, 6, 5)
    assert entry.completed is True
    assert entry.hour == 7
    assert entry.time_of_day is TimeOfDay.MORNING
    assert entry.mood == 8
    assert entry.difficulty == 4
    assert entry.notes == "felt good"
    assert entry.value == 1


def test_entry_from_dict_accepts_snake_case():
    entry = entry_from_dict({
        "date": "2025-06-05T00:00:00",
        "completed": False,
        "completed_at": "2025-06-05T18:05:00",
        "time_of_day": "evening",
    })
    assert entry.date == date(2025, 6, 5)
    assert entry.hour == 18
    assert entry.time_of_day is TimeOfDay.EVENING


def test_entry_without_timestamp_has_hour_zero():
    entry = entry_from_dict({"date": "2025-06-05", "completed": True})
    assert entry.completed_at is None
    assert entry.hour == 0


@pytest.mark.parametrize("row", [
    {"date": "2025-06-05", "mood": 11},
    {"date": "2025-06-05", "difficulty": 0},
    {"date": "not-a-date"},
    {"completed": True},
    {"date": "2025-06-05", "timeOfDay": "brunch"},
    {"date": "2025-06-05", "value": 0},
    {"date": "2025-06-05", "mood": "lots"},
])
def test_entry_from_dict_rejects_bad_rows(row):
    with pytest.raises(ValidationError):
        entry_from_dict(row)


def test_habit_from_dict_defaults():
    habit = habit_from_dict({"id": 42, "title": "  Stretch ", "entries": [
        {"date": "2025-06-01", "completed": True},
    ]})
    assert habit.id == "42"
    assert habit.title == "Stretch"
    assert habit.category == "General"
    assert habit.frequency is Frequency.DAILY
    assert len(habit.entries) == 1


@pytest.mark.parametrize("row", [
    {"id": "h1"},
    {"title": "No id"},
    {"id": "h1", "title": "x", "frequency": "hourly"},
])
def test_habit_from_dict_rejects_bad_rows(row):
    with pytest.raises(ValidationError):
        habit_from_dict(row)


def test_habits_from_snapshot_accepts_wrapped_and_bare_lists():
    rows = [{"id": "a", "title": "A"}, {"id": "b", "title": "B"}]
    assert [h.id for h in habits_from_snapshot(rows)] == ["a", "b"]
    assert [h.id for h in habits_from_snapshot({"habits": rows})] == ["a", "b"]
    with pytest.raises(ValidationError):
        habits_from_snapshot("habits")


def test_priority_weights():
    assert Priority.HIGH.weight > Priority.MEDIUM.weight > Priority.LOW.weight


def test_insight_to_dict_is_json_ready():
    insight = Insight(
        type=InsightType.PATTERN,
        title="Monday Champion",
        description="...",
        confidence=0.9,
        priority=Priority.MEDIUM,
        actionable=True,
        show_action_button=True,
        data=DayPayload(best_day="Monday", rate=1.0),
        recommendation_id="day_Monday",
    )
    d = insight.to_dict()
    assert d["type"] == "pattern"
    assert d["priority"] == "medium"
    assert d["data"] == {
        "best_day": "Monday",
        "worst_day": None,
        "rate": 1.0,
        "recommendation_type": "day_optimization",
    }
    assert d["recommendation_id"] == "day_Monday"


def test_habit_to_dict_serializes_dates():
    habit = habit_from_dict({"id": "a", "title": "A", "entries": [
        {"date": "2025-06-01", "completed": True, "completedAt": "2025-06-01T09:00:00"},
    ]})
    d = habit.to_dict()
    assert d["frequency"] == "daily"
    assert d["entries"][0]["date"] == "2025-06-01"
    assert d["entries"][0]["completed_at"] == "2025-06-01T09:00:00"
    assert isinstance(habit, Habit)

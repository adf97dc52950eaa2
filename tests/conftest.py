# tests/conftest.py

from datetime import date, datetime, time, timedelta

import pytest

from habitlens.models import Habit, HabitEntry, TimeOfDay

# ────────────────────────────────────────────────────────────────────────────────
# Reference dates: every test pins "today" so results never depend on the clock
# ────────────────────────────────────────────────────────────────────────────────

TODAY = date(2025, 6, 18)
# Most recent Monday on or before TODAY
MONDAY = TODAY - timedelta(days=TODAY.weekday())


def make_entry(day, completed=True, hour=None, time_of_day=None, mood=None,
               difficulty=None, value=1):
    return HabitEntry(
        date=day,
        completed=completed,
        value=value,
        completed_at=datetime.combine(day, time(hour)) if hour is not None else None,
        time_of_day=TimeOfDay(time_of_day) if time_of_day else None,
        mood=mood,
        difficulty=difficulty,
    )


def make_habit(title, entries=(), category="General", habit_id=None):
    return Habit(
        id=habit_id or title.lower().replace(" ", "-"),
        title=title,
        entries=tuple(entries),
        category=category,
    )


def days_back(count, end=TODAY):
    """`count` consecutive dates ending at `end`, oldest first."""
    return [end - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def days_ahead(count, start):
    return [start + timedelta(days=offset) for offset in range(count)]


@pytest.fixture
def habit_factory():
    return make_habit


@pytest.fixture
def entry_factory():
    return make_entry


# ────────────────────────────────────────────────────────────────────────────────
# Keep tests away from the user's ~/.habitlens config and log directory
# ────────────────────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    import habitlens.config.config_manager as cf
    monkeypatch.setenv("HABITLENS_CONFIG", str(tmp_path / "no_such_config.toml"))
    monkeypatch.setattr(cf, "USER_CONFIG", tmp_path / "config.toml")
    yield


@pytest.fixture
def mixed_habits():
    """A realistic three-habit history covering most analyzers."""
    run_days = days_back(28)
    run = make_habit("Morning Run", [
        make_entry(d, completed=(i % 4 != 3), hour=7, time_of_day="morning",
                   mood=8, difficulty=6 - (i // 7))
        for i, d in enumerate(run_days)
    ], category="Health", habit_id="run")
    read = make_habit("Read", [
        make_entry(d, completed=(i % 3 != 0), hour=21, time_of_day="night",
                   mood=7, difficulty=3)
        for i, d in enumerate(days_back(21))
    ], category="Learning", habit_id="read")
    code = make_habit("Deep Work", [
        make_entry(d, completed=d.weekday() < 5, hour=10, time_of_day="morning",
                   mood=6, difficulty=7)
        for d in days_back(21)
    ], category="Productivity", habit_id="code")
    return [run, read, code]

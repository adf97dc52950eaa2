# habitlens/reporting/summary.py
'''
habitlens - Habit Summary Module
One row per habit with completion, streak, mood and difficulty figures, as a pandas
DataFrame, plus a rich table printer for it.
'''

import logging
from datetime import date
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from habitlens.models import Habit
from habitlens.reporting.correlation import compute_correlation
from habitlens.reporting.report_utils import completion_rate, safe_mean
from habitlens.reporting.streaks import best_streak, current_streak

logger = logging.getLogger(__name__)

COLUMNS = [
    "title", "category", "entries", "completion_rate", "current_streak", "best_streak",
    "avg_mood", "avg_difficulty", "mood_difficulty_corr",
]

_pd = None


def get_pandas():
    """Lazy load pandas only when a summary is requested"""
    global _pd
    if _pd is None:
        import pandas as pd
        _pd = pd
    return _pd


def _summary_row(habit: Habit, today: Optional[date]) -> dict:
    completed = [e for e in habit.entries if e.completed]
    moods = [e.mood for e in completed if e.mood is not None]
    difficulties = [e.difficulty for e in completed if e.difficulty is not None]
    paired = [(e.mood, e.difficulty) for e in completed
              if e.mood is not None and e.difficulty is not None]
    corr = compute_correlation([p[0] for p in paired], [p[1] for p in paired])

    avg_mood = safe_mean(moods)
    avg_difficulty = safe_mean(difficulties)
    return {
        "title": habit.title,
        "category": habit.category,
        "entries": len(habit.entries),
        "completion_rate": round(completion_rate(habit.entries), 2),
        "current_streak": current_streak(habit, today),
        "best_streak": best_streak(habit),
        "avg_mood": None if avg_mood is None else round(avg_mood, 1),
        "avg_difficulty": None if avg_difficulty is None else round(avg_difficulty, 1),
        "mood_difficulty_corr": corr["spearman"],
    }


def habit_summary_frame(habits: Sequence[Habit], today: Optional[date] = None):
    pd = get_pandas()
    rows = [_summary_row(h, today) for h in habits]
    logger.debug(f"Summary frame built for {len(rows)} habit(s)")
    return pd.DataFrame(rows, columns=COLUMNS)


def print_dataframe(df, console: Optional[Console] = None):
    console = console or Console()
    if df.empty:
        console.print("[yellow]⚠️ No data found.[/yellow]")
        return
    table = Table(show_header=True, header_style="bold magenta")
    for col in df.columns:
        table.add_column(col)
    pd = get_pandas()
    for _, row in df.iterrows():
        table.add_row(*["-" if pd.isna(val) else str(val) for val in row])
    console.print(table)

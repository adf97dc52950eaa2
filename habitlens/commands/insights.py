# habitlens/commands/insights.py
'''
habitlens - Insight Commands
CLI commands that load a habit snapshot (JSON) and print insights, predictions, the
suggested schedule, coaching, the forecast, streaks and the habit summary.
Every command accepts --json to print machine-readable output instead of tables.
'''

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import habitlens.config.config_manager as cf
from habitlens.models import Habit, habits_from_snapshot
from habitlens.reporting import (
    RecommendationStore,
    analyze_habits,
    calculate_streak_stats,
    generate_optimal_schedule,
    generate_performance_forecast,
    generate_personalized_coaching,
    habit_summary_frame,
    predict_habit_difficulty,
    predict_tomorrow_success,
    predict_week_success,
    print_dataframe,
)
from habitlens.utils.error_handler import ValidationError, handle_cli_errors
from habitlens.utils.shared_utils import parse_calendar_date, parse_timestamp

app = typer.Typer(help="Analyze a habit snapshot.")
console = Console()
logger = logging.getLogger(__name__)

PRIORITY_STYLES = {"high": "bold red", "medium": "yellow", "low": "dim"}


def load_snapshot(path: Path) -> List[Habit]:
    """Read a JSON snapshot (list of habits or {"habits": [...]})."""
    with open(path, "r", encoding="utf-8") as f:
        doc = json.load(f)
    habits = habits_from_snapshot(doc)
    logger.info(f"Loaded {len(habits)} habit(s) from {path}")
    return habits


def find_habit(habits: List[Habit], key: str) -> Habit:
    """Match a habit by id, then by case-insensitive title."""
    for habit in habits:
        if habit.id == key:
            return habit
    for habit in habits:
        if habit.title.lower() == key.lower():
            return habit
    raise ValidationError(f"No habit with id or title '{key}'")


def _parse_today(today: Optional[str]):
    return parse_calendar_date(today, "--today") if today else None


def _echo_json(payload: Any):
    typer.echo(json.dumps(payload, indent=2))


SNAPSHOT_ARG = typer.Argument(..., exists=True, dir_okay=False, readable=True,
                              help="Path to a habit snapshot JSON file")
JSON_OPT = typer.Option(False, "--json", help="Print JSON instead of tables")
TODAY_OPT = typer.Option(None, "--today", help="Reference date (YYYY-MM-DD), default today")
HABIT_OPT = typer.Option(..., "--habit", help="Habit id or title")


@app.command("analyze")
@handle_cli_errors("analyze")
def analyze(
    snapshot: Path = SNAPSHOT_ARG,
    used: Optional[List[str]] = typer.Option(
        None, "--used", help="Recommendation key already acted on (repeatable)"),
    limit: Optional[int] = typer.Option(
        None, "-n", "--limit", help="Maximum insights to show (at most 8)"),
    as_json: bool = JSON_OPT,
):
    """
    Ranked insights for all habits in the snapshot.
    """
    habits = load_snapshot(snapshot)
    store = RecommendationStore(used or [])
    max_insights = limit if limit is not None else cf.get_analytics_settings()["max_insights"]
    insights = analyze_habits(habits, store, max_insights=max_insights)

    if as_json:
        _echo_json([i.to_dict() for i in insights])
        return

    table = Table(title="💡 Habit Insights", show_header=True, header_style="bold magenta")
    table.add_column("Priority")
    table.add_column("Type")
    table.add_column("Insight")
    table.add_column("Confidence", justify="right")
    table.add_column("Key", style="dim")
    for insight in insights:
        style = PRIORITY_STYLES[insight.priority.value]
        table.add_row(
            f"[{style}]{insight.priority.value}[/{style}]",
            insight.type.value,
            f"[bold]{insight.title}[/bold]\n{insight.description}",
            f"{insight.confidence:.0%}",
            insight.recommendation_id or "-",
        )
    console.print(table)


@app.command("predict")
@handle_cli_errors("predict")
def predict(
    snapshot: Path = SNAPSHOT_ARG,
    habit: str = HABIT_OPT,
    today: Optional[str] = TODAY_OPT,
    as_json: bool = JSON_OPT,
):
    """
    Tomorrow's success probability and the weekly outlook for one habit.
    """
    target = find_habit(load_snapshot(snapshot), habit)
    tomorrow = predict_tomorrow_success(target, today=_parse_today(today))
    week = predict_week_success(target)

    if as_json:
        _echo_json({"tomorrow": tomorrow.to_dict(), "week": week.to_dict()})
        return

    factors = ", ".join(tomorrow.factors) or "-"
    console.print(Panel(
        f"[bold]{tomorrow.probability:.0%}[/bold] chance of completing tomorrow\n"
        f"[dim]Factors:[/dim] {factors}\n{tomorrow.recommendation}",
        title=f"🔮 {target.title}"))
    if week.daily_probabilities:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Day")
        table.add_column("Probability", justify="right")
        for day, probability in week.daily_probabilities.items():
            table.add_row(day, f"{probability:.0%}")
        console.print(table)
    console.print(f"Weekly probability: [bold]{week.weekly_probability:.0%}[/bold]")
    for line in week.recommendations:
        console.print(f"• {line}")


@app.command("difficulty")
@handle_cli_errors("difficulty")
def difficulty(
    snapshot: Path = SNAPSHOT_ARG,
    habit: str = HABIT_OPT,
    at: Optional[str] = typer.Option(
        None, "--at", help="Target date/time (ISO 8601), default now"),
    as_json: bool = JSON_OPT,
):
    """
    Expected difficulty of a habit at a given date and hour.
    """
    target = find_habit(load_snapshot(snapshot), habit)
    when = parse_timestamp(at, "--at") if at else datetime.now()
    prediction = predict_habit_difficulty(target, when)

    if as_json:
        _echo_json(prediction.to_dict())
        return

    console.print(Panel(
        f"Predicted difficulty: [bold]{prediction.predicted_difficulty}/10[/bold] "
        f"(confidence {prediction.confidence:.0%})",
        title=f"🧗 {target.title} at {when:%Y-%m-%d %H:%M}"))
    for factor in prediction.factors:
        console.print(f"[dim]•[/dim] {factor}")
    for rec in prediction.recommendations:
        console.print(f"[green]→[/green] {rec}")


@app.command("schedule")
@handle_cli_errors("schedule")
def schedule(
    snapshot: Path = SNAPSHOT_ARG,
    as_json: bool = JSON_OPT,
):
    """
    Suggested daily schedule from your best-performing hours.
    """
    result = generate_optimal_schedule(load_snapshot(snapshot))

    if as_json:
        _echo_json(result.to_dict())
        return

    if result.schedule:
        table = Table(title="🗓️ Optimal Schedule", show_header=True, header_style="bold magenta")
        table.add_column("Time")
        table.add_column("Habit")
        table.add_column("Difficulty", justify="right")
        table.add_column("Success", justify="right")
        table.add_column("Why")
        for slot in result.schedule:
            table.add_row(slot.time, slot.habit_title, str(slot.predicted_difficulty),
                          f"{slot.predicted_success:.0%}", slot.reason)
        console.print(table)
    for tip in result.tips:
        console.print(f"💡 {tip}")


@app.command("coach")
@handle_cli_errors("coach")
def coach(
    snapshot: Path = SNAPSHOT_ARG,
    today: Optional[str] = TODAY_OPT,
    as_json: bool = JSON_OPT,
):
    """
    Personalized coaching from the last seven days.
    """
    result = generate_personalized_coaching(load_snapshot(snapshot), today=_parse_today(today))

    if as_json:
        _echo_json(result.to_dict())
        return

    console.print(Panel(f"[bold]{result.motivational_message}[/bold]\n{result.encouragement}",
                        title=f"🏋️ Focus: {result.focus_area}"))
    console.print("[bold]Action plan[/bold]")
    for step in result.action_plan:
        console.print(f"  • {step}")
    console.print("[bold]Weekly goals[/bold]")
    for goal in result.weekly_goals:
        console.print(f"  • {goal}")


@app.command("forecast")
@handle_cli_errors("forecast")
def forecast(
    snapshot: Path = SNAPSHOT_ARG,
    days: Optional[int] = typer.Option(
        None, "-d", "--days", min=1, help="Days to forecast (default from config)"),
    today: Optional[str] = TODAY_OPT,
    as_json: bool = JSON_OPT,
):
    """
    Predicted completions and mood for the coming days.
    """
    if days is None:
        days = cf.get_analytics_settings()["forecast_days"]
    result = generate_performance_forecast(load_snapshot(snapshot), days=days,
                                           today=_parse_today(today))

    if as_json:
        _echo_json(result.to_dict())
        return

    table = Table(title="📈 Performance Forecast", show_header=True, header_style="bold magenta")
    table.add_column("Date")
    table.add_column("Completions", justify="right")
    table.add_column("Mood", justify="right")
    table.add_column("Risks")
    table.add_column("Opportunities")
    for day in result.forecast:
        table.add_row(f"{day.date:%a %Y-%m-%d}", str(day.predicted_completions),
                      str(day.predicted_mood), "\n".join(day.risk_factors) or "-",
                      "\n".join(day.opportunities) or "-")
    console.print(table)
    summary = result.summary
    console.print(f"Total predicted completions: [bold]{summary.total_predicted_completions}[/bold]")
    for line in summary.streak_risk:
        console.print(f"[red]⚠️ {line}[/red]")
    for line in summary.improvement_opportunities:
        console.print(f"[green]✨ {line}[/green]")


@app.command("streaks")
@handle_cli_errors("streaks")
def streaks(
    snapshot: Path = SNAPSHOT_ARG,
    today: Optional[str] = TODAY_OPT,
    as_json: bool = JSON_OPT,
):
    """
    Current and best streak for every habit.
    """
    habits = load_snapshot(snapshot)
    ref = _parse_today(today)
    stats = [calculate_streak_stats(h, today=ref) for h in habits]

    if as_json:
        _echo_json([s.to_dict() for s in stats])
        return

    titles = {h.id: h.title for h in habits}
    table = Table(title="🔥 Streaks", show_header=True, header_style="bold magenta")
    for col in ("Habit", "Current", "Best", "Rate", "Done", "Level"):
        table.add_column(col)
    for s in stats:
        table.add_row(titles.get(s.habit_id, s.habit_id), str(s.current_streak),
                      str(s.best_streak), f"{s.completion_rate}%", str(s.total_completed),
                      s.level)
    console.print(table)
    for s in stats:
        if s.message:
            console.print(f"[green]{titles.get(s.habit_id, s.habit_id)}:[/green] {s.message}")


@app.command("summary")
@handle_cli_errors("summary")
def summary(
    snapshot: Path = SNAPSHOT_ARG,
    today: Optional[str] = TODAY_OPT,
    as_json: bool = JSON_OPT,
):
    """
    One-row-per-habit summary table.
    """
    df = habit_summary_frame(load_snapshot(snapshot), today=_parse_today(today))

    if as_json:
        typer.echo(df.to_json(orient="records", indent=2))
        return
    print_dataframe(df, console)

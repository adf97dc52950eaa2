# habitlens/reporting/schedule.py
'''
habitlens - Smart Scheduling Module
Builds a suggested daily schedule from the hours at which each habit has historically
been completed most reliably. Easier habits go first in the morning, harder ones in the
evening.
'''

import logging
from typing import Dict, List, Sequence

from habitlens.models import Habit, OptimalSchedule, ScheduleSlot
from habitlens.reporting.report_utils import EVENING, MORNING, in_hours, percent, safe_mean

logger = logging.getLogger(__name__)

MIN_HOUR_SAMPLES = 2
MAX_MORNING_SLOTS = 3
MAX_EVENING_SLOTS = 2


def _best_times(habit: Habit) -> List[Dict[str, float]]:
    stats = {}
    for entry in habit.entries:
        if not entry.completed_at:
            continue
        row = stats.setdefault(entry.completed_at.hour,
                               {"completed": 0, "total": 0, "difficulties": []})
        row["total"] += 1
        if entry.completed:
            row["completed"] += 1
            row["difficulties"].append(entry.difficulty if entry.difficulty is not None else 5)

    times = [
        {"hour": hour,
         "success_rate": row["completed"] / row["total"],
         "avg_difficulty": safe_mean(row["difficulties"], default=5)}
        for hour, row in sorted(stats.items())
        if row["total"] >= MIN_HOUR_SAMPLES
    ]
    times.sort(key=lambda t: -t["success_rate"])
    return times[:3]


def _habit_difficulty(habit: Habit) -> float:
    return safe_mean([e.difficulty for e in habit.entries
                      if e.completed and e.difficulty is not None], default=5)


def _first_in(times, window):
    for t in times:
        if in_hours(t["hour"], window):
            return t
    return None


def generate_optimal_schedule(habits: Sequence[Habit]) -> OptimalSchedule:
    timing = [{"habit": h, "best_times": _best_times(h), "difficulty": _habit_difficulty(h)}
              for h in habits]

    morning = sorted((t for t in timing if _first_in(t["best_times"], MORNING)),
                     key=lambda t: t["difficulty"])[:MAX_MORNING_SLOTS]
    scheduled = {id(t["habit"]) for t in morning}
    evening = sorted((t for t in timing
                      if _first_in(t["best_times"], EVENING) and id(t["habit"]) not in scheduled),
                     key=lambda t: -t["difficulty"])[:MAX_EVENING_SLOTS]

    slots = []
    for index, item in enumerate(morning):
        best = _first_in(item["best_times"], MORNING)
        slots.append(ScheduleSlot(
            time=f"{best['hour'] + index:02d}:00",
            habit_id=item["habit"].id,
            habit_title=item["habit"].title,
            predicted_difficulty=round(best["avg_difficulty"], 1),
            predicted_success=best["success_rate"],
            reason=f"Your {percent(best['success_rate'])}% success rate at this time",
        ))
    for index, item in enumerate(evening):
        best = _first_in(item["best_times"], EVENING)
        slots.append(ScheduleSlot(
            time=f"{best['hour'] + index:02d}:00",
            habit_id=item["habit"].id,
            habit_title=item["habit"].title,
            predicted_difficulty=round(best["avg_difficulty"], 1),
            predicted_success=best["success_rate"],
            reason=f"Consistent performance at this time "
                   f"({percent(best['success_rate'])}% success)",
        ))

    tips = []
    if slots:
        tips.append("Schedule is based on your historical performance patterns")
        morning_success = [s.predicted_success for s in slots if int(s.time[:2]) < 12]
        if safe_mean(morning_success, default=0.0) > 0.8:
            tips.append("You're a morning person! Front-load your difficult habits")
        else:
            tips.append("Consider lighter habits in the morning, save energy for later")
    else:
        tips.append("Complete more habits to generate personalized scheduling recommendations")

    logger.debug(f"Schedule built with {len(slots)} slot(s) for {len(habits)} habit(s)")
    return OptimalSchedule(schedule=tuple(slots), tips=tuple(tips))

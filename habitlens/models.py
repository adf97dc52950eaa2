# habitlens/models.py
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple
from dataclasses import asdict, dataclass, fields
from datetime import date, datetime

from habitlens.utils.error_handler import (
    ValidationError,
    require_text,
    safe_convert_to_int,
    sanitize_string,
    validate_rating,
)
from habitlens.utils.shared_utils import parse_calendar_date, parse_timestamp


def _to_json_value(val: Any) -> Any:
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if isinstance(val, (datetime, date)):
        return val.isoformat()
    if hasattr(val, "to_dict") and callable(val.to_dict):
        return val.to_dict()
    if isinstance(val, (list, tuple)):
        return [_to_json_value(item) for item in val]
    if isinstance(val, dict):
        return {k: _to_json_value(v) for k, v in val.items()}
    return val


class BaseModel:
    def asdict(self) -> dict:
        """
        Convert dataclass to dict, but keep raw types (Enum, datetime) for internal use.
        """
        return asdict(self)

    def to_dict(self) -> dict:
        """
        Convert dataclass to JSON-serializable dict:
         - Enum fields → their .value
         - date/datetime fields → ISO-format strings
         - Nested dataclasses, tuples and dicts converted recursively
        """
        return {f.name: _to_json_value(getattr(self, f.name))
                for f in fields(self.__class__)}

    def __repr__(self):
        cname = self.__class__.__name__
        fields_str = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{cname}({fields_str})"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class InsightType(str, Enum):
    PREDICTION = "prediction"
    PATTERN = "pattern"
    RECOMMENDATION = "recommendation"
    STREAK = "streak"
    OPTIMIZATION = "optimization"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


# ─── Time-series snapshot ─────────────────────────────────────────────────────


@dataclass(frozen=True, repr=False)
class HabitEntry(BaseModel):
    date: date
    completed: bool
    value: int = 1
    completed_at: Optional[datetime] = None
    time_of_day: Optional[TimeOfDay] = None
    mood: Optional[int] = None
    difficulty: Optional[int] = None
    notes: Optional[str] = None
    id: Optional[str] = None

    @property
    def hour(self) -> int:
        """Hour of day of the completion, midnight of `date` when unknown."""
        return self.completed_at.hour if self.completed_at else 0


@dataclass(frozen=True, repr=False)
class Habit(BaseModel):
    id: str
    title: str
    frequency: Frequency = Frequency.DAILY
    entries: Tuple[HabitEntry, ...] = ()
    category: str = "General"
    created_at: Optional[datetime] = None
    color: Optional[str] = None


def entry_from_dict(row: Dict[str, Any]) -> HabitEntry:
    """
    Build a HabitEntry from the data layer's JSON shape.
    Accepts camelCase (completedAt, timeOfDay) and snake_case keys.
    """
    if not isinstance(row, dict):
        raise ValidationError("Habit entry must be an object")
    value = safe_convert_to_int(row.get("value"), "value", default=1)
    if value < 1:
        raise ValidationError("value must be a positive integer")

    time_of_day = row.get("timeOfDay", row.get("time_of_day"))
    if time_of_day:
        try:
            time_of_day = TimeOfDay(str(time_of_day).lower())
        except ValueError:
            raise ValidationError(f"Unknown timeOfDay '{time_of_day}'")
    else:
        time_of_day = None

    entry_id = row.get("id")
    return HabitEntry(
        date=parse_calendar_date(row.get("date"), "date"),
        completed=bool(row.get("completed", False)),
        value=value,
        completed_at=parse_timestamp(
            row.get("completedAt", row.get("completed_at")), "completedAt"),
        time_of_day=time_of_day,
        mood=validate_rating(row.get("mood"), "mood"),
        difficulty=validate_rating(row.get("difficulty"), "difficulty"),
        notes=sanitize_string(row.get("notes")),
        id=None if entry_id is None else str(entry_id),
    )


def habit_from_dict(row: Dict[str, Any]) -> Habit:
    if not isinstance(row, dict):
        raise ValidationError("Habit must be an object")
    frequency = row.get("frequency") or Frequency.DAILY.value
    try:
        frequency = Frequency(str(frequency).lower())
    except ValueError:
        raise ValidationError(f"Unknown frequency '{frequency}'")
    return Habit(
        id=require_text(row.get("id"), "Habit id"),
        title=require_text(row.get("title"), "Habit title"),
        frequency=frequency,
        entries=tuple(entry_from_dict(e) for e in row.get("entries") or []),
        category=sanitize_string(row.get("category"), max_length=100) or "General",
        created_at=parse_timestamp(
            row.get("createdAt", row.get("created_at")), "createdAt"),
        color=sanitize_string(row.get("color"), max_length=32),
    )


def habits_from_snapshot(doc: Any) -> List[Habit]:
    """Accept either a bare list of habits or {"habits": [...]}."""
    if isinstance(doc, dict):
        doc = doc.get("habits", [])
    if not isinstance(doc, list):
        raise ValidationError("Snapshot must be a list of habits")
    return [habit_from_dict(row) for row in doc]


# ─── Insight payloads ─────────────────────────────────────────────────────────
# One variant per recommendation kind. `recommendation_type` is the tag; each
# variant carries what its dedup key and follow-up action need.


@dataclass(frozen=True, repr=False)
class InsightPayload(BaseModel):
    recommendation_type: ClassVar[str] = "insight"


@dataclass(frozen=True, repr=False)
class OnboardingPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "onboarding"


@dataclass(frozen=True, repr=False)
class DayPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "day_optimization"
    best_day: Optional[str] = None
    worst_day: Optional[str] = None
    rate: float = 0.0


@dataclass(frozen=True, repr=False)
class DayPerformancePayload(InsightPayload):
    recommendation_type: ClassVar[str] = "day_performance"
    best_day: str
    rate: float


@dataclass(frozen=True, repr=False)
class StreakRiskPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "streak_risk"
    habit_id: str
    risk_score: float


@dataclass(frozen=True, repr=False)
class CorrelationPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "habit_correlation"
    habit1: str
    habit2: str
    correlation: float


@dataclass(frozen=True, repr=False)
class StackingPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "habit_stacking"
    habit1: str
    habit2: str
    frequency: int
    stacking_type: str = "sequential"


@dataclass(frozen=True, repr=False)
class HourRate(BaseModel):
    hour: int
    rate: float
    total: int


@dataclass(frozen=True, repr=False)
class TimingPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "timing_optimization"
    optimal_hours: Tuple[HourRate, ...]


@dataclass(frozen=True, repr=False)
class TimeOfDayPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "time_of_day"
    best_period: str
    rate: float


@dataclass(frozen=True, repr=False)
class EnergyPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "energy_pattern"
    best_period: str
    worst_period: str
    difference: float


@dataclass(frozen=True, repr=False)
class HabitTimingPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "habit_timing"
    habit_id: str
    optimal_time: str
    avg_hour: float


@dataclass(frozen=True, repr=False)
class PeakTimePayload(InsightPayload):
    recommendation_type: ClassVar[str] = "time_optimization"
    best_time: str
    success_rate: float


@dataclass(frozen=True, repr=False)
class HabitSuggestion(BaseModel):
    title: str
    description: str
    confidence: float
    category: str


@dataclass(frozen=True, repr=False)
class SuggestionPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "habit_suggestion"
    recommended_habit: HabitSuggestion


@dataclass(frozen=True, repr=False)
class DifficultyAdjustmentPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "difficulty_adjustment"
    habit_id: str
    current_rate: float
    adjustment: str


@dataclass(frozen=True, repr=False)
class RecoveryPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "recovery"
    habit_id: str
    missed_days: int
    completed_days: int
    strategy: str = "recovery"


@dataclass(frozen=True, repr=False)
class MoodBoostPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "mood_boost"
    habit_id: str
    avg_mood: float


@dataclass(frozen=True, repr=False)
class MoodAdjustmentPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "habit_adjustment"
    habit_id: str
    avg_mood: float


@dataclass(frozen=True, repr=False)
class DifficultyTrendPayload(InsightPayload):
    recommendation_type: ClassVar[str] = "difficulty_trend"
    habit_id: str
    difficulty_change: float
    recent_avg: float
    earlier_avg: float


@dataclass(frozen=True, repr=False)
class IncreaseChallengePayload(DifficultyTrendPayload):
    recommendation_type: ClassVar[str] = "increase_challenge"


@dataclass(frozen=True, repr=False)
class SimplifyHabitPayload(DifficultyTrendPayload):
    recommendation_type: ClassVar[str] = "simplify_habit"


@dataclass(frozen=True, repr=False)
class Insight(BaseModel):
    type: InsightType
    title: str
    description: str
    confidence: float
    priority: Priority
    actionable: bool = False
    show_action_button: bool = False
    data: Optional[InsightPayload] = None
    recommendation_id: Optional[str] = None

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.data is not None:
            result["data"]["recommendation_type"] = self.data.recommendation_type
        return result


# ─── Prediction, schedule and narrative results ───────────────────────────────


@dataclass(frozen=True, repr=False)
class TomorrowPrediction(BaseModel):
    probability: float
    factors: Tuple[str, ...]
    recommendation: str


@dataclass(frozen=True, repr=False)
class WeekPrediction(BaseModel):
    daily_probabilities: Dict[str, float]
    weekly_probability: float
    risk_factors: Tuple[str, ...]
    success_factors: Tuple[str, ...]
    recommendations: Tuple[str, ...]


@dataclass(frozen=True, repr=False)
class DifficultyPrediction(BaseModel):
    predicted_difficulty: float
    factors: Tuple[str, ...]
    recommendations: Tuple[str, ...]
    confidence: float


@dataclass(frozen=True, repr=False)
class ScheduleSlot(BaseModel):
    time: str
    habit_id: str
    habit_title: str
    predicted_difficulty: float
    predicted_success: float
    reason: str


@dataclass(frozen=True, repr=False)
class OptimalSchedule(BaseModel):
    schedule: Tuple[ScheduleSlot, ...]
    tips: Tuple[str, ...]


@dataclass(frozen=True, repr=False)
class Coaching(BaseModel):
    motivational_message: str
    focus_area: str
    action_plan: Tuple[str, ...]
    encouragement: str
    weekly_goals: Tuple[str, ...]
    completion_rate: float = 0.0
    avg_mood: float = 5.0
    avg_difficulty: float = 5.0
    active_habits: int = 0


@dataclass(frozen=True, repr=False)
class ForecastDay(BaseModel):
    date: date
    predicted_completions: float
    predicted_mood: float
    risk_factors: Tuple[str, ...]
    opportunities: Tuple[str, ...]


@dataclass(frozen=True, repr=False)
class ForecastSummary(BaseModel):
    total_predicted_completions: float
    streak_risk: Tuple[str, ...]
    improvement_opportunities: Tuple[str, ...]
    risk_days: Tuple[date, ...] = ()
    opportunity_days: Tuple[date, ...] = ()


@dataclass(frozen=True, repr=False)
class PerformanceForecast(BaseModel):
    forecast: Tuple[ForecastDay, ...]
    summary: ForecastSummary


@dataclass(frozen=True, repr=False)
class StreakStats(BaseModel):
    habit_id: str
    current_streak: int
    best_streak: int
    completion_rate: int
    total_completed: int
    level: str
    message: Optional[str] = None

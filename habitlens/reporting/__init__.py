# habitlens/reporting/__init__.py
from habitlens.reporting.coaching import generate_personalized_coaching
from habitlens.reporting.forecast import generate_performance_forecast
from habitlens.reporting.insight_engine import analyze_habits
from habitlens.reporting.prediction import (
    predict_habit_difficulty,
    predict_tomorrow_success,
    predict_week_success,
)
from habitlens.reporting.recommendations import (
    RecommendationStore,
    generate_recommendation_key,
    mark_recommendation_as_used,
    set_used_recommendations,
)
from habitlens.reporting.schedule import generate_optimal_schedule
from habitlens.reporting.streaks import calculate_streak_stats
from habitlens.reporting.summary import habit_summary_frame, print_dataframe

__all__ = [
    "RecommendationStore",
    "analyze_habits",
    "calculate_streak_stats",
    "generate_optimal_schedule",
    "generate_performance_forecast",
    "generate_personalized_coaching",
    "generate_recommendation_key",
    "habit_summary_frame",
    "mark_recommendation_as_used",
    "predict_habit_difficulty",
    "predict_tomorrow_success",
    "predict_week_success",
    "print_dataframe",
    "set_used_recommendations",
]

"""Сервисы бизнес-логики."""
from fitfusion.services.fitness_calc import (
    calculate_daily_targets,
    calculate_bmi,
    bmi_category,
    calculate_streak,
)
from fitfusion.services.achievements import evaluate_badges
from fitfusion.services.stats_service import get_today_stats, get_period_stats

__all__ = [
    "calculate_daily_targets",
    "calculate_bmi",
    "bmi_category",
    "calculate_streak",
    "evaluate_badges",
    "get_today_stats",
    "get_period_stats",
]

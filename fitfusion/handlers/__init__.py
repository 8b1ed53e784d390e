"""Обработчики команд бота."""
from fitfusion.handlers.start import register_handlers as register_start_handlers
from fitfusion.handlers.registration import register_handlers as register_registration_handlers
from fitfusion.handlers.workout import register_handlers as register_workout_handlers
from fitfusion.handlers.food import register_handlers as register_food_handlers
from fitfusion.handlers.stats import register_handlers as register_stats_handlers
from fitfusion.handlers.coach import register_handlers as register_coach_handlers

__all__ = [
    "register_start_handlers",
    "register_registration_handlers",
    "register_workout_handlers",
    "register_food_handlers",
    "register_stats_handlers",
    "register_coach_handlers",
]

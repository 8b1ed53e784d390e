"""Модели данных."""
from fitfusion.models.base import generate_id, utcnow
from fitfusion.models.profile import UserProfile, WeightEntry, Gender, Goal, ActivityLevel
from fitfusion.models.workout import Exercise, WorkoutSession
from fitfusion.models.meal_log import MacroNutrients, MealLog
from fitfusion.models.chat_message import ChatMessage, Role
from fitfusion.models.ai_usage_log import UsageRecord

__all__ = [
    "generate_id",
    "utcnow",
    "UserProfile",
    "WeightEntry",
    "Gender",
    "Goal",
    "ActivityLevel",
    "Exercise",
    "WorkoutSession",
    "MacroNutrients",
    "MealLog",
    "ChatMessage",
    "Role",
    "UsageRecord",
]

"""Сервис для подсчета статистики."""
import random
from datetime import date, timedelta, timezone
from typing import Optional
from fitfusion.models import MealLog
from fitfusion.services.fitness_calc import today_utc, workout_day

# Шаги с датчика телефона, если браслет не подключен
DEFAULT_STEPS = 2450


def meal_day(meal: MealLog) -> date:
    moment = meal.timestamp
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).date()


def get_today_stats(store, today: Optional[date] = None) -> dict:
    """Получить статистику за сегодня."""
    today = today or today_utc()

    meals = [m for m in store.meals if meal_day(m) == today]
    workouts = [w for w in store.workouts if workout_day(w) == today]

    # Список еды
    food_list = [f"• {m.name} — {round(m.macros.calories)} kcal" for m in meals]

    return {
        "calories_consumed": round(sum(m.macros.calories for m in meals)),
        "protein": round(sum(m.macros.protein for m in meals), 1),
        "carbs": round(sum(m.macros.carbs for m in meals), 1),
        "fat": round(sum(m.macros.fat for m in meals), 1),
        "calories_burned": sum(w.calories_burned for w in workouts),
        "active_minutes": sum(w.duration_minutes for w in workouts),
        "food_list": food_list,
        "meals_count": len(meals),
        "workouts_count": len(workouts),
    }


def get_period_stats(store, days: int, today: Optional[date] = None) -> dict:
    """Получить статистику за период.

    Args:
        store: хранилище пользователя
        days: количество дней, включая сегодня (7, 30)
    """
    today = today or today_utc()
    start_date = today - timedelta(days=days - 1)

    daily_cal: dict[date, float] = {}
    for meal in store.meals:
        day = meal_day(meal)
        if start_date <= day <= today:
            daily_cal[day] = daily_cal.get(day, 0) + meal.macros.calories

    workouts = [w for w in store.workouts if start_date <= workout_day(w) <= today]

    if not daily_cal and not workouts:
        return {
            "avg_calories": 0,
            "total_days": 0,
            "workouts_count": 0,
            "message": "Нет данных за период",
        }

    result = {
        "total_calories": round(sum(daily_cal.values())),
        "avg_calories": int(sum(daily_cal.values()) / len(daily_cal)) if daily_cal else 0,
        "total_days": len(daily_cal),
        "min_cal": round(min(daily_cal.values())) if daily_cal else 0,
        "max_cal": round(max(daily_cal.values())) if daily_cal else 0,
        "workouts_count": len(workouts),
        "workout_days": len({workout_day(w) for w in workouts}),
        "calories_burned": sum(w.calories_burned for w in workouts),
        "active_minutes": sum(w.duration_minutes for w in workouts),
    }
    return result


def get_dashboard_stats(store, today: Optional[date] = None) -> dict:
    """Данные для AI-инсайта на дашборде."""
    stats = get_today_stats(store, today)
    return {
        "caloriesBurned": stats["calories_burned"],
        "caloriesConsumed": stats["calories_consumed"],
        "steps": current_steps(store.device),
    }


def current_steps(device) -> int:
    return device.steps or DEFAULT_STEPS


def simulate_device_sync(device, rng: Optional[random.Random] = None):
    """Симуляция синхронизации с фитнес-браслетом.

    Первое подключение выставляет стартовые данные, повторные
    синхронизации добавляют немного шагов и обновляют пульс.
    """
    rng = rng or random.Random()
    if not device.connected:
        device.connected = True
        device.steps = 5432
        device.heart_rate = 78
    else:
        device.steps += rng.randrange(500)
        device.heart_rate = 60 + rng.randrange(40)
    return device


def progress_percent(current: float, goal: float) -> int:
    """Процент выполнения цели, не больше 100."""
    if goal <= 0:
        return 0
    return int(min(100, current / goal * 100))


def generate_progress_bar(current: float, total: float, length: int = 20) -> str:
    """Генерирует визуальный прогресс-бар."""
    if total <= 0:
        return "▯" * length

    filled = int(min(current / total, 1.0) * length)
    return "🟩" * filled + "▯" * (length - filled)

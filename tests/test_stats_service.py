"""Тесты статистики и симуляции браслета."""
import random
from datetime import date, datetime, timezone
from fitfusion.models import MacroNutrients, MealLog, WorkoutSession, generate_id
from fitfusion.services.stats_service import (
    DEFAULT_STEPS,
    current_steps,
    generate_progress_bar,
    get_dashboard_stats,
    get_period_stats,
    get_today_stats,
    progress_percent,
    simulate_device_sync,
)
from fitfusion.store import DeviceState, SessionStore

TODAY = date(2026, 3, 10)


def at(day: int, hour: int = 12) -> datetime:
    return datetime(2026, 3, day, hour, tzinfo=timezone.utc)


def meal(day: int, calories: float, protein: float = 10, carbs: float = 20, fat: float = 5) -> MealLog:
    return MealLog(
        id=generate_id(),
        name=f"Meal {calories}",
        timestamp=at(day),
        macros=MacroNutrients(calories=calories, protein=protein, carbs=carbs, fat=fat),
    )


def workout(day: int, minutes: int, calories: int) -> WorkoutSession:
    return WorkoutSession(
        id=generate_id(), date=at(day), name="W", duration_minutes=minutes, calories_burned=calories
    )


def make_store() -> SessionStore:
    store = SessionStore()
    for item in (meal(10, 500), meal(10, 700.4), meal(9, 1800), meal(1, 2500)):
        store.add_meal(item)
    for item in (workout(10, 30, 170), workout(8, 45, 245)):
        store.add_workout(item)
    return store


def test_today_stats():
    stats = get_today_stats(make_store(), TODAY)

    assert stats["calories_consumed"] == 1200
    assert stats["protein"] == 20
    assert stats["calories_burned"] == 170
    assert stats["active_minutes"] == 30
    assert stats["meals_count"] == 2
    assert stats["workouts_count"] == 1
    assert len(stats["food_list"]) == 2


def test_today_stats_empty():
    stats = get_today_stats(SessionStore(), TODAY)
    assert stats["calories_consumed"] == 0
    assert stats["food_list"] == []


def test_period_stats():
    """Неделя включает сегодня и 6 предыдущих дней."""
    stats = get_period_stats(make_store(), days=7, today=TODAY)

    assert stats["total_days"] == 2
    assert stats["total_calories"] == 3000
    assert stats["avg_calories"] == 1500
    assert stats["min_cal"] == 1200
    assert stats["max_cal"] == 1800
    assert stats["workouts_count"] == 2
    assert stats["calories_burned"] == 415


def test_period_stats_no_data():
    stats = get_period_stats(SessionStore(), days=7, today=TODAY)
    assert stats["total_days"] == 0
    assert stats["message"] == "Нет данных за период"


def test_dashboard_stats_default_steps():
    store = make_store()
    stats = get_dashboard_stats(store, TODAY)
    assert stats == {"caloriesBurned": 170, "caloriesConsumed": 1200, "steps": DEFAULT_STEPS}


def test_device_sync():
    device = DeviceState()
    assert current_steps(device) == DEFAULT_STEPS

    simulate_device_sync(device, random.Random(1))
    assert device.connected
    assert (device.steps, device.heart_rate) == (5432, 78)

    simulate_device_sync(device, random.Random(1))
    assert 5432 <= device.steps < 5932
    assert 60 <= device.heart_rate < 100
    assert current_steps(device) == device.steps


def test_progress_helpers():
    assert progress_percent(500, 2000) == 25
    assert progress_percent(3000, 2000) == 100
    assert progress_percent(10, 0) == 0
    assert generate_progress_bar(5, 10, length=10) == "🟩" * 5 + "▯" * 5
    assert generate_progress_bar(1, 0, length=4) == "▯" * 4

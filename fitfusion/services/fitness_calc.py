"""Расчет калорий, ИМТ и серий тренировок."""
import math
from datetime import date, timedelta, timezone
from typing import Iterable, Optional
from fitfusion.models import UserProfile, Gender, Goal, ActivityLevel, WorkoutSession, utcnow

# Стандартная цель по шагам
STEP_GOAL = 10000

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.VERY: 1.725,
}


def calculate_bmr(profile: UserProfile) -> float:
    """Базовый метаболизм по формуле Mifflin-St Jeor."""
    bmr = 10 * profile.weight + 6.25 * profile.height - 5 * profile.age
    if profile.gender == Gender.MALE:
        return bmr + 5
    return bmr - 161


def calculate_daily_targets(profile: UserProfile) -> dict:
    """Рассчитать дневную цель по калориям и шагам.

    BMR умножается на коэффициент активности (TDEE), затем корректируется
    под цель: похудение -500 ккал, набор массы +300 ккал.
    """
    multiplier = ACTIVITY_MULTIPLIERS.get(profile.activity_level, 1.55)
    tdee = calculate_bmr(profile) * multiplier

    if profile.goal == Goal.LOSE_WEIGHT:
        calories = tdee - 500  # Дефицит 500 ккал
    elif profile.goal == Goal.BUILD_MUSCLE:
        calories = tdee + 300  # Профицит 300 ккал
    else:
        calories = tdee

    return {"calories": math.floor(calories + 0.5), "steps": STEP_GOAL}


def calculate_bmi(profile: UserProfile) -> float:
    """Индекс массы тела с точностью до 0.1."""
    height_m = profile.height / 100
    if height_m <= 0:
        return 0.0
    return round(profile.weight / (height_m * height_m), 1)


def bmi_category(bmi: float) -> str:
    """Категория ИМТ (границы включаются в верхнюю категорию)."""
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Healthy"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def workout_day(session: WorkoutSession) -> date:
    """Календарная дата тренировки в UTC."""
    moment = session.date
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).date()


def today_utc() -> date:
    return utcnow().date()


def calculate_streak(workouts: Iterable[WorkoutSession], today: Optional[date] = None) -> int:
    """Текущая серия тренировок подряд (в днях).

    Серия жива, только если последняя тренировка была сегодня или вчера.
    """
    days = sorted({workout_day(w) for w in workouts}, reverse=True)
    if not days:
        return 0

    today = today or today_utc()
    if days[0] not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if previous - current != timedelta(days=1):
            break
        streak += 1
    return streak


def session_volume(session: WorkoutSession) -> float:
    """Общий поднятый объём за тренировку (кг)."""
    return sum(ex.volume for ex in session.exercises)


def calculate_session_stats(elapsed_seconds: int, exercise_count: int) -> tuple[int, int]:
    """Длительность и сожжённые калории по итогам тренировки.

    Упрощённая эвристика: 5 ккал за минуту плюс 20 ккал за упражнение.
    Физиологической точности не претендует.
    """
    duration = max(1, math.ceil(elapsed_seconds / 60))
    calories = math.floor(duration * 5 + exercise_count * 20)
    return duration, calories


def format_elapsed(total_seconds: int) -> str:
    """Секунды в формате MM:SS."""
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def get_initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part).upper()[:2]

"""Логирование тренировки: состояния Idle / Logging и таймер."""
import enum
import logging
from datetime import datetime
from typing import Optional
from fitfusion.models import Exercise, WorkoutSession, generate_id, utcnow
from fitfusion.services.fitness_calc import calculate_session_stats

logger = logging.getLogger(__name__)


class WorkoutState(str, enum.Enum):
    IDLE = "idle"
    LOGGING = "logging"


class WorkoutStateError(Exception):
    """Действие недопустимо в текущем состоянии тренировки."""


class WorkoutLogger:
    """Текущая (незавершённая) тренировка.

    Таймер считает секунды через tick(), который вызывается раз в секунду
    снаружи. Секунда добавляется только в состоянии Logging при запущенном
    таймере. Пауза останавливает счёт без сброса.
    """

    def __init__(self):
        self.state = WorkoutState.IDLE
        self._reset()

    def _reset(self) -> None:
        self.name = ""
        self.goal = ""
        self.goal_achieved = False
        self.strategy: Optional[str] = None
        self.exercises: list[Exercise] = []
        self.elapsed_seconds = 0
        self.timer_running = False

    @property
    def is_logging(self) -> bool:
        return self.state == WorkoutState.LOGGING

    @property
    def is_ticking(self) -> bool:
        """Таймер должен идти: тренировка активна и не на паузе."""
        return self.is_logging and self.timer_running

    def _require_logging(self) -> None:
        if not self.is_logging:
            raise WorkoutStateError("Тренировка не начата")

    def start(self) -> None:
        """Начать пустую тренировку (ручной режим)."""
        self._reset()
        self.state = WorkoutState.LOGGING
        self.timer_running = True

    def start_from_plan(self, plan: dict) -> None:
        """Начать тренировку по плану от AI.

        Args:
            plan: {"workoutName", "strategy", "exercises": [{name, sets, reps, weightSuggestion}]}
        """
        self.start()
        self.name = plan["workoutName"]
        self.strategy = plan["strategy"]
        self.exercises = [
            Exercise(
                id=generate_id(),
                name=item["name"],
                sets=item["sets"],
                reps=item["reps"],
                weight=item["weightSuggestion"],
            )
            for item in plan["exercises"]
        ]

    def set_name(self, name: str) -> None:
        self._require_logging()
        self.name = name.strip()

    def set_goal(self, goal: str) -> None:
        self._require_logging()
        self.goal = goal.strip()

    def toggle_goal_achieved(self) -> bool:
        self._require_logging()
        self.goal_achieved = not self.goal_achieved
        return self.goal_achieved

    def add_exercise(self, name: str, sets: int, reps: int, weight: float = 0) -> Exercise:
        """Добавить упражнение. Название обязательно, числа не отрицательные."""
        self._require_logging()
        if not name.strip():
            raise ValueError("Нужно название упражнения")
        if sets < 0 or reps < 0 or weight < 0:
            raise ValueError("Подходы, повторы и вес не могут быть отрицательными")

        exercise = Exercise(id=generate_id(), name=name.strip(), sets=sets, reps=reps, weight=weight)
        self.exercises.append(exercise)
        return exercise

    def toggle_exercise(self, exercise_id: str) -> Optional[Exercise]:
        """Отметить упражнение выполненным (или снять отметку)."""
        self._require_logging()
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                exercise.completed = not exercise.completed
                return exercise
        return None

    def pause(self) -> None:
        self._require_logging()
        self.timer_running = False

    def resume(self) -> None:
        self._require_logging()
        self.timer_running = True

    def toggle_timer(self) -> bool:
        if self.timer_running:
            self.pause()
        else:
            self.resume()
        return self.timer_running

    def tick(self) -> int:
        """Одна секунда таймера."""
        if self.is_ticking:
            self.elapsed_seconds += 1
        return self.elapsed_seconds

    def cancel(self) -> None:
        """Отменить тренировку без сохранения."""
        self.state = WorkoutState.IDLE
        self._reset()

    def can_finish(self) -> bool:
        return self.is_logging and bool(self.name.strip()) and len(self.exercises) > 0

    def finish(self, now: Optional[datetime] = None) -> WorkoutSession:
        """Завершить тренировку и посчитать длительность и калории.

        Returns:
            WorkoutSession для добавления в хранилище

        Raises:
            WorkoutStateError: нет названия или упражнений
        """
        if not self.can_finish():
            raise WorkoutStateError("Нужно название и хотя бы одно упражнение")

        duration, calories = calculate_session_stats(self.elapsed_seconds, len(self.exercises))
        session = WorkoutSession(
            id=generate_id(),
            date=now or utcnow(),
            name=self.name,
            exercises=list(self.exercises),
            duration_minutes=duration,
            calories_burned=calories,
            goal=self.goal or None,
            goal_achieved=self.goal_achieved,
        )
        logger.info(f"Workout finished: {session.name}, {duration} min, {calories} kcal")

        self.state = WorkoutState.IDLE
        self._reset()
        return session


def format_share_text(session: WorkoutSession) -> str:
    """Текст для того, чтобы поделиться тренировкой."""
    text = (
        f"🚀 I just completed a workout on Fitness Fusion!\n\n"
        f"🏋️ {session.name}\n"
        f"⏱️ {session.duration_minutes} minutes\n"
        f"🔥 {session.calories_burned} kcal burned"
    )
    if session.goal:
        text += f"\n🎯 Goal: {session.goal} {'✅ (ACHIEVED!)' if session.goal_achieved else ''}".rstrip()
    text += "\n\nCan you beat my score? #FitnessFusion"
    return text

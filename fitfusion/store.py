"""Хранилище сессии пользователя в памяти.

Данные живут только пока работает процесс. Единственный путь записи:
методы SessionStore.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import MutableMapping, Optional
from fitfusion.models import (
    ChatMessage,
    MealLog,
    Role,
    UserProfile,
    WeightEntry,
    WorkoutSession,
    generate_id,
    utcnow,
)
from fitfusion.services.workout_logger import WorkoutLogger

logger = logging.getLogger(__name__)

# Ключ хранилища в context.user_data
STORE_KEY = "store"


@dataclass
class DeviceState:
    """Симулированный фитнес-браслет."""

    connected: bool = False
    steps: int = 0
    heart_rate: int = 0


@dataclass
class SessionStore:
    """Состояние приложения одного пользователя."""

    profile: Optional[UserProfile] = None
    workouts: list[WorkoutSession] = field(default_factory=list)
    meals: list[MealLog] = field(default_factory=list)
    chat: list[ChatMessage] = field(default_factory=list)
    workout: WorkoutLogger = field(default_factory=WorkoutLogger)
    device: DeviceState = field(default_factory=DeviceState)
    # Результат анализа фото, ожидающий подтверждения
    pending_meal: Optional[dict] = None

    @property
    def has_profile(self) -> bool:
        """Заполнен ли профиль (онбординг пройден)."""
        return self.profile is not None

    def set_profile(self, profile: UserProfile) -> None:
        """Полная замена профиля (онбординг и редактирование)."""
        self.profile = profile

    def log_weight(self, weight: float, day: Optional[date] = None) -> UserProfile:
        """Записать новый вес: обновляет текущий вес и дополняет историю."""
        if self.profile is None:
            raise ValueError("Профиль не заполнен")
        if weight <= 0:
            raise ValueError("Вес должен быть положительным")

        entry = WeightEntry(date=day or utcnow().date(), weight=weight)
        self.profile = replace(
            self.profile,
            weight=weight,
            weight_history=[*self.profile.weight_history, entry],
        )
        return self.profile

    def add_workout(self, workout: WorkoutSession) -> None:
        """Новая тренировка встаёт в начало списка."""
        self.workouts.insert(0, workout)

    def update_workout(self, workout: WorkoutSession) -> bool:
        """Заменить тренировку с тем же id. Если id не найден, ничего не делаем."""
        for index, existing in enumerate(self.workouts):
            if existing.id == workout.id:
                self.workouts[index] = workout
                return True
        logger.warning(f"Workout {workout.id} not found, update skipped")
        return False

    def get_workout(self, workout_id: str) -> Optional[WorkoutSession]:
        return next((w for w in self.workouts if w.id == workout_id), None)

    def toggle_goal_achieved(self, workout_id: str) -> Optional[WorkoutSession]:
        """Отметить цель тренировки достигнутой (или снять отметку)."""
        workout = self.get_workout(workout_id)
        if workout is None:
            return None
        updated = replace(workout, goal_achieved=not workout.goal_achieved)
        self.update_workout(updated)
        return updated

    def add_meal(self, meal: MealLog) -> None:
        self.meals.insert(0, meal)

    def add_chat_message(self, role: Role, text: str) -> ChatMessage:
        message = ChatMessage(id=generate_id(), role=Role(role), text=text, timestamp=utcnow())
        self.chat.append(message)
        return message

    def reset_chat(self) -> None:
        self.chat.clear()


def get_store(user_data: MutableMapping) -> SessionStore:
    """Хранилище пользователя из context.user_data.

    Использование:
        store = get_store(context.user_data)
        store.add_workout(session)
    """
    store = user_data.get(STORE_KEY)
    if store is None:
        store = SessionStore()
        user_data[STORE_KEY] = store
    return store

"""Модель профиля пользователя (параметры и цели)."""
import enum
from dataclasses import dataclass, field
from datetime import date


class Gender(str, enum.Enum):
    """Пол пользователя."""
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Goal(str, enum.Enum):
    """Цели из онбординга. Поле профиля остаётся свободным текстом."""
    LOSE_WEIGHT = "Lose Weight"
    BUILD_MUSCLE = "Build Muscle"
    MAINTAIN = "Maintain"
    ENDURANCE = "Improve Endurance"


class ActivityLevel(str, enum.Enum):
    """Уровень активности."""
    SEDENTARY = "Sedentary"              # Сидячий образ жизни
    LIGHT = "Lightly Active"             # Спорт 1-3 раза в неделю
    MODERATE = "Moderately Active"       # Спорт 3-5 раз
    VERY = "Very Active"                 # Спорт 6-7 раз


@dataclass(frozen=True)
class WeightEntry:
    """Запись истории веса."""

    date: date
    weight: float


@dataclass
class UserProfile:
    """Профиль пользователя.

    weight_history хранится в хронологическом порядке, первая запись самая старая.
    """

    name: str
    gender: Gender
    age: int
    weight: float  # кг
    height: float  # см
    goal: str
    activity_level: ActivityLevel
    weight_history: list[WeightEntry] = field(default_factory=list)

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""

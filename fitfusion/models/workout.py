"""Модели тренировок."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Exercise:
    """Упражнение внутри тренировки. weight=0 означает собственный вес."""

    id: str
    name: str
    sets: int
    reps: int
    weight: float = 0
    completed: bool = False

    @property
    def volume(self) -> float:
        """Поднятый объём: вес × повторы × подходы."""
        return self.weight * self.reps * self.sets


@dataclass
class WorkoutSession:
    """Завершённая тренировка."""

    id: str
    date: datetime  # UTC
    name: str
    exercises: list[Exercise] = field(default_factory=list)
    duration_minutes: int = 1
    calories_burned: int = 0
    goal: Optional[str] = None
    goal_achieved: bool = False

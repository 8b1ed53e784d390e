"""Модель записи о приеме пищи."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class MacroNutrients:
    """КБЖУ. Калории оцениваются отдельно и не обязаны сходиться с суммой БЖУ."""

    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MealLog:
    """Съеденное блюдо, принятое пользователем после анализа фото."""

    id: str
    name: str
    timestamp: datetime  # UTC
    macros: MacroNutrients
    # file_id фото в Telegram
    image_ref: Optional[str] = None
    description: str = ""

"""Модель для учета использования AI-запросов."""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UsageRecord:
    """Один успешный запрос к Gemini."""

    timestamp: datetime
    operation: str  # food_analysis, coaching, insight, workout_plan
    model: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def __repr__(self):
        return f"<UsageRecord {self.operation} {self.total_tokens} tokens>"

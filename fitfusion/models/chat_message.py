"""Модель сообщения в чате с AI-тренером."""
import enum
from dataclasses import dataclass
from datetime import datetime


class Role(str, enum.Enum):
    """Автор сообщения (роли совпадают с ролями Gemini)."""
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class ChatMessage:
    id: str
    role: Role
    text: str
    timestamp: datetime

"""Общие помощники для моделей."""
import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """Уникальный идентификатор записи."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Текущее время в UTC (все даты в моделях хранятся в UTC)."""
    return datetime.now(timezone.utc)

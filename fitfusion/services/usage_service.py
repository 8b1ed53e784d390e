"""Учет токенов AI-запросов (в памяти процесса)."""
import logging
from datetime import date
from typing import Optional
from fitfusion.models import UsageRecord, utcnow

logger = logging.getLogger(__name__)

_records: list[UsageRecord] = []


def log_token_usage(
    operation: str, model: str, input_tokens: int = 0, output_tokens: int = 0
) -> UsageRecord:
    """Записать использование токенов.

    Args:
        operation: тип операции (food_analysis, coaching, insight, workout_plan)
        model: модель Gemini
        input_tokens: токены на вход
        output_tokens: токены на выход
    """
    now = utcnow()
    # Храним только сегодняшние записи: отчёт строится за текущий день
    _records[:] = [r for r in _records if r.timestamp.date() == now.date()]

    record = UsageRecord(
        timestamp=now,
        operation=operation,
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
    )
    _records.append(record)
    logger.info(f"AI usage: {operation} {model} in={input_tokens} out={output_tokens}")
    return record


def get_daily_stats(day: Optional[date] = None) -> dict:
    """Статистика токенов за день (по умолчанию за сегодня, UTC)."""
    day = day or utcnow().date()
    records = [r for r in _records if r.timestamp.date() == day]

    by_operation: dict[str, int] = {}
    for record in records:
        by_operation[record.operation] = by_operation.get(record.operation, 0) + 1

    return {
        "total_tokens": sum(r.total_tokens for r in records),
        "operations": len(records),
        "by_operation": by_operation,
    }


def format_usage_report(stats: dict) -> str:
    """Форматирует отчёт об использовании."""
    lines = [
        "📊 Токены сегодня:",
        f"Запросов: {stats['operations']}",
        f"Токенов: {stats['total_tokens']:,}",
    ]
    for operation, count in sorted(stats["by_operation"].items()):
        lines.append(f"• {operation}: {count}")
    return "\n".join(lines)


def clear_usage() -> None:
    _records.clear()

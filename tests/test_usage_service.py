"""Тесты учёта токенов."""
from datetime import timedelta
import pytest
from fitfusion.models import UsageRecord, utcnow
from fitfusion.services import usage_service
from fitfusion.services.usage_service import (
    clear_usage,
    format_usage_report,
    get_daily_stats,
    log_token_usage,
)


@pytest.fixture(autouse=True)
def reset_usage():
    clear_usage()
    yield
    clear_usage()


def test_daily_stats():
    log_token_usage("coaching", "gemini-2.5-flash", 100, 20)
    log_token_usage("coaching", "gemini-2.5-flash", 50, 10)
    log_token_usage("insight", "gemini-2.5-flash", 30, 5)

    stats = get_daily_stats()
    assert stats == {
        "total_tokens": 215,
        "operations": 3,
        "by_operation": {"coaching": 2, "insight": 1},
    }
    report = format_usage_report(stats)
    assert "Запросов: 3" in report
    assert "• coaching: 2" in report


def test_old_records_are_pruned():
    """Записи прошлых дней удаляются при следующей записи."""
    yesterday = utcnow() - timedelta(days=1)
    usage_service._records.append(
        UsageRecord(timestamp=yesterday, operation="coaching", model="m", input_tokens=10)
    )
    assert get_daily_stats(yesterday.date())["operations"] == 1

    log_token_usage("insight", "m", 5, 5)

    assert len(usage_service._records) == 1
    assert get_daily_stats(yesterday.date())["operations"] == 0
    assert get_daily_stats()["total_tokens"] == 10

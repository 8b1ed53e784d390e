"""Тесты для бота."""
import pytest
from fitfusion.config import Config
from fitfusion.handlers.workout import parse_exercise_text


def test_config_validation():
    """Тест валидации конфигурации."""
    config = Config(
        BOT_TOKEN="test_token",
        GEMINI_API_KEY="test_key",
        ADMIN_ID=None,
    )
    # Не должно вызывать ошибку
    config.validate()


def test_config_validation_errors():
    """Без токена или ключа конфигурация невалидна."""
    with pytest.raises(ValueError):
        Config(BOT_TOKEN="", GEMINI_API_KEY="key", ADMIN_ID=None).validate()

    with pytest.raises(ValueError):
        Config(BOT_TOKEN="token", GEMINI_API_KEY="", ADMIN_ID=None).validate()

    with pytest.raises(ValueError):
        Config(BOT_TOKEN="token", GEMINI_API_KEY="key", ADMIN_ID=None, AI_TIMEOUT=0).validate()


def test_parse_exercise_text():
    """Тест парсинга текста упражнения."""
    # Тест 1: с весом
    assert parse_exercise_text("Присед 3x10 60") == ("Присед", 3, 10, 60.0)

    # Тест 2: без веса
    assert parse_exercise_text("Подтягивания 4х8") == ("Подтягивания", 4, 8, 0)

    # Тест 3: дробный вес, кг и пробелы
    assert parse_exercise_text("  Жим лёжа 5 × 5 82,5 кг ") == ("Жим лёжа", 5, 5, 82.5)

    # Тест 4: не упражнение
    assert parse_exercise_text("Как дела?") is None
    assert parse_exercise_text("3x10") is None

"""Конфигурация бота из переменных окружения."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Config:
    """Настройки бота."""

    BOT_TOKEN: str
    GEMINI_API_KEY: str
    ADMIN_ID: int | None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    # Таймаут запросов к Gemini (секунды)
    AI_TIMEOUT: int = 30

    @classmethod
    def from_env(cls) -> "Config":
        """Загрузка конфигурации из окружения."""
        return cls(
            BOT_TOKEN=os.getenv("BOT_TOKEN", ""),
            GEMINI_API_KEY=os.getenv("GEMINI_API_KEY", ""),
            ADMIN_ID=int(os.getenv("ADMIN_ID")) if os.getenv("ADMIN_ID") else None,
            GEMINI_MODEL=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            GEMINI_BASE_URL=os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
            ),
            AI_TIMEOUT=int(os.getenv("AI_TIMEOUT", "30")),
        )

    def validate(self) -> None:
        """Проверка обязательных настроек."""
        if not self.BOT_TOKEN:
            raise ValueError("BOT_TOKEN не установлен в .env")
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY не установлен в .env")
        if self.AI_TIMEOUT <= 0:
            raise ValueError("AI_TIMEOUT должен быть положительным")


# Глобальный экземпляр конфигурации
config = Config.from_env()

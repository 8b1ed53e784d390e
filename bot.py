"""Точка входа для Fitness Fusion."""
import logging
from telegram import Update
from telegram.ext import Application, ContextTypes
from fitfusion.config import config
from fitfusion.handlers import (
    register_start_handlers,
    register_registration_handlers,
    register_workout_handlers,
    register_food_handlers,
    register_stats_handlers,
    register_coach_handlers,
)

# Настройка логирования
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO
)
# Иначе httpx пишет каждый getUpdates
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Непойманные ошибки обработчиков: лог и сообщение пользователю."""
    logger.error(f"Ошибка при обработке обновления: {context.error}", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text("❌ Что-то пошло не так. Попробуй ещё раз.")


def main() -> None:
    """Запуск бота."""
    # Проверка конфигурации
    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Ошибка конфигурации: {e}")
        return

    # Создание приложения
    logger.info("Запуск бота...")
    application = Application.builder().token(config.BOT_TOKEN).build()

    # Онбординг первым: его ConversationHandler должен получать текст раньше остальных
    register_registration_handlers(application)
    register_start_handlers(application)
    register_workout_handlers(application)
    register_food_handlers(application)
    register_stats_handlers(application)
    register_coach_handlers(application)
    application.add_error_handler(error_handler)

    logger.info(f"AI model: {config.GEMINI_MODEL}")
    application.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    main()

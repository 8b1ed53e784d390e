"""Обработчики чата с AI-тренером Fuse."""
import asyncio
import logging
from telegram import Update
from telegram.constants import ChatAction
from telegram.ext import Application, CommandHandler, MessageHandler, filters, ContextTypes
from fitfusion.models import Role
from fitfusion.services.gemini_service import build_user_context, get_fitness_coaching
from fitfusion.store import get_store

logger = logging.getLogger(__name__)

# Текст без активной тренировки попадает сюда (после обработчиков тренировки)
TEXT_GROUP = 2
MODE_KEY = "mode"


def greeting(first_name: str) -> str:
    return (
        f"Hey {first_name}! I'm Fuse, your AI performance coach. "
        "I've analyzed your profile and recent activity. Ready to level up? "
        "Ask me for a workout plan, nutrition advice, or just some motivation!"
    )


async def coach_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Войти в режим чата с тренером."""
    store = get_store(context.user_data)
    if not store.has_profile:
        await update.effective_message.reply_text("❌ Сначала заполни профиль: /register")
        return

    context.user_data[MODE_KEY] = "coach"

    if not store.chat:
        store.add_chat_message(Role.MODEL, greeting(store.profile.first_name))

    last = store.chat[-1]
    await update.effective_message.reply_text(
        f"🤖 Режим тренера. Пиши вопросы, /stop_coach для выхода.\n\n{last.text}"
    )


async def coach_reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Начать разговор с тренером заново."""
    store = get_store(context.user_data)
    store.reset_chat()
    await coach_command(update, context)


async def stop_coach_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    context.user_data.pop(MODE_KEY, None)
    await update.message.reply_text("👋 Вышли из режима тренера. История чата сохранена.")


async def handle_coach_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Сообщение пользователя тренеру."""
    if context.user_data.get("in_conversation"):
        return

    store = get_store(context.user_data)
    if context.user_data.get(MODE_KEY) != "coach" or not store.has_profile:
        await update.message.reply_text(
            "🤔 Отправь фото еды, начни тренировку /workout или поговори с тренером /coach"
        )
        return

    text = update.message.text.strip()
    if not text:
        return

    store.add_chat_message(Role.USER, text)
    await context.bot.send_chat_action(chat_id=update.effective_chat.id, action=ChatAction.TYPING)

    user_context = build_user_context(store.profile, store.workouts)
    # Ответ добавляется по приходу: при нескольких запросах подряд порядок не гарантирован
    reply = await asyncio.to_thread(get_fitness_coaching, list(store.chat), user_context)
    if not reply:
        return

    store.add_chat_message(Role.MODEL, reply)
    await update.message.reply_text(reply)


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("coach", coach_command))
    application.add_handler(CommandHandler("coach_reset", coach_reset_command))
    application.add_handler(CommandHandler("stop_coach", stop_coach_command))
    application.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND, handle_coach_text), group=TEXT_GROUP
    )

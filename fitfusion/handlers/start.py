"""Обработчики команд /start и /help."""
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import Application, CommandHandler, CallbackQueryHandler, ContextTypes
from fitfusion.store import get_store
from fitfusion.services.fitness_calc import calculate_daily_targets
from fitfusion.handlers.workout import workout_command, plan_command
from fitfusion.handlers.stats import today_command
from fitfusion.handlers.coach import coach_command

HELP_TEXT = (
    "📖 <b>Команды бота:</b>\n\n"
    "🏋️ <b>Тренировки:</b>\n"
    "/workout - Начать тренировку\n"
    "/plan - Тренировка от AI\n"
    "/history - Последние тренировки\n\n"
    "🍽️ <b>Питание:</b>\n"
    "Отправь фото еды - я оценю КБЖУ\n"
    "/meals - Съедено сегодня\n\n"
    "📊 <b>Статистика:</b>\n"
    "/today - Дашборд за сегодня\n"
    "/week - Статистика за неделю\n"
    "/sync - Синхронизировать браслет\n\n"
    "👤 <b>Профиль:</b>\n"
    "/profile - Профиль, ИМТ и бейджи\n"
    "/weight - Записать вес\n"
    "/edit_profile - Заполнить профиль заново\n\n"
    "🤖 <b>AI-тренер:</b>\n"
    "/coach - Чат с Fuse\n"
    "/coach_reset - Начать чат заново"
)


def main_menu_keyboard() -> InlineKeyboardMarkup:
    keyboard = [
        [InlineKeyboardButton("🏋️ Тренировка", callback_data="start:workout")],
        [InlineKeyboardButton("✨ AI-тренировка", callback_data="start:plan")],
        [InlineKeyboardButton("📊 Сегодня", callback_data="start:today")],
        [InlineKeyboardButton("🤖 AI-тренер", callback_data="start:coach")],
    ]
    return InlineKeyboardMarkup(keyboard)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка команды /start."""
    store = get_store(context.user_data)

    if not store.has_profile:
        # Inline-кнопка регистрации
        keyboard = [[InlineKeyboardButton("📝 Заполнить профиль", callback_data="start:register")]]
        await update.message.reply_text(
            "👋 Привет! Я Fuse, твой AI-тренер.\n\n"
            "Я помогу вести тренировки и питание и достигать целей.\n\n"
            "Для начала нужно заполнить профиль:",
            reply_markup=InlineKeyboardMarkup(keyboard),
        )
        return

    targets = calculate_daily_targets(store.profile)
    await update.message.reply_text(
        f"👋 С возвращением, {store.profile.first_name or 'друг'}!\n\n"
        f"🔥 Дневная цель: {targets['calories']} ккал\n"
        f"👣 Шаги: {targets['steps']:,}",
        reply_markup=main_menu_keyboard(),
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка команды /help."""
    await update.message.reply_text(HELP_TEXT, parse_mode="HTML")


async def start_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка inline-кнопок из /start (кроме регистрации)."""
    query = update.callback_query
    await query.answer()

    actions = {
        "start:workout": workout_command,
        "start:plan": plan_command,
        "start:today": today_command,
        "start:coach": coach_command,
    }
    action = actions.get(query.data)
    if action:
        await action(update, context)


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(
        CallbackQueryHandler(start_callback, pattern=r"^start:(workout|plan|today|coach)$")
    )

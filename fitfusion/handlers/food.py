"""Обработчики фото еды и дневника питания."""
import asyncio
import html
import io
import logging
from telegram import Update, InputFile
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, MessageHandler, filters, ContextTypes
from fitfusion.keyboards.food_menu import get_meal_confirm_keyboard
from fitfusion.models import MealLog, generate_id, utcnow
from fitfusion.services.fitness_calc import calculate_daily_targets
from fitfusion.services.gemini_service import AnalysisError, analyze_food_image
from fitfusion.services.stats_service import generate_progress_bar, get_today_stats, meal_day
from fitfusion.services.table_generator import generate_meals_table
from fitfusion.store import get_store

logger = logging.getLogger(__name__)


async def handle_food_photo(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка фото еды: Gemini -> карточка с КБЖУ -> подтверждение."""
    store = get_store(context.user_data)
    if not store.has_profile:
        await update.message.reply_text("❌ Сначала заполни профиль: /register")
        return

    wait_message = await update.message.reply_text("🔍 Анализирую фото...")

    photo = update.message.photo[-1]
    file = await context.bot.get_file(photo.file_id)
    photo_bytes = io.BytesIO()
    await file.download_to_memory(photo_bytes)

    # Новое фото заменяет неподтверждённый результат
    store.pending_meal = None
    try:
        analysis = await asyncio.to_thread(analyze_food_image, photo_bytes.getvalue(), "image/jpeg")
    except AnalysisError as e:
        logger.warning(f"Food analysis failed: {e}")
        await wait_message.edit_text(
            "❌ Не удалось распознать еду на фото.\n" "Попробуй ещё раз: отправь то же или другое фото."
        )
        return

    analysis_id = generate_id()
    store.pending_meal = {"id": analysis_id, "analysis": analysis, "file_id": photo.file_id}
    macros = analysis["macros"]

    await wait_message.edit_text(
        f"🍽️ <b>{html.escape(analysis['name'])}</b>\n"
        f"🔥 {round(macros.calories)} ккал\n"
        f"🥩 Б: {macros.protein:g}г | 🍞 У: {macros.carbs:g}г | 🧈 Ж: {macros.fat:g}г\n\n"
        f"<i>{html.escape(analysis['description'])}</i>",
        parse_mode="HTML",
        reply_markup=get_meal_confirm_keyboard(analysis_id),
    )


async def meal_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Кнопки «Записать» / «Переснять» под результатом анализа."""
    query = update.callback_query
    await query.answer()
    store = get_store(context.user_data)

    _, action, analysis_id = query.data.split(":", 2)
    # Кнопки старой карточки не должны трогать результат более нового фото
    pending = store.pending_meal
    is_current = pending is not None and pending["id"] == analysis_id

    if action == "retake":
        if is_current:
            store.pending_meal = None
        await query.edit_message_text("📸 Отправь новое фото блюда.")
        return

    if not is_current:
        await query.edit_message_text("⚠️ Результат анализа устарел. Отправь фото ещё раз.")
        return

    analysis = pending["analysis"]
    meal = MealLog(
        id=generate_id(),
        name=analysis["name"],
        timestamp=utcnow(),
        macros=analysis["macros"],
        image_ref=pending["file_id"],
        description=analysis["description"],
    )
    store.add_meal(meal)
    store.pending_meal = None
    logger.info(f"Meal logged: {meal.name}")

    today = get_today_stats(store)
    goal = calculate_daily_targets(store.profile)["calories"]
    remaining = goal - today["calories_consumed"]
    remaining_text = f"{remaining} ккал" if remaining >= 0 else f"{abs(remaining)} ккал ПРЕВЫШЕНО"

    await query.edit_message_text(
        f"✅ Записано: {meal.name}\n\n"
        f"📊 Прогресс на сегодня:\n"
        f"{today['calories_consumed']} из {goal} ккал\n"
        f"{generate_progress_bar(today['calories_consumed'], goal)}\n"
        f"Осталось: {remaining_text}"
    )


async def meals_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Таблица съеденного за сегодня."""
    store = get_store(context.user_data)
    today = utcnow().date()
    meals = [m for m in store.meals if meal_day(m) == today]

    if not meals:
        await update.message.reply_text("🍽️ Сегодня записей нет. Отправь фото еды!")
        return

    table_img = generate_meals_table(meals)
    stats = get_today_stats(store)
    await update.message.reply_photo(
        photo=InputFile(io.BytesIO(table_img), filename="meals_table.png"),
        caption=(
            f"🍽️ Сегодня: {stats['calories_consumed']} ккал\n"
            f"Б: {stats['protein']}г | У: {stats['carbs']}г | Ж: {stats['fat']}г"
        ),
    )


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(MessageHandler(filters.PHOTO, handle_food_photo))
    application.add_handler(CommandHandler("meals", meals_command))
    application.add_handler(CallbackQueryHandler(meal_callback, pattern=r"^meal:"))

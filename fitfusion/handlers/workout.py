"""Обработчики тренировок: ручной и AI-режим, таймер, история."""
import asyncio
import html
import logging
import re
from typing import Optional
from telegram import Update
from telegram.error import BadRequest
from telegram.ext import (
    Application,
    ApplicationHandlerStop,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)
from fitfusion.keyboards.workout_menu import get_history_keyboard, get_logging_keyboard
from fitfusion.services.achievements import unlocked_badges
from fitfusion.services.fitness_calc import format_elapsed
from fitfusion.services.gemini_service import generate_workout_plan
from fitfusion.services.workout_logger import WorkoutLogger, WorkoutStateError, format_share_text
from fitfusion.store import get_store

logger = logging.getLogger(__name__)

# Группа обработчиков текста во время тренировки (после онбординга)
TEXT_GROUP = 1

EXERCISE_RE = re.compile(
    r"^(?P<name>.+?)\s+(?P<sets>\d+)\s*[xх×*]\s*(?P<reps>\d+)"
    r"(?:\s+(?P<weight>\d+(?:[.,]\d+)?)\s*(?:кг|kg)?)?\s*$",
    re.IGNORECASE,
)


def parse_exercise_text(text: str) -> Optional[tuple[str, int, int, float]]:
    """Парсит текст упражнения: "Присед 3x10 60" -> (название, подходы, повторы, вес).

    Вес необязателен, без него упражнение с собственным весом.
    """
    match = EXERCISE_RE.match(text.strip())
    if not match:
        return None

    weight = match.group("weight")
    return (
        match.group("name").strip(),
        int(match.group("sets")),
        int(match.group("reps")),
        float(weight.replace(",", ".")) if weight else 0,
    )


def render_workout(workout: WorkoutLogger) -> str:
    """Текст карточки активной тренировки."""
    status = "" if workout.timer_running else " (пауза)"
    lines = [
        f"🏋️ <b>{html.escape(workout.name) or 'Без названия'}</b>",
        f"⏱ {format_elapsed(workout.elapsed_seconds)}{status}",
    ]
    if workout.strategy:
        lines.append(f"✨ {html.escape(workout.strategy)}")
    if workout.goal:
        lines.append(f"🎯 Цель: {html.escape(workout.goal)}")

    lines.append("")
    if workout.exercises:
        for i, ex in enumerate(workout.exercises, 1):
            weight = f"{ex.weight:g} кг" if ex.weight else "свой вес"
            mark = "✅" if ex.completed else "▫️"
            lines.append(f"{mark} {i}. {html.escape(ex.name)}: {ex.sets}×{ex.reps}, {weight}")
    else:
        lines.append("Упражнений пока нет. Поехали!")

    lines.append(
        "\nДобавь упражнение текстом: <i>Присед 3x10 60</i>\n"
        "/name Название, /goal Цель"
    )
    return "\n".join(lines)


def _timer_job_name(user_id: int) -> str:
    return f"workout_timer_{user_id}"


async def timer_tick(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Тик таймера раз в секунду. Останавливается сам, если тренировка не идёт."""
    workout = get_store(context.user_data).workout
    if not workout.is_ticking:
        context.job.schedule_removal()
        return
    workout.tick()


def sync_timer(context: ContextTypes.DEFAULT_TYPE, user_id: int) -> None:
    """Запустить или остановить задачу таймера по состоянию тренировки."""
    workout = get_store(context.user_data).workout
    jobs = context.job_queue.get_jobs_by_name(_timer_job_name(user_id))

    if workout.is_ticking:
        if not jobs:
            context.job_queue.run_repeating(
                timer_tick, interval=1, first=1, name=_timer_job_name(user_id), user_id=user_id
            )
        return

    for job in jobs:
        job.schedule_removal()


async def _require_profile(update: Update, context: ContextTypes.DEFAULT_TYPE):
    store = get_store(context.user_data)
    if not store.has_profile:
        await update.effective_message.reply_text("❌ Сначала заполни профиль: /register")
        return None
    return store


async def workout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Начать тренировку вручную (или показать текущую)."""
    store = await _require_profile(update, context)
    if store is None:
        return

    if not store.workout.is_logging:
        store.workout.start()
        sync_timer(context, update.effective_user.id)

    await update.effective_message.reply_text(
        render_workout(store.workout),
        parse_mode="HTML",
        reply_markup=get_logging_keyboard(store.workout),
    )


async def plan_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Тренировка по плану от AI."""
    store = await _require_profile(update, context)
    if store is None:
        return

    if store.workout.is_logging:
        await update.effective_message.reply_text(
            "⚠️ Тренировка уже идёт. Заверши или отмени её, чтобы начать новую."
        )
        return

    wait_message = await update.effective_message.reply_text("✨ Составляю план тренировки...")

    # При ошибке приходит запасной план, так что логирование всегда стартует с полным планом
    plan = await asyncio.to_thread(generate_workout_plan, store.profile, list(store.workouts))
    store.workout.start_from_plan(plan)
    sync_timer(context, update.effective_user.id)

    await wait_message.edit_text(
        render_workout(store.workout),
        parse_mode="HTML",
        reply_markup=get_logging_keyboard(store.workout),
    )


async def name_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Команда /name: название тренировки."""
    await _set_field(update, context, "name")


async def goal_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Команда /goal: цель тренировки (например: Присед 100 кг)."""
    await _set_field(update, context, "goal")


async def _set_field(update: Update, context: ContextTypes.DEFAULT_TYPE, field: str) -> None:
    store = get_store(context.user_data)
    value = " ".join(context.args or [])
    if not value:
        await update.message.reply_text(f"Пример: /{field} Leg Day")
        return

    try:
        if field == "name":
            store.workout.set_name(value)
        else:
            store.workout.set_goal(value)
    except WorkoutStateError:
        await update.message.reply_text("❌ Сначала начни тренировку: /workout")
        return

    await update.message.reply_text(
        render_workout(store.workout),
        parse_mode="HTML",
        reply_markup=get_logging_keyboard(store.workout),
    )


async def handle_workout_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Текст во время тренировки: добавление упражнения."""
    if context.user_data.get("in_conversation"):
        return

    store = get_store(context.user_data)
    if not store.workout.is_logging:
        return

    parsed = parse_exercise_text(update.message.text)
    if parsed is None:
        await update.message.reply_text(
            "🤔 Не понял упражнение. Формат: <i>Название 3x10 60</i> (вес в кг, необязательно)",
            parse_mode="HTML",
        )
        raise ApplicationHandlerStop

    name, sets, reps, weight = parsed
    store.workout.add_exercise(name, sets, reps, weight)

    await update.message.reply_text(
        render_workout(store.workout),
        parse_mode="HTML",
        reply_markup=get_logging_keyboard(store.workout),
    )
    # Текст обработан, AI-тренер его не получает
    raise ApplicationHandlerStop


async def workout_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка кнопок активной тренировки."""
    query = update.callback_query
    store = get_store(context.user_data)
    workout = store.workout
    user_id = update.effective_user.id
    data = query.data

    if not workout.is_logging:
        await query.answer("Тренировка не идёт")
        await query.edit_message_reply_markup(reply_markup=None)
        return

    if data.startswith("wk:toggle:"):
        workout.toggle_exercise(data.split(":", 2)[2])
    elif data == "wk:goal":
        workout.toggle_goal_achieved()
    elif data == "wk:timer":
        workout.toggle_timer()
        sync_timer(context, user_id)
    elif data == "wk:cancel":
        workout.cancel()
        sync_timer(context, user_id)
        await query.answer()
        await query.edit_message_text("❌ Тренировка отменена.")
        return
    elif data == "wk:finish":
        if not workout.can_finish():
            await query.answer("Нужно название (/name) и хотя бы одно упражнение", show_alert=True)
            return
        before = {badge.id for badge in unlocked_badges(store.profile, store.workouts)}
        session = workout.finish()
        sync_timer(context, user_id)
        store.add_workout(session)
        new_badges = [
            badge for badge in unlocked_badges(store.profile, store.workouts) if badge.id not in before
        ]
        badges_text = "".join(f"\n{badge.emoji} Новый бейдж: <b>{badge.name}</b>" for badge in new_badges)
        await query.answer()
        await query.edit_message_text(
            f"🏁 <b>{html.escape(session.name)}</b> завершена!\n\n"
            f"⏱ {session.duration_minutes} мин\n"
            f"🔥 {session.calories_burned} ккал\n"
            f"💪 Упражнений: {len(session.exercises)}"
            f"{badges_text}",
            parse_mode="HTML",
            reply_markup=get_history_keyboard(session),
        )
        return

    await query.answer()
    try:
        await query.edit_message_text(
            render_workout(workout),
            parse_mode="HTML",
            reply_markup=get_logging_keyboard(workout),
        )
    except BadRequest as e:
        # Карточка не изменилась (например, обновление на паузе)
        if "not modified" not in str(e).lower():
            raise


def render_session(session) -> str:
    goal = ""
    if session.goal:
        goal = f"\n🎯 {html.escape(session.goal)} {'✅' if session.goal_achieved else ''}"
    return (
        f"🏋️ <b>{html.escape(session.name)}</b> ({session.date:%d.%m.%Y})\n"
        f"⏱ {session.duration_minutes} мин | 🔥 {session.calories_burned} ккал | "
        f"💪 {len(session.exercises)} упр.{goal}"
    )


async def history_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Последние 5 тренировок."""
    store = get_store(context.user_data)
    if not store.workouts:
        await update.message.reply_text("Тренировок пока нет. Начни: /workout")
        return

    for session in store.workouts[:5]:
        await update.message.reply_text(
            render_session(session),
            parse_mode="HTML",
            reply_markup=get_history_keyboard(session),
        )


async def history_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Кнопки под завершённой тренировкой: цель и «поделиться»."""
    query = update.callback_query
    await query.answer()
    store = get_store(context.user_data)

    _, action, workout_id = query.data.split(":", 2)
    session = store.get_workout(workout_id)
    if session is None:
        await query.message.reply_text("⚠️ Тренировка не найдена.")
        return

    if action == "goal":
        session = store.toggle_goal_achieved(workout_id)
        await query.edit_message_text(
            render_session(session),
            parse_mode="HTML",
            reply_markup=get_history_keyboard(session),
        )
    elif action == "share":
        await query.message.reply_text(format_share_text(session))


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("workout", workout_command))
    application.add_handler(CommandHandler("plan", plan_command))
    application.add_handler(CommandHandler("name", name_command))
    application.add_handler(CommandHandler("goal", goal_command))
    application.add_handler(CommandHandler("history", history_command))
    application.add_handler(CallbackQueryHandler(workout_callback, pattern=r"^wk:"))
    application.add_handler(CallbackQueryHandler(history_callback, pattern=r"^hist:"))
    application.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND, handle_workout_text), group=TEXT_GROUP
    )

"""Обработчики статистики: дашборд, неделя, профиль с бейджами."""
import asyncio
import html
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes
from fitfusion.config import config
from fitfusion.services.achievements import evaluate_badges
from fitfusion.services.fitness_calc import (
    bmi_category,
    calculate_bmi,
    calculate_daily_targets,
    calculate_streak,
    get_initials,
)
from fitfusion.services.gemini_service import generate_dashboard_insight
from fitfusion.services.stats_service import (
    current_steps,
    generate_progress_bar,
    get_dashboard_stats,
    get_period_stats,
    get_today_stats,
    progress_percent,
    simulate_device_sync,
)
from fitfusion.services.usage_service import format_usage_report, get_daily_stats
from fitfusion.store import get_store


async def today_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Дашборд за сегодня с AI-инсайтом."""
    store = get_store(context.user_data)
    if not store.has_profile:
        await update.effective_message.reply_text("❌ Сначала заполни профиль: /register")
        return

    wait_message = await update.effective_message.reply_text("✨ Fuse анализирует твой день...")

    profile = store.profile
    targets = calculate_daily_targets(profile)
    stats = get_today_stats(store)
    steps = current_steps(store.device)
    insight = await asyncio.to_thread(generate_dashboard_insight, profile, get_dashboard_stats(store))

    food = ""
    if stats["food_list"]:
        food = "\n\n🍽️ Съедено:\n" + html.escape("\n".join(stats["food_list"]))

    device_line = (
        f"⌚ FusionBand: ❤️ {store.device.heart_rate} bpm"
        if store.device.connected
        else "📱 Датчик телефона (/sync для браслета)"
    )

    await wait_message.edit_text(
        f"👋 <b>Привет, {html.escape(profile.first_name)}</b>\n\n"
        f"💡 <i>{html.escape(insight)}</i>\n\n"
        f"🔥 Калории: {stats['calories_consumed']} / {targets['calories']} ккал "
        f"({progress_percent(stats['calories_consumed'], targets['calories'])}%)\n"
        f"{generate_progress_bar(stats['calories_consumed'], targets['calories'])}\n\n"
        f"👣 Шаги: {steps:,} / {targets['steps']:,} "
        f"({progress_percent(steps, targets['steps'])}%)\n"
        f"{generate_progress_bar(steps, targets['steps'])}\n"
        f"{device_line}\n\n"
        f"🏃 Сожжено: {stats['calories_burned']} ккал\n"
        f"⏱ Активных минут: {stats['active_minutes']}\n"
        f"🥗 Б: {stats['protein']}г | У: {stats['carbs']}г | Ж: {stats['fat']}г"
        f"{food}",
        parse_mode="HTML",
    )


async def week_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Статистика за 7 дней."""
    store = get_store(context.user_data)
    stats = get_period_stats(store, days=7)

    if not stats["total_days"] and not stats["workouts_count"]:
        await update.message.reply_text(f"📊 {stats['message']}")
        return

    await update.message.reply_text(
        f"📊 <b>Статистика за неделю</b>\n\n"
        f"🔥 Всего калорий: {stats['total_calories']} ккал\n"
        f"📈 Среднее в день: {stats['avg_calories']} ккал\n"
        f"📉 Мин: {stats['min_cal']} / Макс: {stats['max_cal']} ккал\n"
        f"📅 Дней с записями: {stats['total_days']}\n\n"
        f"🏋️ Тренировок: {stats['workouts_count']} (дней: {stats['workout_days']})\n"
        f"🏃 Сожжено: {stats['calories_burned']} ккал\n"
        f"⏱ Активных минут: {stats['active_minutes']}",
        parse_mode="HTML",
    )


async def sync_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Симулированная синхронизация с браслетом."""
    store = get_store(context.user_data)
    was_connected = store.device.connected
    wait_message = await update.message.reply_text(
        "🔄 Синхронизация..." if was_connected else "📡 Поиск браслета..."
    )
    await asyncio.sleep(1.5 if was_connected else 2.5)

    device = simulate_device_sync(store.device)
    await wait_message.edit_text(
        f"⌚ FusionBand {'синхронизирован' if was_connected else 'подключен'}\n"
        f"👣 Шаги: {device.steps:,}\n"
        f"❤️ Пульс: {device.heart_rate} bpm"
    )


async def profile_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Профиль: параметры, ИМТ, серия и бейджи."""
    store = get_store(context.user_data)
    if not store.has_profile:
        await update.message.reply_text("❌ Сначала заполни профиль: /register")
        return

    profile = store.profile
    bmi = calculate_bmi(profile)
    streak = calculate_streak(store.workouts)

    badges = "\n".join(
        f"{badge.emoji if unlocked else '🔒'} <b>{badge.name}</b>: {badge.description}"
        for badge, unlocked in evaluate_badges(profile, store.workouts)
    )

    history = ""
    if len(profile.weight_history) > 1:
        history = "\n📈 Вес: " + " → ".join(f"{e.weight:g}" for e in profile.weight_history[-6:])

    await update.message.reply_text(
        f"👤 <b>[{get_initials(profile.name)}] {html.escape(profile.name)}</b>\n"
        f"{profile.gender.value} • {profile.age} лет\n\n"
        f"📏 Рост: {profile.height:g} см\n"
        f"⚖️ Вес: {profile.weight:g} кг\n"
        f"🎯 Цель: {html.escape(profile.goal)}\n"
        f"🏃 Активность: {profile.activity_level.value}\n"
        f"🩺 ИМТ: {bmi} ({bmi_category(bmi)})"
        f"{history}\n\n"
        f"🔥 Серия: {streak} дн. | 🏋️ Тренировок: {len(store.workouts)}\n\n"
        f"🏅 <b>Достижения</b>\n{badges}\n\n"
        f"/edit_profile - изменить профиль, /weight - записать вес",
        parse_mode="HTML",
    )


async def usage_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Команда для админа: токены AI за сегодня."""
    if config.ADMIN_ID is None or update.effective_user.id != config.ADMIN_ID:
        await update.message.reply_text("❌ Нет доступа.")
        return

    await update.message.reply_text(format_usage_report(get_daily_stats()))


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("today", today_command))
    application.add_handler(CommandHandler("week", week_command))
    application.add_handler(CommandHandler("sync", sync_command))
    application.add_handler(CommandHandler("profile", profile_command))
    application.add_handler(CommandHandler("usage", usage_command))

"""Обработчики онбординга (заполнение профиля)."""
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    MessageHandler,
    ConversationHandler,
    filters,
    ContextTypes,
)
from fitfusion.models import UserProfile, WeightEntry, Gender, Goal, ActivityLevel, utcnow
from fitfusion.store import get_store
from fitfusion.services.fitness_calc import calculate_daily_targets, calculate_bmi, bmi_category

# Состояния онбординга
NAME, GENDER, AGE, HEIGHT, WEIGHT, GOAL, ACTIVITY = range(7)

# Данные анкеты в context.user_data
FORM_KEY = "onboarding"

GOAL_LABELS = {
    Goal.LOSE_WEIGHT: "Похудеть",
    Goal.BUILD_MUSCLE: "Набрать мышечную массу",
    Goal.MAINTAIN: "Поддерживать форму",
    Goal.ENDURANCE: "Развить выносливость",
}

ACTIVITY_LABELS = {
    ActivityLevel.SEDENTARY: "Сидячий образ жизни",
    ActivityLevel.LIGHT: "Лёгкая (спорт 1-3 раза)",
    ActivityLevel.MODERATE: "Средняя (спорт 3-5 раз)",
    ActivityLevel.VERY: "Высокая (спорт 6-7 раз)",
}


async def register_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Начало онбординга. Повторный проход полностью заменяет профиль."""
    if update.callback_query:
        await update.callback_query.answer()

    context.user_data[FORM_KEY] = {}
    context.user_data["in_conversation"] = True

    store = get_store(context.user_data)
    intro = "✏️ <b>Редактирование профиля</b>" if store.has_profile else "👤 <b>Профиль</b>"

    await update.effective_message.reply_text(
        f"{intro}\n\nШаг 1/7: Как тебя зовут?",
        parse_mode="HTML",
    )
    return NAME


async def name_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка имени."""
    name = update.message.text.strip()
    if not name:
        await update.message.reply_text("❌ Введи имя")
        return NAME

    context.user_data[FORM_KEY]["name"] = name[:64]

    keyboard = InlineKeyboardMarkup(
        [
            [InlineKeyboardButton("Мужской", callback_data=Gender.MALE.value)],
            [InlineKeyboardButton("Женский", callback_data=Gender.FEMALE.value)],
            [InlineKeyboardButton("Другой", callback_data=Gender.OTHER.value)],
        ]
    )
    await update.message.reply_text("✅ Имя сохранено\n\nШаг 2/7: Укажи пол:", reply_markup=keyboard)
    return GENDER


async def gender_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка выбора пола."""
    query = update.callback_query
    await query.answer()

    context.user_data[FORM_KEY]["gender"] = query.data

    await query.edit_message_text(
        "✅ Пол сохранен\n\n" "Шаг 3/7: Сколько тебе лет?\n" "Отправь числом (например: 25)"
    )
    return AGE


async def age_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка ввода возраста."""
    try:
        age = int(update.message.text)
        if not (10 <= age <= 100):
            raise ValueError

        context.user_data[FORM_KEY]["age"] = age

        await update.message.reply_text(
            "✅ Возраст сохранен\n\n"
            "Шаг 4/7: Какой у тебя рост (в см)?\n"
            "Отправь числом (например: 175)"
        )
        return HEIGHT
    except ValueError:
        await update.message.reply_text("❌ Введи корректный возраст (10-100 лет)")
        return AGE


async def height_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка ввода роста."""
    try:
        height = float(update.message.text.replace(",", "."))
        if not (100 <= height <= 250):
            raise ValueError

        context.user_data[FORM_KEY]["height"] = height

        await update.message.reply_text(
            "✅ Рост сохранен\n\n"
            "Шаг 5/7: Какой у тебя текущий вес (в кг)?\n"
            "Отправь числом (например: 70.5)"
        )
        return WEIGHT
    except ValueError:
        await update.message.reply_text("❌ Введи корректный рост (100-250 см)")
        return HEIGHT


async def weight_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка ввода веса."""
    try:
        weight = float(update.message.text.replace(",", "."))
        if not (30 <= weight <= 300):
            raise ValueError

        context.user_data[FORM_KEY]["weight"] = weight

        keyboard = InlineKeyboardMarkup(
            [[InlineKeyboardButton(label, callback_data=goal.value)] for goal, label in GOAL_LABELS.items()]
        )
        await update.message.reply_text(
            "✅ Вес сохранен\n\n" "Шаг 6/7: Какая у тебя цель?", reply_markup=keyboard
        )
        return GOAL
    except ValueError:
        await update.message.reply_text("❌ Введи корректный вес (30-300 кг)")
        return WEIGHT


async def goal_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка выбора цели."""
    query = update.callback_query
    await query.answer()

    context.user_data[FORM_KEY]["goal"] = query.data

    keyboard = InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(label, callback_data=level.value)]
            for level, label in ACTIVITY_LABELS.items()
        ]
    )
    await query.edit_message_text(
        "✅ Цель сохранена\n\n" "Шаг 7/7: Какой у тебя уровень активности?", reply_markup=keyboard
    )
    return ACTIVITY


def build_profile(form: dict, activity: str) -> UserProfile:
    """Собрать профиль из анкеты. История веса начинается с текущего веса."""
    return UserProfile(
        name=form["name"],
        gender=Gender(form["gender"]),
        age=form["age"],
        weight=form["weight"],
        height=form["height"],
        goal=form["goal"],
        activity_level=ActivityLevel(activity),
        weight_history=[WeightEntry(date=utcnow().date(), weight=form["weight"])],
    )


async def activity_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка активности и сохранение профиля."""
    query = update.callback_query
    await query.answer()

    profile = build_profile(context.user_data[FORM_KEY], query.data)
    get_store(context.user_data).set_profile(profile)

    # Очищаем анкету
    context.user_data.pop(FORM_KEY, None)
    context.user_data.pop("in_conversation", None)

    targets = calculate_daily_targets(profile)
    bmi = calculate_bmi(profile)

    await query.edit_message_text(
        f"🎉 <b>Профиль готов, {profile.first_name}!</b>\n\n"
        f"🔥 Дневная цель: {targets['calories']} ккал\n"
        f"👣 Шаги: {targets['steps']:,}\n"
        f"⚖️ ИМТ: {bmi} ({bmi_category(bmi)})\n\n"
        f"Начни тренировку: /workout или /plan",
        parse_mode="HTML",
    )
    return ConversationHandler.END


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Отмена онбординга. Старый профиль (если был) остаётся."""
    await update.message.reply_text("❌ Заполнение профиля отменено.")
    context.user_data.pop(FORM_KEY, None)
    context.user_data.pop("in_conversation", None)
    return ConversationHandler.END


async def weight_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Команда /weight <кг>: записать новый вес."""
    store = get_store(context.user_data)
    if not store.has_profile:
        await update.message.reply_text("❌ Сначала заполни профиль: /register")
        return

    try:
        weight = float((context.args or [""])[0].replace(",", "."))
        if not (30 <= weight <= 300):
            raise ValueError
    except ValueError:
        await update.message.reply_text("⚖️ Укажи вес в кг, например: /weight 72.5")
        return

    start_weight = store.profile.weight_history[0].weight if store.profile.weight_history else weight
    store.log_weight(weight)
    diff = weight - start_weight

    await update.message.reply_text(
        f"✅ Вес записан: {weight:g} кг\n" f"📉 С начала: {diff:+.1f} кг"
    )


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    genders = "|".join(g.value for g in Gender)
    goals = "|".join(g.value for g in Goal)
    levels = "|".join(level.value for level in ActivityLevel)

    conv_handler = ConversationHandler(
        entry_points=[
            CommandHandler(["register", "edit_profile"], register_start),
            CallbackQueryHandler(register_start, pattern=r"^start:register$"),
        ],
        states={
            NAME: [MessageHandler(filters.TEXT & ~filters.COMMAND, name_handler)],
            GENDER: [CallbackQueryHandler(gender_handler, pattern=f"^({genders})$")],
            AGE: [MessageHandler(filters.TEXT & ~filters.COMMAND, age_handler)],
            HEIGHT: [MessageHandler(filters.TEXT & ~filters.COMMAND, height_handler)],
            WEIGHT: [MessageHandler(filters.TEXT & ~filters.COMMAND, weight_handler)],
            GOAL: [CallbackQueryHandler(goal_handler, pattern=f"^({goals})$")],
            ACTIVITY: [CallbackQueryHandler(activity_handler, pattern=f"^({levels})$")],
        },
        fallbacks=[CommandHandler("cancel", cancel)],
    )
    application.add_handler(conv_handler)
    application.add_handler(CommandHandler("weight", weight_command))

"""Клавиатуры для тренировок."""
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from fitfusion.models import WorkoutSession
from fitfusion.services.workout_logger import WorkoutLogger


def get_logging_keyboard(workout: WorkoutLogger) -> InlineKeyboardMarkup:
    """Кнопки активной тренировки: упражнения, таймер, завершение.

    Args:
        workout: текущая тренировка
    """
    keyboard = [
        [
            InlineKeyboardButton(
                f"{'✅' if ex.completed else '⬜'} {ex.name}",
                callback_data=f"wk:toggle:{ex.id}",
            )
        ]
        for ex in workout.exercises
    ]

    if workout.goal:
        keyboard.append(
            [
                InlineKeyboardButton(
                    f"{'🏆' if workout.goal_achieved else '🎯'} Цель достигнута",
                    callback_data="wk:goal",
                )
            ]
        )

    keyboard.append(
        [
            InlineKeyboardButton(
                "⏸ Пауза" if workout.timer_running else "▶️ Продолжить",
                callback_data="wk:timer",
            ),
            InlineKeyboardButton("🔄 Обновить", callback_data="wk:refresh"),
        ]
    )
    keyboard.append(
        [
            InlineKeyboardButton("❌ Отмена", callback_data="wk:cancel"),
            InlineKeyboardButton("🏁 Завершить", callback_data="wk:finish"),
        ]
    )
    return InlineKeyboardMarkup(keyboard)


def get_history_keyboard(session: WorkoutSession) -> InlineKeyboardMarkup:
    """Кнопки под завершённой тренировкой."""
    row = [InlineKeyboardButton("📤 Поделиться", callback_data=f"hist:share:{session.id}")]
    if session.goal:
        label = "↩️ Цель не достигнута" if session.goal_achieved else "🏆 Цель достигнута"
        row.insert(0, InlineKeyboardButton(label, callback_data=f"hist:goal:{session.id}"))
    return InlineKeyboardMarkup([row])

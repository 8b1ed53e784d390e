"""Клавиатуры для работы с едой."""
from telegram import InlineKeyboardButton, InlineKeyboardMarkup


def get_meal_confirm_keyboard(analysis_id: str) -> InlineKeyboardMarkup:
    """Кнопки под результатом анализа фото.

    Args:
        analysis_id: id анализа, к которому привязана карточка
    """
    keyboard = [
        [
            InlineKeyboardButton("✅ Записать", callback_data=f"meal:save:{analysis_id}"),
            InlineKeyboardButton("🔄 Переснять", callback_data=f"meal:retake:{analysis_id}"),
        ]
    ]
    return InlineKeyboardMarkup(keyboard)

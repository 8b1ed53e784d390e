"""Генератор визуальной таблицы съеденного за день."""
import io
import logging
from typing import Optional
from PIL import Image, ImageDraw, ImageFont
from fitfusion.models import MealLog

logger = logging.getLogger(__name__)

FONT_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
FONT_BOLD_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"


def _load_fonts() -> tuple:
    try:
        return (
            ImageFont.truetype(FONT_BOLD_PATH, 15),
            ImageFont.truetype(FONT_PATH, 14),
            ImageFont.truetype(FONT_BOLD_PATH, 16),
        )
    except OSError:
        default = ImageFont.load_default()
        return default, default, default


def generate_meals_table(meals: list[MealLog]) -> Optional[bytes]:
    """
    Генерирует PNG-таблицу с блюдами и итогами КБЖУ.

    Returns:
        байты PNG или None, если список пуст
    """
    if not meals:
        return None

    width = 640
    row_height = 40
    header_height = 35
    footer_height = 45 if len(meals) > 1 else 0
    height = 10 + header_height + len(meals) * row_height + footer_height + 10

    img = Image.new("RGB", (width, height), color="white")
    draw = ImageDraw.Draw(img)
    font_header, font_data, font_cal = _load_fonts()

    # Цвета
    color_text = "#333333"
    color_light = "#f5f5f5"
    color_border = "#84cc16"
    color_cal = "#d32f2f"

    col_widths = [240, 90, 90, 90, 90]  # Блюдо, Ккал, Белки, Углев., Жиры
    col_x = [15]
    for w in col_widths[:-1]:
        col_x.append(col_x[-1] + w)

    # Шапка
    y = 10
    draw.rectangle([(0, y), (width, y + header_height)], fill="#ecfccb")
    headers = ["Meal", "Kcal", "Protein", "Carbs", "Fat"]
    for i, (header, x) in enumerate(zip(headers, col_x)):
        draw.text((x + 5, y + 10), header, font=font_header, fill=color_cal if i == 1 else color_text)
    y += header_height
    draw.line([(0, y), (width, y)], fill=color_border, width=2)

    totals = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0}

    for i, meal in enumerate(meals):
        draw.rectangle([(0, y), (width, y + row_height)], fill="white" if i % 2 == 0 else color_light)
        draw.line([(0, y + row_height), (width, y + row_height)], fill="#e0e0e0", width=1)

        name = meal.name[:24]
        macros = meal.macros
        draw.text((col_x[0] + 5, y + 11), name, font=font_data, fill=color_text)
        draw.text((col_x[1] + 5, y + 9), f"{round(macros.calories)}", font=font_cal, fill=color_cal)
        draw.text((col_x[2] + 5, y + 11), f"{macros.protein:g}g", font=font_data, fill=color_text)
        draw.text((col_x[3] + 5, y + 11), f"{macros.carbs:g}g", font=font_data, fill=color_text)
        draw.text((col_x[4] + 5, y + 11), f"{macros.fat:g}g", font=font_data, fill=color_text)

        totals["calories"] += macros.calories
        totals["protein"] += macros.protein
        totals["carbs"] += macros.carbs
        totals["fat"] += macros.fat
        y += row_height

    # Итоги
    if len(meals) > 1:
        draw.rectangle([(0, y), (width, y + footer_height)], fill="#fff3e0")
        draw.line([(0, y), (width, y)], fill=color_border, width=2)
        draw.text((col_x[0] + 5, y + 14), "TOTAL:", font=font_cal, fill=color_text)
        draw.text((col_x[1] + 5, y + 12), f"{round(totals['calories'])}", font=font_cal, fill=color_cal)
        draw.text((col_x[2] + 5, y + 14), f"{totals['protein']:.1f}g", font=font_data, fill=color_text)
        draw.text((col_x[3] + 5, y + 14), f"{totals['carbs']:.1f}g", font=font_data, fill=color_text)
        draw.text((col_x[4] + 5, y + 14), f"{totals['fat']:.1f}g", font=font_data, fill=color_text)

    draw.rectangle([(0, 0), (width - 1, height - 1)], outline=color_border, width=2)

    img_bytes = io.BytesIO()
    img.save(img_bytes, format="PNG")
    return img_bytes.getvalue()

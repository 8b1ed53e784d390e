"""Сервис Gemini: анализ фото еды, AI-тренер, инсайты и планы тренировок."""
import base64
import json
import logging
from typing import Optional, Sequence, TypedDict
import requests
from fitfusion.config import config
from fitfusion.models import ChatMessage, Role, UserProfile, WorkoutSession, MacroNutrients
from fitfusion.services.fitness_calc import workout_day
from fitfusion.services.usage_service import log_token_usage

logger = logging.getLogger(__name__)

COACHING_EMPTY_REPLY = "Keep pushing! I'm analyzing your request."
COACHING_FALLBACK = (
    "I'm having trouble connecting to the fitness server. "
    "Let's focus on your breathing for a moment."
)
INSIGHT_EMPTY_REPLY = "Stay consistent to see results!"
INSIGHT_FALLBACK = "Great job logging in today. Let's crush some goals!"

FALLBACK_PLAN = {
    "workoutName": "Quick HIIT Blast",
    "strategy": "Fallback routine to keep you moving.",
    "exercises": [
        {"name": "Jumping Jacks", "sets": 3, "reps": 30, "weightSuggestion": 0},
        {"name": "Pushups", "sets": 3, "reps": 10, "weightSuggestion": 0},
        {"name": "Squats", "sets": 3, "reps": 15, "weightSuggestion": 0},
    ],
}

FOOD_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING", "description": "Name of the food item or meal"},
        "calories": {"type": "NUMBER", "description": "Estimated total calories"},
        "protein": {"type": "NUMBER", "description": "Estimated protein in grams"},
        "carbs": {"type": "NUMBER", "description": "Estimated carbohydrates in grams"},
        "fat": {"type": "NUMBER", "description": "Estimated fat in grams"},
        "description": {
            "type": "STRING",
            "description": "Brief nutritional summary regarding healthiness",
        },
    },
    "required": ["name", "calories", "protein", "carbs", "fat", "description"],
}

PLAN_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "workoutName": {"type": "STRING", "description": "A catchy name for the session"},
        "strategy": {
            "type": "STRING",
            "description": "One sentence explaining why this workout was chosen",
        },
        "exercises": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "sets": {"type": "INTEGER"},
                    "reps": {"type": "INTEGER"},
                    "weightSuggestion": {
                        "type": "INTEGER",
                        "description": "Weight in kg, 0 for bodyweight",
                    },
                },
                "required": ["name", "sets", "reps", "weightSuggestion"],
            },
        },
    },
    "required": ["workoutName", "strategy", "exercises"],
}


class AIOperationFailed(Exception):
    """Запрос к AI не удался: сеть, пустой ответ или невалидный JSON."""


class AnalysisError(AIOperationFailed):
    """Не удалось распознать еду на фото."""


class GenerationResult(TypedDict):
    """Результат одного вызова generateContent."""

    success: bool
    text: str
    error: Optional[str]


class FoodAnalysis(TypedDict):
    name: str
    macros: MacroNutrients
    description: str


def generate_content(
    parts: list[dict],
    operation: str,
    system_instruction: Optional[str] = None,
    history: Optional[list[dict]] = None,
    response_schema: Optional[dict] = None,
) -> GenerationResult:
    """
    Один запрос к Gemini generateContent.

    Args:
        parts: части нового сообщения пользователя (text / inlineData)
        operation: название операции для учёта токенов
        system_instruction: системная инструкция
        history: предыдущие реплики в формате Gemini {"role", "parts"}
        response_schema: схема структурированного ответа (JSON)

    Returns:
        GenerationResult: success=False при любой ошибке сети или пустом ответе
    """
    body: dict = {"contents": [*(history or []), {"role": "user", "parts": parts}]}
    if system_instruction:
        body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
    if response_schema:
        body["generationConfig"] = {
            "responseMimeType": "application/json",
            "responseSchema": response_schema,
        }

    try:
        response = requests.post(
            f"{config.GEMINI_BASE_URL}/models/{config.GEMINI_MODEL}:generateContent",
            headers={
                "x-goog-api-key": config.GEMINI_API_KEY,
                "Content-Type": "application/json",
            },
            json=body,
            timeout=config.AI_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Gemini {operation} request error: {e}")
        return {"success": False, "text": "", "error": str(e)}

    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates:
        logger.error(f"Gemini {operation}: no candidates in response")
        return {"success": False, "text": "", "error": "No candidates in response"}

    content_parts = candidates[0].get("content", {}).get("parts", [])
    text = "".join(part.get("text", "") for part in content_parts)

    usage = data.get("usageMetadata", {})
    log_token_usage(
        operation=operation,
        model=config.GEMINI_MODEL,
        input_tokens=usage.get("promptTokenCount", 0),
        output_tokens=usage.get("candidatesTokenCount", 0),
    )

    return {"success": True, "text": text, "error": None}


def parse_json_response(text: str) -> dict:
    """Разобрать JSON из ответа модели.

    Raises:
        ValueError: пустой ответ или невалидный JSON
    """
    # Убираем markdown code blocks если есть
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]

    text = text.strip()
    if not text:
        raise ValueError("Empty response")

    result = json.loads(text)
    if not isinstance(result, dict):
        raise ValueError(f"Expected JSON object, got {type(result).__name__}")
    return result


def _require_number(data: dict, key: str) -> float:
    value = data.get(key)
    # bool является подклассом int, его не принимаем
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{key}' is missing or not a number")
    if value < 0:
        raise ValueError(f"Field '{key}' is negative")
    return value


def _require_int(data: dict, key: str) -> int:
    value = _require_number(data, key)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Field '{key}' is not an integer")
        value = int(value)
    return value


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' is missing or not a string")
    return value


def analyze_food_image(image_bytes: bytes, mime_type: str) -> FoodAnalysis:
    """
    Анализ фото еды: название, КБЖУ и краткое описание.

    Args:
        image_bytes: фото в формате bytes
        mime_type: MIME-тип изображения (image/jpeg, image/png)

    Returns:
        FoodAnalysis с названием, макросами и описанием

    Raises:
        AnalysisError: при любой ошибке, оценка КБЖУ не подставляется
    """
    parts = [
        {
            "inlineData": {
                "mimeType": mime_type,
                "data": base64.b64encode(image_bytes).decode("utf-8"),
            }
        },
        {"text": "Analyze this food image. Estimate the macronutrients and provide a summary."},
    ]

    result = generate_content(
        parts,
        operation="food_analysis",
        system_instruction="You are an expert nutritionist AI. Analyze food images with high accuracy.",
        response_schema=FOOD_SCHEMA,
    )
    if not result["success"]:
        raise AnalysisError(result["error"])

    try:
        data = parse_json_response(result["text"])
        analysis: FoodAnalysis = {
            "name": _require_str(data, "name"),
            "macros": MacroNutrients(
                calories=_require_number(data, "calories"),
                protein=_require_number(data, "protein"),
                carbs=_require_number(data, "carbs"),
                fat=_require_number(data, "fat"),
            ),
            "description": _require_str(data, "description"),
        }
    except ValueError as e:
        logger.error(f"Food analysis parse error: {e}")
        raise AnalysisError(str(e)) from e

    logger.info(f"Food recognized: {analysis['name']} ({analysis['macros'].calories} kcal)")
    return analysis


def _label(value) -> str:
    """Значение enum или строка как есть."""
    return getattr(value, "value", value)


def build_user_context(profile: UserProfile, workouts: Sequence[WorkoutSession]) -> str:
    """Контекст пользователя для AI-тренера: профиль и 5 последних тренировок."""
    recent = "\n".join(
        f"- {w.name} ({workout_day(w).isoformat()}): "
        f"{w.duration_minutes} min, {w.calories_burned} kcal"
        for w in workouts[:5]
    )
    return (
        f"User Name: {profile.name}\n"
        f"Age: {profile.age}\n"
        f"Gender: {_label(profile.gender)}\n"
        f"Height: {profile.height}cm\n"
        f"Weight: {profile.weight}kg\n"
        f"Primary Goal: {profile.goal}\n"
        f"Activity Level: {_label(profile.activity_level)}\n"
        f"Recent Workouts (Last 5):\n"
        f"{recent or 'No recent workouts recorded.'}"
    )


def get_fitness_coaching(history: Sequence[ChatMessage], user_context: str) -> str:
    """
    Ответ AI-тренера Fuse на последнее сообщение пользователя.

    Args:
        history: вся переписка, последнее сообщение должно быть от пользователя
        user_context: контекст из build_user_context

    Returns:
        текст ответа; "" если последнее сообщение не от пользователя;
        COACHING_FALLBACK при ошибке
    """
    if not history or history[-1].role != Role.USER:
        return ""

    system_instruction = f"""You are 'Fuse', an elite personal fitness coach and motivator.

User Profile & Context:
{user_context}

Instructions:
1. Use the user's name, age, goals, and recent workouts to personalize your advice.
2. If recent workouts are missing, gently encourage them to start.
3. If they are active, challenge them to beat their personal bests.
4. Keep responses concise, motivating, and actionable.
5. Use emojis sparingly but effectively to maintain high energy."""

    previous = [
        {"role": Role(msg.role).value, "parts": [{"text": msg.text}]} for msg in history[:-1]
    ]

    result = generate_content(
        [{"text": history[-1].text}],
        operation="coaching",
        system_instruction=system_instruction,
        history=previous,
    )
    if not result["success"]:
        return COACHING_FALLBACK
    return result["text"] or COACHING_EMPTY_REPLY


def generate_dashboard_insight(profile: UserProfile, stats: dict) -> str:
    """
    Одно мотивирующее предложение по итогам дня.

    Args:
        profile: профиль пользователя
        stats: {"caloriesBurned", "caloriesConsumed", "steps"}
    """
    prompt = f"""Analyze this daily snapshot for a user named {profile.name}.
Goal: {profile.goal}.
Stats Today:
- Burned: {stats['caloriesBurned']} kcal
- Consumed: {stats['caloriesConsumed']} kcal
- Steps: {stats['steps']}

Provide a 1-sentence, high-impact specific observation or tip to help them reach their goal today.
Be direct and motivating."""

    result = generate_content([{"text": prompt}], operation="insight")
    if not result["success"]:
        return INSIGHT_FALLBACK
    return result["text"].strip() or INSIGHT_EMPTY_REPLY


def _validate_plan(data: dict) -> dict:
    raw_exercises = data.get("exercises")
    if not isinstance(raw_exercises, list) or not raw_exercises:
        raise ValueError("Field 'exercises' is missing or empty")

    exercises = []
    for item in raw_exercises:
        if not isinstance(item, dict):
            raise ValueError("Exercise entry is not an object")
        exercises.append(
            {
                "name": _require_str(item, "name"),
                "sets": _require_int(item, "sets"),
                "reps": _require_int(item, "reps"),
                "weightSuggestion": _require_int(item, "weightSuggestion"),
            }
        )

    return {
        "workoutName": _require_str(data, "workoutName"),
        "strategy": _require_str(data, "strategy"),
        "exercises": exercises,
    }


def fallback_plan() -> dict:
    """Копия запасного плана (3 упражнения с собственным весом)."""
    return {
        "workoutName": FALLBACK_PLAN["workoutName"],
        "strategy": FALLBACK_PLAN["strategy"],
        "exercises": [dict(ex) for ex in FALLBACK_PLAN["exercises"]],
    }


def generate_workout_plan(profile: UserProfile, recent_workouts: Sequence[WorkoutSession]) -> dict:
    """
    План тренировки под цель и недавнюю историю.

    Args:
        profile: профиль пользователя
        recent_workouts: тренировки, новые первыми (учитываются 3 последние)

    Returns:
        dict {"workoutName", "strategy", "exercises"}; при ошибке копия FALLBACK_PLAN
    """
    history_summary = "; ".join(
        f"{workout_day(w).isoformat()}: {w.name} ({len(w.exercises)} exercises)"
        for w in recent_workouts[:3]
    )
    prompt = f"""Design a workout session for:
Name: {profile.name}, Goal: {profile.goal}, Level: {_label(profile.activity_level)}.
Recent History: {history_summary or "None"}.

Create a balanced workout that fits their goal and doesn't overtrain recently used muscle groups.
If they have no history, suggest a "Full Body Foundation" workout.
Weight suggestions should be estimated in kg based on level (e.g. 0 for bodyweight, reasonable start for beginners)."""

    result = generate_content(
        [{"text": prompt}], operation="workout_plan", response_schema=PLAN_SCHEMA
    )
    if not result["success"]:
        return fallback_plan()

    try:
        plan = _validate_plan(parse_json_response(result["text"]))
    except ValueError as e:
        logger.error(f"Workout plan parse error: {e}")
        return fallback_plan()

    logger.info(f"Workout plan generated: {plan['workoutName']}")
    return plan

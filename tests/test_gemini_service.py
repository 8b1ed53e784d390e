"""Тесты сервиса Gemini (HTTP подменяется через monkeypatch)."""
import json
import pytest
import requests
from fitfusion.models import ActivityLevel, ChatMessage, Gender, Role, UserProfile, generate_id, utcnow
from fitfusion.services import gemini_service
from fitfusion.services.gemini_service import (
    COACHING_EMPTY_REPLY,
    COACHING_FALLBACK,
    FALLBACK_PLAN,
    INSIGHT_FALLBACK,
    AnalysisError,
    analyze_food_image,
    build_user_context,
    generate_dashboard_insight,
    generate_workout_plan,
    get_fitness_coaching,
    parse_json_response,
)
from fitfusion.services.usage_service import clear_usage, get_daily_stats


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.payload


def gemini_reply(text: str) -> dict:
    return {
        "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}],
        "usageMetadata": {"promptTokenCount": 120, "candidatesTokenCount": 30},
    }


@pytest.fixture(autouse=True)
def reset_usage():
    clear_usage()
    yield
    clear_usage()


@pytest.fixture
def calls(monkeypatch):
    """Перехват requests.post: возвращает ответ из calls["response"]."""
    state = {"requests": [], "response": None}

    def fake_post(url, headers=None, json=None, timeout=None):
        state["requests"].append({"url": url, "headers": headers, "json": json})
        response = state["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(gemini_service.requests, "post", fake_post)
    return state


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        name="Alex Smith",
        gender=Gender.MALE,
        age=30,
        weight=80,
        height=180,
        goal="Build Muscle",
        activity_level=ActivityLevel.MODERATE,
    )


def chat(*messages) -> list[ChatMessage]:
    return [ChatMessage(id=generate_id(), role=role, text=text, timestamp=utcnow()) for role, text in messages]


def test_parse_json_response_strips_fences():
    assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_response('```\n{"a": 2}\n```') == {"a": 2}
    with pytest.raises(ValueError):
        parse_json_response("   ")
    with pytest.raises(ValueError):
        parse_json_response("[1, 2]")


def test_analyze_food_image(calls):
    calls["response"] = FakeResponse(
        gemini_reply(
            json.dumps(
                {
                    "name": "Chicken Salad",
                    "calories": 420,
                    "protein": 35.5,
                    "carbs": 12,
                    "fat": 18,
                    "description": "Lean and balanced.",
                }
            )
        )
    )

    result = analyze_food_image(b"\xff\xd8fake", "image/jpeg")

    assert result["name"] == "Chicken Salad"
    assert result["macros"].calories == 420
    assert result["macros"].protein == 35.5

    body = calls["requests"][0]["json"]
    inline = body["contents"][-1]["parts"][0]["inlineData"]
    assert inline["mimeType"] == "image/jpeg"
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert calls["requests"][0]["url"].endswith(":generateContent")

    stats = get_daily_stats()
    assert stats["operations"] == 1
    assert stats["total_tokens"] == 150
    assert stats["by_operation"] == {"food_analysis": 1}


def test_analyze_food_image_transport_error(calls):
    """Ошибка сети: AnalysisError, оценка не подставляется."""
    calls["response"] = requests.ConnectionError("boom")
    with pytest.raises(AnalysisError):
        analyze_food_image(b"img", "image/jpeg")
    # Неудачные запросы в учёт токенов не попадают
    assert get_daily_stats()["operations"] == 0


def test_analyze_food_image_http_error(calls):
    calls["response"] = FakeResponse({}, status_code=500)
    with pytest.raises(AnalysisError):
        analyze_food_image(b"img", "image/jpeg")


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Soup", "calories": 200, "protein": 10, "carbs": 20, "description": "ok"},
        {"name": "Soup", "calories": -5, "protein": 10, "carbs": 20, "fat": 3, "description": "ok"},
        {"name": "Soup", "calories": "lots", "protein": 10, "carbs": 20, "fat": 3, "description": "ok"},
    ],
)
def test_analyze_food_image_invalid_fields(calls, payload):
    """Пропущенное или некорректное поле считается ошибкой анализа."""
    calls["response"] = FakeResponse(gemini_reply(json.dumps(payload)))
    with pytest.raises(AnalysisError):
        analyze_food_image(b"img", "image/jpeg")


def test_analyze_food_image_not_json(calls):
    calls["response"] = FakeResponse(gemini_reply("I think this is pasta"))
    with pytest.raises(AnalysisError):
        analyze_food_image(b"img", "image/jpeg")


def test_analyze_food_image_no_candidates(calls):
    calls["response"] = FakeResponse({"candidates": []})
    with pytest.raises(AnalysisError):
        analyze_food_image(b"img", "image/jpeg")


def test_coaching_skips_when_last_message_from_model(calls, profile):
    history = chat((Role.MODEL, "Hey Alex!"))
    assert get_fitness_coaching(history, build_user_context(profile, [])) == ""
    assert get_fitness_coaching([], "") == ""
    assert calls["requests"] == []


def test_coaching_sends_history(calls, profile):
    calls["response"] = FakeResponse(gemini_reply("Do 3 sets of squats today!"))
    history = chat((Role.MODEL, "Hey Alex!"), (Role.USER, "What should I train?"))

    reply = get_fitness_coaching(history, build_user_context(profile, []))

    assert reply == "Do 3 sets of squats today!"
    body = calls["requests"][0]["json"]
    assert [c["role"] for c in body["contents"]] == ["model", "user"]
    assert body["contents"][-1]["parts"] == [{"text": "What should I train?"}]
    instruction = body["systemInstruction"]["parts"][0]["text"]
    assert "Alex Smith" in instruction
    assert "No recent workouts recorded." in instruction
    assert "Gender: Male" in instruction


def test_coaching_fallbacks(calls):
    history = chat((Role.USER, "Hi"))

    calls["response"] = requests.Timeout("slow")
    assert get_fitness_coaching(history, "ctx") == COACHING_FALLBACK

    calls["response"] = FakeResponse(gemini_reply(""))
    assert get_fitness_coaching(history, "ctx") == COACHING_EMPTY_REPLY


def test_dashboard_insight(calls, profile):
    stats = {"caloriesBurned": 300, "caloriesConsumed": 1800, "steps": 2450}

    calls["response"] = FakeResponse(gemini_reply("  Add a 20 minute walk tonight.\n"))
    assert generate_dashboard_insight(profile, stats) == "Add a 20 minute walk tonight."

    calls["response"] = requests.ConnectionError("down")
    assert generate_dashboard_insight(profile, stats) == INSIGHT_FALLBACK


def test_workout_plan(calls, profile):
    plan = {
        "workoutName": "Upper Body Power",
        "strategy": "Legs were trained yesterday.",
        "exercises": [
            {"name": "Bench Press", "sets": 4, "reps": 8, "weightSuggestion": 60},
            {"name": "Rows", "sets": 3.0, "reps": 10, "weightSuggestion": 40},
        ],
    }
    calls["response"] = FakeResponse(gemini_reply(json.dumps(plan)))

    result = generate_workout_plan(profile, [])

    assert result["workoutName"] == "Upper Body Power"
    assert result["exercises"][1]["sets"] == 3
    assert isinstance(result["exercises"][1]["sets"], int)
    prompt = calls["requests"][0]["json"]["contents"][-1]["parts"][0]["text"]
    assert "Recent History: None" in prompt


def test_workout_plan_fallback_on_error(calls, profile):
    """Любая ошибка даёт запасной план целиком."""
    calls["response"] = requests.ConnectionError("down")
    assert generate_workout_plan(profile, []) == FALLBACK_PLAN

    calls["response"] = FakeResponse(gemini_reply('{"workoutName": "X", "strategy": "Y", "exercises": []}'))
    assert generate_workout_plan(profile, []) == FALLBACK_PLAN

    calls["response"] = FakeResponse(
        gemini_reply('{"workoutName": "X", "strategy": "Y", "exercises": [{"name": "Squat", "sets": 3}]}')
    )
    assert generate_workout_plan(profile, []) == FALLBACK_PLAN


def test_fallback_plan_is_a_copy(calls, profile):
    calls["response"] = requests.ConnectionError("down")
    plan = generate_workout_plan(profile, [])
    plan["exercises"].append({"name": "Burpees"})
    assert len(FALLBACK_PLAN["exercises"]) == 3

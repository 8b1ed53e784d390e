"""Тесты хранилища сессии."""
from dataclasses import replace
from datetime import date, timedelta
import pytest
from fitfusion.models import (
    ActivityLevel,
    Gender,
    Role,
    UserProfile,
    WeightEntry,
    WorkoutSession,
    generate_id,
    utcnow,
)
from fitfusion.store import SessionStore, get_store


def make_profile() -> UserProfile:
    return UserProfile(
        name="Alex",
        gender=Gender.MALE,
        age=30,
        weight=80,
        height=180,
        goal="Maintain",
        activity_level=ActivityLevel.MODERATE,
        weight_history=[WeightEntry(date(2026, 1, 1), 80)],
    )


def make_workout(name: str) -> WorkoutSession:
    return WorkoutSession(id=generate_id(), date=utcnow(), name=name, goal="Squat 100kg")


def test_get_store_is_created_once():
    user_data = {}
    store = get_store(user_data)
    assert isinstance(store, SessionStore)
    assert get_store(user_data) is store
    assert not store.has_profile


def test_add_workout_newest_first():
    store = SessionStore()
    first, second = make_workout("A"), make_workout("B")
    store.add_workout(first)
    store.add_workout(second)
    assert [w.name for w in store.workouts] == ["B", "A"]


def test_update_workout_keeps_order():
    """Обновление по id заменяет запись на месте."""
    store = SessionStore()
    for name in ("A", "B", "C"):
        store.add_workout(make_workout(name))

    target = store.workouts[1]
    assert store.update_workout(replace(target, name="B2")) is True
    assert [w.name for w in store.workouts] == ["C", "B2", "A"]


def test_update_missing_workout_is_noop():
    store = SessionStore()
    store.add_workout(make_workout("A"))
    before = list(store.workouts)

    assert store.update_workout(make_workout("Ghost")) is False
    assert store.workouts == before


def test_toggle_goal_achieved():
    store = SessionStore()
    workout = make_workout("A")
    store.add_workout(workout)

    assert store.toggle_goal_achieved(workout.id).goal_achieved is True
    assert store.get_workout(workout.id).goal_achieved is True
    assert store.toggle_goal_achieved(workout.id).goal_achieved is False
    assert store.toggle_goal_achieved("missing") is None


def test_log_weight_appends_history():
    store = SessionStore()
    store.set_profile(make_profile())

    day = date(2026, 1, 1) + timedelta(days=30)
    profile = store.log_weight(77.5, day)

    assert profile.weight == 77.5
    assert profile.weight_history[-1] == WeightEntry(day, 77.5)
    assert len(profile.weight_history) == 2
    assert store.profile is profile


def test_log_weight_errors():
    store = SessionStore()
    with pytest.raises(ValueError):
        store.log_weight(70)

    store.set_profile(make_profile())
    with pytest.raises(ValueError):
        store.log_weight(0)


def test_chat_messages():
    store = SessionStore()
    store.add_chat_message(Role.MODEL, "Hi!")
    message = store.add_chat_message(Role.USER, "Plan for today?")

    assert [m.role for m in store.chat] == [Role.MODEL, Role.USER]
    assert store.chat[-1] is message

    store.reset_chat()
    assert store.chat == []

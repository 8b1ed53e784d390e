"""Тесты логирования тренировки."""
from datetime import datetime, timezone
import pytest
from fitfusion.services.gemini_service import fallback_plan
from fitfusion.services.workout_logger import (
    WorkoutLogger,
    WorkoutState,
    WorkoutStateError,
    format_share_text,
)


def test_start_and_tick():
    workout = WorkoutLogger()
    # В режиме Idle таймер не идёт
    assert workout.tick() == 0

    workout.start()
    assert workout.state == WorkoutState.LOGGING
    assert workout.is_ticking
    for _ in range(3):
        workout.tick()
    assert workout.elapsed_seconds == 3


def test_pause_stops_timer():
    workout = WorkoutLogger()
    workout.start()
    workout.tick()

    workout.pause()
    workout.tick()
    workout.tick()
    assert workout.elapsed_seconds == 1

    assert workout.toggle_timer() is True
    workout.tick()
    assert workout.elapsed_seconds == 2


def test_actions_require_logging():
    workout = WorkoutLogger()
    with pytest.raises(WorkoutStateError):
        workout.add_exercise("Squat", 3, 10)
    with pytest.raises(WorkoutStateError):
        workout.set_name("Leg Day")


def test_add_exercise_validation():
    workout = WorkoutLogger()
    workout.start()

    with pytest.raises(ValueError):
        workout.add_exercise("  ", 3, 10)
    with pytest.raises(ValueError):
        workout.add_exercise("Squat", -1, 10)

    exercise = workout.add_exercise("Plank", 3, 0)
    assert exercise.weight == 0
    assert workout.exercises == [exercise]


def test_toggle_exercise():
    workout = WorkoutLogger()
    workout.start()
    exercise = workout.add_exercise("Squat", 3, 10, 60)

    assert workout.toggle_exercise(exercise.id).completed is True
    assert workout.toggle_exercise(exercise.id).completed is False
    assert workout.toggle_exercise("missing") is None


def test_finish_requires_name_and_exercises():
    workout = WorkoutLogger()
    workout.start()
    with pytest.raises(WorkoutStateError):
        workout.finish()

    workout.add_exercise("Squat", 3, 10, 60)
    # Без названия завершить нельзя
    assert not workout.can_finish()
    with pytest.raises(WorkoutStateError):
        workout.finish()

    # Ошибка не сбрасывает тренировку
    assert workout.is_logging
    assert len(workout.exercises) == 1


def test_finish_builds_session():
    """125 секунд и 2 упражнения: 3 минуты, 55 ккал."""
    workout = WorkoutLogger()
    workout.start()
    workout.set_name("Leg Day")
    workout.set_goal("Squat 100kg")
    workout.toggle_goal_achieved()
    workout.add_exercise("Squat", 5, 5, 100)
    workout.add_exercise("Lunges", 3, 12)
    for _ in range(125):
        workout.tick()

    now = datetime(2026, 3, 10, 18, tzinfo=timezone.utc)
    session = workout.finish(now)

    assert session.name == "Leg Day"
    assert session.date == now
    assert session.duration_minutes == 3
    assert session.calories_burned == 55
    assert session.goal == "Squat 100kg"
    assert session.goal_achieved is True
    assert [ex.name for ex in session.exercises] == ["Squat", "Lunges"]

    # После завершения логгер снова пустой
    assert workout.state == WorkoutState.IDLE
    assert workout.exercises == []
    assert workout.elapsed_seconds == 0


def test_cancel_discards_workout():
    workout = WorkoutLogger()
    workout.start()
    workout.add_exercise("Squat", 3, 10)
    workout.tick()

    workout.cancel()
    assert workout.state == WorkoutState.IDLE
    assert workout.exercises == []
    assert workout.elapsed_seconds == 0


def test_start_from_plan():
    workout = WorkoutLogger()
    workout.start_from_plan(fallback_plan())

    assert workout.is_logging
    assert workout.name == "Quick HIIT Blast"
    assert workout.strategy == "Fallback routine to keep you moving."
    assert [(ex.name, ex.sets, ex.reps, ex.weight) for ex in workout.exercises] == [
        ("Jumping Jacks", 3, 30, 0),
        ("Pushups", 3, 10, 0),
        ("Squats", 3, 15, 0),
    ]
    assert len({ex.id for ex in workout.exercises}) == 3
    assert workout.can_finish()


def test_share_text():
    workout = WorkoutLogger()
    workout.start()
    workout.set_name("Push Day")
    workout.add_exercise("Bench", 3, 8, 70)
    session = workout.finish()

    text = format_share_text(session)
    assert "Push Day" in text
    assert "#FitnessFusion" in text
    assert "Goal" not in text

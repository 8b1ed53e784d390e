"""Достижения (бейджи) пользователя."""
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence
from fitfusion.models import UserProfile, WorkoutSession
from fitfusion.services.fitness_calc import calculate_streak, session_volume


@dataclass(frozen=True)
class Badge:
    """Бейдж с условием получения."""

    id: str
    name: str
    description: str
    emoji: str
    condition: Callable[[UserProfile, Sequence[WorkoutSession], date], bool]


def _weight_lost(profile: UserProfile) -> float:
    if not profile.weight_history:
        return 0.0
    # Первая запись истории самая старая
    return profile.weight_history[0].weight - profile.weight


BADGES: tuple[Badge, ...] = (
    Badge(
        id="first_step",
        name="First Step",
        description="Log your first workout",
        emoji="⚡",
        condition=lambda p, w, today: len(w) >= 1,
    ),
    Badge(
        id="consistency_3",
        name="On Fire",
        description="3-day workout streak",
        emoji="🔥",
        condition=lambda p, w, today: calculate_streak(w, today) >= 3,
    ),
    Badge(
        id="transformation_10",
        name="New You",
        description="Lost 10kg of weight",
        emoji="🏃",
        condition=lambda p, w, today: bool(p.weight_history) and _weight_lost(p) >= 10,
    ),
    Badge(
        id="streak_30",
        name="Unstoppable",
        description="30-day workout streak",
        emoji="👑",
        condition=lambda p, w, today: calculate_streak(w, today) >= 30,
    ),
    Badge(
        id="club_10",
        name="Club 10",
        description="Complete 10 workouts",
        emoji="🏋️",
        condition=lambda p, w, today: len(w) >= 10,
    ),
    Badge(
        id="volume_master",
        name="Heavy Lifter",
        description="Lift 5000kg+ in one session",
        emoji="🏆",
        condition=lambda p, w, today: any(session_volume(s) >= 5000 for s in w),
    ),
)


def evaluate_badges(
    profile: UserProfile, workouts: Sequence[WorkoutSession], today: Optional[date] = None
) -> list[tuple[Badge, bool]]:
    """Проверить все бейджи заново.

    Состояние разблокировки нигде не хранится, условия считаются
    при каждом вызове.

    Returns:
        список пар (бейдж, получен ли) в порядке каталога
    """
    return [(badge, badge.condition(profile, workouts, today)) for badge in BADGES]


def unlocked_badges(
    profile: UserProfile, workouts: Sequence[WorkoutSession], today: Optional[date] = None
) -> list[Badge]:
    """Только полученные бейджи."""
    return [badge for badge, unlocked in evaluate_badges(profile, workouts, today) if unlocked]

"""
Achievement table and unlock detection.

Each achievement compares one UserStats field against a threshold. After
a finished session the stats are rebuilt from storage and any achievement
newly satisfied is unlocked once.
"""

import logging
from typing import Literal

from pydantic import BaseModel

from models import UserStats
from storage import AchievementRepository, GameSessionRepository, UserRepository

logger = logging.getLogger(__name__)

Category = Literal["progression", "streak", "score", "special"]

CATEGORY_NAMES: dict[str, str] = {
    "progression": "Progression",
    "streak": "Séries",
    "score": "Performance",
    "special": "Spécial",
}


class Achievement(BaseModel):
    id: str
    name: str
    description: str
    category: Category
    stat: str  # UserStats field compared against threshold
    threshold: int
    xp_reward: int

    def is_satisfied(self, stats: UserStats) -> bool:
        return getattr(stats, self.stat) >= self.threshold


def _achievement(id, name, description, category, stat, threshold, xp_reward):
    return Achievement(
        id=id,
        name=name,
        description=description,
        category=category,
        stat=stat,
        threshold=threshold,
        xp_reward=xp_reward,
    )


ACHIEVEMENTS: list[Achievement] = [
    # Exercises
    _achievement("first_steps", "Premiers Pas", "Complétez votre premier exercice",
                 "progression", "total_exercises", 1, 50),
    _achievement("getting_started", "En Route", "Complétez 10 exercices",
                 "progression", "total_exercises", 10, 100),
    _achievement("dedicated_learner", "Apprenti Dévoué", "Complétez 50 exercices",
                 "progression", "total_exercises", 50, 250),
    _achievement("math_warrior", "Guerrier des Maths", "Complétez 100 exercices",
                 "progression", "total_exercises", 100, 500),
    _achievement("math_master", "Maître des Maths", "Complétez 500 exercices",
                 "progression", "total_exercises", 500, 1000),
    # Levels
    _achievement("level_5", "Niveau 5", "Atteignez le niveau 5",
                 "progression", "level", 5, 150),
    _achievement("level_10", "Double Digits", "Atteignez le niveau 10",
                 "progression", "level", 10, 300),
    _achievement("level_25", "Expert Confirmé", "Atteignez le niveau 25",
                 "progression", "level", 25, 750),
    _achievement("level_50", "Légende Vivante", "Atteignez le niveau 50",
                 "progression", "level", 50, 1500),
    # Streaks
    _achievement("streak_3", "Régulier", "Maintenez une série de 3 jours",
                 "streak", "max_streak", 3, 100),
    _achievement("streak_7", "Semaine Parfaite", "Maintenez une série de 7 jours",
                 "streak", "max_streak", 7, 250),
    _achievement("streak_14", "Deux Semaines", "Maintenez une série de 14 jours",
                 "streak", "max_streak", 14, 500),
    _achievement("streak_30", "Mois Complet", "Maintenez une série de 30 jours",
                 "streak", "max_streak", 30, 1000),
    # Perfect sessions
    _achievement("perfect_1", "Sans Faute", "Obtenez un score parfait",
                 "score", "perfect_scores", 1, 75),
    _achievement("perfect_10", "Perfectionniste", "Obtenez 10 scores parfaits",
                 "score", "perfect_scores", 10, 300),
    _achievement("perfect_50", "Excellence", "Obtenez 50 scores parfaits",
                 "score", "perfect_scores", 50, 750),
    # XP milestones
    _achievement("xp_1000", "Premier Millier", "Accumulez 1 000 XP",
                 "progression", "total_xp", 1000, 100),
    _achievement("xp_5000", "Cinq Mille", "Accumulez 5 000 XP",
                 "progression", "total_xp", 5000, 250),
    _achievement("xp_10000", "Dix Mille", "Accumulez 10 000 XP",
                 "progression", "total_xp", 10000, 500),
    # Games played
    _achievement("games_10", "Joueur", "Jouez 10 parties",
                 "special", "total_games", 10, 100),
    _achievement("games_50", "Gamer", "Jouez 50 parties",
                 "special", "total_games", 50, 300),
    _achievement("games_100", "Pro Gamer", "Jouez 100 parties",
                 "special", "total_games", 100, 500),
    # Time played, in minutes
    _achievement("time_60", "Une Heure", "Jouez pendant 1 heure au total",
                 "special", "total_play_time", 60, 150),
    _achievement("time_300", "Cinq Heures", "Jouez pendant 5 heures au total",
                 "special", "total_play_time", 300, 400),
    _achievement("time_600", "Dix Heures", "Jouez pendant 10 heures au total",
                 "special", "total_play_time", 600, 750),
]

_ACHIEVEMENTS_BY_ID = {a.id: a for a in ACHIEVEMENTS}


def get_achievement(achievement_id: str) -> Achievement | None:
    return _ACHIEVEMENTS_BY_ID.get(achievement_id)


def get_category_name(category: str) -> str:
    return CATEGORY_NAMES[category]


def check_new_achievements(
    stats: UserStats, unlocked_ids: list[str]
) -> list[Achievement]:
    """Achievements satisfied by ``stats`` that are not in ``unlocked_ids``."""
    unlocked = set(unlocked_ids)
    return [
        a for a in ACHIEVEMENTS
        if a.id not in unlocked and a.is_satisfied(stats)
    ]


def build_user_stats(
    user_id: int,
    user_repo: UserRepository,
    session_repo: GameSessionRepository,
) -> UserStats:
    """Aggregate a user's stored progress into UserStats."""
    user = user_repo.get_by_id(user_id)
    if user is None:
        raise ValueError(f"User {user_id} does not exist")

    return UserStats(
        total_xp=user.xp,
        level=user.level,
        streak=user.streak,
        max_streak=user.streak,
        total_exercises=session_repo.total_correct_answers(user_id),
        perfect_scores=session_repo.count_perfect_sessions(user_id),
        total_games=session_repo.count_sessions(user_id),
        total_play_time=session_repo.total_duration_seconds(user_id) // 60,
    )


def unlock_new_achievements(
    user_id: int,
    user_repo: UserRepository,
    session_repo: GameSessionRepository,
    achievement_repo: AchievementRepository,
) -> list[Achievement]:
    """Unlock every newly satisfied achievement and return them."""
    stats = build_user_stats(user_id, user_repo, session_repo)
    new = check_new_achievements(stats, achievement_repo.get_unlocked(user_id))

    unlocked = []
    for achievement in new:
        if achievement_repo.unlock(user_id, achievement.id):
            logger.info("User %s unlocked achievement %s", user_id, achievement.id)
            unlocked.append(achievement)
    return unlocked

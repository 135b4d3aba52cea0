"""Storage layer for the BTS SIO math trainer.

Provides repository interfaces and SQLite implementations for persisting
users, game sessions, high scores and unlocked achievements.
"""

from pathlib import Path

from .base import (
    UserRepository,
    GameSessionRepository,
    HighScoreRepository,
    AchievementRepository,
)
from .sqlite import (
    SQLiteUserRepository,
    SQLiteGameSessionRepository,
    SQLiteHighScoreRepository,
    SQLiteAchievementRepository,
)
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    # Abstract interfaces
    "UserRepository",
    "GameSessionRepository",
    "HighScoreRepository",
    "AchievementRepository",
    # SQLite implementations
    "SQLiteUserRepository",
    "SQLiteGameSessionRepository",
    "SQLiteHighScoreRepository",
    "SQLiteAchievementRepository",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_user_repo",
    "get_game_session_repo",
    "get_high_score_repo",
    "get_achievement_repo",
]


def get_user_repo(db_path: Path = DEFAULT_DB_PATH) -> UserRepository:
    """Get a UserRepository instance."""
    return SQLiteUserRepository(db_path)


def get_game_session_repo(db_path: Path = DEFAULT_DB_PATH) -> GameSessionRepository:
    """Get a GameSessionRepository instance."""
    return SQLiteGameSessionRepository(db_path)


def get_high_score_repo(db_path: Path = DEFAULT_DB_PATH) -> HighScoreRepository:
    return SQLiteHighScoreRepository(db_path)


def get_achievement_repo(db_path: Path = DEFAULT_DB_PATH) -> AchievementRepository:
    return SQLiteAchievementRepository(db_path)

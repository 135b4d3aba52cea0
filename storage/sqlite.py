"""SQLite implementations of repository interfaces."""

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path

from .base import (
    AchievementRepository,
    GameSessionRepository,
    HighScoreRepository,
    UserRepository,
)
from .connection import get_connection, DEFAULT_DB_PATH
from models import HighScore, SessionSummary, User
from progression import level_for_xp, next_streak

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "btsmath_user_id"


def _now() -> str:
    return datetime.now().isoformat()


class SQLiteUserRepository(UserRepository):
    """SQLite implementation of UserRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_by_id(self, user_id: int) -> User | None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cursor.fetchone()
            return self._row_to_model(row) if row else None
        finally:
            conn.close()

    def get_by_username(self, username: str) -> User | None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM users WHERE username = ?", (username,)
            )
            row = cursor.fetchone()
            return self._row_to_model(row) if row else None
        finally:
            conn.close()

    def create(self, username: str) -> User:
        conn = get_connection(self.db_path)
        try:
            try:
                cursor = conn.execute(
                    """INSERT INTO users (username, xp, level, streak, created_at)
                    VALUES (?, 0, 1, 0, ?)""",
                    (username, _now()),
                )
            except sqlite3.IntegrityError:
                raise ValueError(f"Username {username!r} is already taken") from None
            conn.commit()
            user_id = cursor.lastrowid
        finally:
            conn.close()

        logger.info("Created user %s (id=%s)", username, user_id)
        return self.get_by_id(user_id)

    def get_current_user(self) -> User | None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT value FROM app_settings WHERE key = ?", (CURRENT_USER_KEY,)
            )
            row = cursor.fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        return self.get_by_id(int(row["value"]))

    def set_current_user(self, user_id: int | None) -> None:
        conn = get_connection(self.db_path)
        try:
            if user_id is None:
                conn.execute(
                    "DELETE FROM app_settings WHERE key = ?", (CURRENT_USER_KEY,)
                )
            else:
                conn.execute(
                    "INSERT OR REPLACE INTO app_settings (key, value) VALUES (?, ?)",
                    (CURRENT_USER_KEY, str(user_id)),
                )
            conn.commit()
        finally:
            conn.close()

    def add_xp(self, user_id: int, xp: int) -> User | None:
        user = self.get_by_id(user_id)
        if user is None:
            logger.error("Cannot add XP: user %s not found", user_id)
            return None

        if xp <= 0:
            logger.debug("No XP to add for user %s (xp=%s)", user_id, xp)
            return user

        new_xp = user.xp + xp
        new_level = level_for_xp(new_xp)
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "UPDATE users SET xp = ?, level = ? WHERE id = ?",
                (new_xp, new_level, user_id),
            )
            conn.commit()
        finally:
            conn.close()

        logger.info(
            "XP updated for user %s: %s -> %s (+%s), level %s",
            user_id, user.xp, new_xp, xp, new_level,
        )
        return user.model_copy(update={"xp": new_xp, "level": new_level})

    def update_streak(self, user_id: int, today: date) -> User | None:
        user = self.get_by_id(user_id)
        if user is None:
            return None

        last = user.last_activity.date() if user.last_activity else None
        streak = next_streak(user.streak, last, today)
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "UPDATE users SET streak = ?, last_activity = ? WHERE id = ?",
                (streak, today.isoformat(), user_id),
            )
            conn.commit()
        finally:
            conn.close()
        return self.get_by_id(user_id)

    def get_leaderboard(self, limit: int = 50) -> list[User]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT * FROM users ORDER BY xp DESC, id ASC LIMIT ?", (limit,)
            )
            return [self._row_to_model(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def _row_to_model(self, row) -> User:
        """Convert a database row to a User model."""
        return User(
            id=row["id"],
            username=row["username"],
            xp=row["xp"],
            level=row["level"],
            streak=row["streak"],
            last_activity=datetime.fromisoformat(row["last_activity"])
            if row["last_activity"]
            else None,
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteGameSessionRepository(GameSessionRepository):
    """SQLite implementation of GameSessionRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def create_session(self, user_id: int, mode: str) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "INSERT INTO game_sessions (user_id, mode, started_at) VALUES (?, ?, ?)",
                (user_id, mode, _now()),
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    def complete_session(self, session_id: int, summary: SessionSummary) -> None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """UPDATE game_sessions SET
                    score = ?, total_questions = ?, correct_answers = ?, errors = ?,
                    max_combo = ?, xp_earned = ?, duration_seconds = ?, ended_at = ?
                WHERE id = ?""",
                (
                    summary.score,
                    summary.total_questions,
                    summary.correct_answers,
                    summary.errors,
                    summary.max_combo,
                    summary.xp_earned,
                    summary.duration_seconds,
                    _now(),
                    session_id,
                ),
            )
            if cursor.rowcount == 0:
                raise ValueError(f"Game session {session_id} does not exist")
            conn.commit()
        finally:
            conn.close()

    def count_sessions(self, user_id: int) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT COUNT(*) FROM game_sessions WHERE user_id = ?", (user_id,)
            )
            return cursor.fetchone()[0]
        finally:
            conn.close()

    def total_duration_seconds(self, user_id: int) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT COALESCE(SUM(duration_seconds), 0)
                FROM game_sessions WHERE user_id = ?""",
                (user_id,),
            )
            return cursor.fetchone()[0]
        finally:
            conn.close()

    def total_correct_answers(self, user_id: int) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT COALESCE(SUM(correct_answers), 0)
                FROM game_sessions WHERE user_id = ?""",
                (user_id,),
            )
            return cursor.fetchone()[0]
        finally:
            conn.close()

    def count_perfect_sessions(self, user_id: int) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT COUNT(*) FROM game_sessions
                WHERE user_id = ? AND ended_at IS NOT NULL
                AND total_questions > 0 AND errors = 0
                AND correct_answers = total_questions""",
                (user_id,),
            )
            return cursor.fetchone()[0]
        finally:
            conn.close()


class SQLiteHighScoreRepository(HighScoreRepository):
    """SQLite implementation of HighScoreRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def save_high_score(self, user_id: int, mode: str, score: int) -> bool:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT MAX(score) FROM high_scores WHERE user_id = ? AND mode = ?",
                (user_id, mode),
            )
            best = cursor.fetchone()[0]
            if best is not None and score <= best:
                return False

            conn.execute(
                """INSERT INTO high_scores (user_id, mode, score, achieved_at)
                VALUES (?, ?, ?, ?)""",
                (user_id, mode, score, _now()),
            )
            conn.commit()
            return True
        finally:
            conn.close()

    def get_high_scores(self, user_id: int, limit: int = 10) -> list[HighScore]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT mode, score, achieved_at FROM high_scores
                WHERE user_id = ? ORDER BY score DESC LIMIT ?""",
                (user_id, limit),
            )
            return [
                HighScore(
                    mode=row["mode"],
                    score=row["score"],
                    achieved_at=datetime.fromisoformat(row["achieved_at"]),
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()


class SQLiteAchievementRepository(AchievementRepository):
    """SQLite implementation of AchievementRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_unlocked(self, user_id: int) -> list[str]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """SELECT achievement_id FROM user_achievements
                WHERE user_id = ? ORDER BY unlocked_at""",
                (user_id,),
            )
            return [row["achievement_id"] for row in cursor.fetchall()]
        finally:
            conn.close()

    def unlock(self, user_id: int, achievement_id: str) -> bool:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO user_achievements
                (user_id, achievement_id, unlocked_at) VALUES (?, ?, ?)""",
                (user_id, achievement_id, _now()),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

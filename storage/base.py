"""Abstract repository interfaces for the storage layer."""

from abc import ABC, abstractmethod
from datetime import date

from models import HighScore, SessionSummary, User


class UserRepository(ABC):
    """Abstract interface for user records and the signed-in identity."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None:
        """Load a user by ID.

        Args:
            user_id: The user ID.

        Returns:
            The user, or None if not found.
        """
        pass

    @abstractmethod
    def get_by_username(self, username: str) -> User | None:
        pass

    @abstractmethod
    def create(self, username: str) -> User:
        """Create a user with zero XP at level 1.

        Raises:
            ValueError: If the username is already taken.
        """
        pass

    @abstractmethod
    def get_current_user(self) -> User | None:
        """Return the signed-in user, or None if nobody is signed in."""
        pass

    @abstractmethod
    def set_current_user(self, user_id: int | None) -> None:
        """Sign a user in, or sign out with None."""
        pass

    @abstractmethod
    def add_xp(self, user_id: int, xp: int) -> User | None:
        """Add XP and recompute the level as xp // 100 + 1.

        Non-positive XP leaves the user unchanged.

        Returns:
            The updated user, or None if the user does not exist.
        """
        pass

    @abstractmethod
    def update_streak(self, user_id: int, today: date) -> User | None:
        """Advance the daily streak and stamp today's activity."""
        pass

    @abstractmethod
    def get_leaderboard(self, limit: int = 50) -> list[User]:
        """Users ordered by XP, highest first."""
        pass


class GameSessionRepository(ABC):
    """Abstract interface for game session records."""

    @abstractmethod
    def create_session(self, user_id: int, mode: str) -> int:
        """Open a session row and return its ID."""
        pass

    @abstractmethod
    def complete_session(self, session_id: int, summary: SessionSummary) -> None:
        """Record final results for a session.

        Raises:
            ValueError: If the session does not exist.
        """
        pass

    @abstractmethod
    def count_sessions(self, user_id: int) -> int:
        pass

    @abstractmethod
    def total_duration_seconds(self, user_id: int) -> int:
        pass

    @abstractmethod
    def total_correct_answers(self, user_id: int) -> int:
        """Exercises answered correctly across all finished sessions."""
        pass

    @abstractmethod
    def count_perfect_sessions(self, user_id: int) -> int:
        """Finished sessions with at least one question and no errors."""
        pass


class HighScoreRepository(ABC):
    """Abstract interface for per-mode high scores."""

    @abstractmethod
    def save_high_score(self, user_id: int, mode: str, score: int) -> bool:
        """Record the score if it beats the user's best for the mode.

        Returns:
            True if a new high score was stored.
        """
        pass

    @abstractmethod
    def get_high_scores(self, user_id: int, limit: int = 10) -> list[HighScore]:
        pass


class AchievementRepository(ABC):
    """Abstract interface for unlocked achievements."""

    @abstractmethod
    def get_unlocked(self, user_id: int) -> list[str]:
        pass

    @abstractmethod
    def unlock(self, user_id: int, achievement_id: str) -> bool:
        """Unlock an achievement once.

        Returns:
            True if it was newly unlocked, False if already held.
        """
        pass

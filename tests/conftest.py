"""Shared pytest fixtures for the BTS SIO math trainer test suite."""

import pytest
from datetime import date

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import (
    Exercise,
    ExerciseType,
    MatrixOperationPayload,
    PgcdPayload,
    Subject,
    User,
)
from storage import (
    SQLiteAchievementRepository,
    SQLiteGameSessionRepository,
    SQLiteHighScoreRepository,
    SQLiteUserRepository,
    init_schema,
)


class ScriptedRandom:
    """Random source returning a fixed sequence of integers.

    Each draw must fall inside the requested range, so a test that scripts
    the wrong number of draws fails loudly instead of drifting.
    """

    def __init__(self, values: list[int]):
        self.values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self.values:
            raise AssertionError(f"No scripted value left for randint({a}, {b})")
        value = self.values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"Scripted value {value} outside [{a}, {b}]")
        return value


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_exercise(exercise_type, data, difficulty: int = 1, subject=Subject.MATRICES) -> Exercise:
    return Exercise(
        id=f"test_{exercise_type.value}",
        type=exercise_type,
        subject=subject,
        chapter="Test",
        title="Test",
        difficulty=difficulty,
        xp_reward=difficulty * 10,
        data=data,
    )


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(100.0)


@pytest.fixture
def matrix_exercise() -> Exercise:
    """Matrix addition exercise whose answer is [[1,2],[3,4]]."""
    return make_exercise(
        ExerciseType.MATRIX_ADDITION,
        MatrixOperationPayload(
            matrix_a=[[1, 1], [1, 1]],
            matrix_b=[[0, 1], [2, 3]],
            expected_result=[[1, 2], [3, 4]],
        ),
    )


@pytest.fixture
def pgcd_exercise() -> Exercise:
    return make_exercise(
        ExerciseType.ARITHMETIC_PGCD,
        PgcdPayload(numbers=[48, 18], expected_result=6),
        subject=Subject.ARITHMETIQUE,
    )


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_btsmath.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def user_repo(test_db_path) -> SQLiteUserRepository:
    return SQLiteUserRepository(test_db_path)


@pytest.fixture
def session_repo(test_db_path) -> SQLiteGameSessionRepository:
    return SQLiteGameSessionRepository(test_db_path)


@pytest.fixture
def high_score_repo(test_db_path) -> SQLiteHighScoreRepository:
    return SQLiteHighScoreRepository(test_db_path)


@pytest.fixture
def achievement_repo(test_db_path) -> SQLiteAchievementRepository:
    return SQLiteAchievementRepository(test_db_path)


@pytest.fixture
def signed_in_user(user_repo) -> User:
    """Create a user and sign them in."""
    user = user_repo.create("alice")
    user_repo.set_current_user(user.id)
    return user


@pytest.fixture
def today() -> date:
    return date(2026, 3, 14)

"""Tests for achievement detection and unlocking."""

import pytest

from achievements import (
    ACHIEVEMENTS,
    CATEGORY_NAMES,
    build_user_stats,
    check_new_achievements,
    get_achievement,
    get_category_name,
    unlock_new_achievements,
)
from models import SessionSummary, UserStats


def complete(session_repo, user_id, correct, total, seconds=60, errors=None):
    sid = session_repo.create_session(user_id, "training")
    session_repo.complete_session(
        sid,
        SessionSummary(
            user_id=user_id,
            mode="training",
            score=correct * 10,
            total_questions=total,
            correct_answers=correct,
            errors=total - correct if errors is None else errors,
            max_combo=correct,
            xp_earned=correct * 10,
            duration_seconds=seconds,
        ),
    )


class TestAchievementTable:
    def test_ids_unique(self):
        ids = [a.id for a in ACHIEVEMENTS]
        assert len(ids) == len(set(ids))

    def test_stats_fields_exist(self):
        """Every achievement should compare a real UserStats field."""
        for achievement in ACHIEVEMENTS:
            assert achievement.stat in UserStats.model_fields

    def test_categories_have_names(self):
        for achievement in ACHIEVEMENTS:
            assert get_category_name(achievement.category) in CATEGORY_NAMES.values()

    def test_get_achievement(self):
        assert get_achievement("streak_7").threshold == 7
        assert get_achievement("unknown") is None


class TestCheckNewAchievements:
    """Tests for threshold comparison."""

    def test_fresh_stats_unlock_nothing(self):
        assert check_new_achievements(UserStats(), []) == []

    def test_thresholds_inclusive(self):
        stats = UserStats(total_exercises=10)
        ids = [a.id for a in check_new_achievements(stats, [])]
        assert ids == ["first_steps", "getting_started"]

    def test_already_unlocked_skipped(self):
        stats = UserStats(total_exercises=10)
        ids = [a.id for a in check_new_achievements(stats, ["first_steps"])]
        assert ids == ["getting_started"]

    @pytest.mark.parametrize(
        "field,value,expected",
        [
            ("level", 10, {"level_5", "level_10"}),
            ("max_streak", 7, {"streak_3", "streak_7"}),
            ("perfect_scores", 1, {"perfect_1"}),
            ("total_xp", 5000, {"xp_1000", "xp_5000"}),
            ("total_games", 10, {"games_10"}),
            ("total_play_time", 300, {"time_60", "time_300"}),
        ],
    )
    def test_each_stat(self, field, value, expected):
        stats = UserStats(**{field: value})
        assert {a.id for a in check_new_achievements(stats, [])} == expected


class TestStoredStats:
    """Tests for stats aggregated from storage."""

    def test_build_user_stats(self, user_repo, session_repo, signed_in_user, today):
        uid = signed_in_user.id
        user_repo.add_xp(uid, 420)
        user_repo.update_streak(uid, today)
        complete(session_repo, uid, correct=5, total=5, seconds=200)
        complete(session_repo, uid, correct=3, total=5, seconds=100)
        session_repo.create_session(uid, "sprint")

        stats = build_user_stats(uid, user_repo, session_repo)
        assert stats == UserStats(
            total_xp=420,
            level=5,
            streak=1,
            max_streak=1,
            total_exercises=8,
            perfect_scores=1,
            total_games=3,
            total_play_time=5,
        )

    def test_unknown_user_raises(self, user_repo, session_repo):
        with pytest.raises(ValueError):
            build_user_stats(404, user_repo, session_repo)

    def test_unlock_is_once_only(
        self, user_repo, session_repo, achievement_repo, signed_in_user
    ):
        uid = signed_in_user.id
        complete(session_repo, uid, correct=10, total=10)

        first = unlock_new_achievements(uid, user_repo, session_repo, achievement_repo)
        assert {a.id for a in first} == {"first_steps", "getting_started", "perfect_1"}

        again = unlock_new_achievements(uid, user_repo, session_repo, achievement_repo)
        assert again == []
        assert len(achievement_repo.get_unlocked(uid)) == 3

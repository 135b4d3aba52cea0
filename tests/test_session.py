"""Tests for the game session state machine."""

import logging
import random
import sqlite3
import threading

import pytest

from exercises.evaluator import expected_answer_text
from game_modes import GameModeConfig, GameModeRules
from models import ExerciseType, SessionStatus
from session import CountdownTimer, GameSession, SessionAbortedError, combo_bonus
from storage import get_connection

WRONG = "not an answer"


@pytest.fixture
def make_session(user_repo, session_repo, high_score_repo, achievement_repo, fake_clock):
    """Factory for sessions wired to the temporary database."""

    def factory(mode="training", **kwargs):
        kwargs.setdefault("rng", random.Random(7))
        return GameSession(
            mode,
            user_repo=user_repo,
            session_repo=session_repo,
            high_score_repo=high_score_repo,
            achievement_repo=achievement_repo,
            clock=fake_clock,
            **kwargs,
        )

    return factory


def answer_correctly(session: GameSession):
    exercise = session.current_exercise
    return session.submit_answer(expected_answer_text(exercise.expected_result))


def answer_and_advance(session: GameSession, correct: bool = True):
    result = answer_correctly(session) if correct else session.submit_answer(WRONG)
    session.advance()
    return result


class TestComboBonus:
    def test_bonus_starts_at_third_consecutive(self):
        """Combo values 1, 2, 3 should give bonus 0, 0, 6."""
        assert [combo_bonus(True, c) for c in (1, 2, 3)] == [0, 0, 6]

    def test_bonus_grows_with_combo(self):
        assert combo_bonus(True, 4) == 8
        assert combo_bonus(True, 10) == 20

    def test_no_bonus_on_wrong_answer(self):
        assert combo_bonus(False, 0) == 0


class TestStart:
    """Tests for the Loading -> InProgress transition."""

    def test_start_without_user_aborts(self, make_session, test_db_path):
        """Should raise and record nothing when nobody is signed in."""
        session = make_session()
        with pytest.raises(SessionAbortedError):
            session.start()

        assert session.status == SessionStatus.LOADING
        conn = get_connection(test_db_path)
        try:
            count = conn.execute("SELECT COUNT(*) FROM game_sessions").fetchone()[0]
        finally:
            conn.close()
        assert count == 0

    def test_start_generates_default_question_count(self, make_session, signed_in_user):
        session = make_session("training")
        session.start()
        assert session.status == SessionStatus.IN_PROGRESS
        assert len(session.exercises) == 10
        assert session.user.id == signed_in_user.id
        assert session.session_id is not None
        assert session.state.time_remaining is None

    def test_start_uses_mode_question_count_and_timer(self, make_session, signed_in_user):
        session = make_session("sprint")
        session.start()
        assert len(session.exercises) == 10
        assert session.state.time_remaining == 300

        exam = make_session("exam")
        exam.start()
        assert len(exam.exercises) == 20
        assert exam.state.time_remaining == 3600

    def test_difficulty_ramps_over_session(self, make_session, signed_in_user):
        session = make_session("express")
        session.start()
        assert [ex.difficulty for ex in session.exercises] == [1, 1, 1, 2, 2]

    def test_types_restrict_exercises(self, make_session, signed_in_user):
        session = make_session("training", types=[ExerciseType.BOOLEAN_SIMPLIFY])
        session.start()
        assert {ex.type for ex in session.exercises} == {ExerciseType.BOOLEAN_SIMPLIFY}

    def test_current_exercise_none_before_start(self, make_session):
        assert make_session().current_exercise is None

    def test_start_twice_raises(self, make_session, signed_in_user):
        session = make_session()
        session.start()
        with pytest.raises(RuntimeError):
            session.start()

    def test_unknown_mode_raises_key_error(self, make_session):
        with pytest.raises(KeyError):
            make_session("marathon")


class TestScoring:
    """Tests for per-answer score, combo and error updates."""

    def test_three_correct_answers_add_combo_bonus(self, make_session, signed_in_user):
        """Scores should go 10, 20, 36 as the third answer earns a bonus of 6."""
        session = make_session("training")
        session.start()

        scores = []
        for _ in range(3):
            answer_and_advance(session)
            scores.append(session.state.score)

        assert scores == [10, 20, 36]
        assert session.state.combo == 3
        assert session.state.max_combo == 3
        assert session.state.correct_answers == 3

    def test_wrong_answer_resets_combo(self, make_session, signed_in_user):
        session = make_session("training")
        session.start()
        answer_and_advance(session)
        answer_and_advance(session)
        result = answer_and_advance(session, correct=False)

        assert not result.correct
        assert session.state.combo == 0
        assert session.state.max_combo == 2
        assert session.state.errors == 1
        assert session.state.score == 20

    def test_submit_ignored_while_awaiting_feedback(self, make_session, signed_in_user):
        """A second submission before advance() should change nothing."""
        session = make_session("training")
        session.start()
        answer_correctly(session)
        before = session.state.model_copy()

        assert session.submit_answer(WRONG) is None
        assert session.state == before
        assert session.awaiting_feedback

    def test_advance_moves_to_next_exercise(self, make_session, signed_in_user):
        session = make_session("training")
        session.start()
        assert session.advance() is False

        first = session.current_exercise
        answer_correctly(session)
        assert session.advance() is True
        assert session.state.current_index == 1
        assert session.current_exercise is not first
        assert not session.awaiting_feedback


class TestTermination:
    """Tests for the InProgress -> Finished transition."""

    def test_survival_finishes_on_third_error(self, make_session, signed_in_user):
        """Should finish exactly when the third wrong answer is recorded."""
        session = make_session("survival")
        session.start()

        answer_and_advance(session, correct=False)
        answer_and_advance(session)
        answer_and_advance(session, correct=False)
        assert session.status == SessionStatus.IN_PROGRESS

        session.submit_answer(WRONG)
        assert session.status == SessionStatus.FINISHED
        assert session.state.errors == 3
        assert session.state.current_index == 3
        assert session.summary.total_questions == 10

    def test_last_answer_finishes(self, make_session, signed_in_user):
        session = make_session("express")
        session.start()
        for _ in range(4):
            answer_and_advance(session)
        assert not session.is_finished

        answer_correctly(session)
        assert session.is_finished
        assert session.current_exercise is None

    def test_xp_is_score_times_multiplier(self, make_session, signed_in_user):
        """Express: 70 base + 24 combo bonus = 94, times 1.25 floored to 117."""
        session = make_session("express")
        session.start()
        for _ in range(5):
            answer_and_advance(session)

        assert session.state.score == 94
        assert session.state.xp_earned == 117
        assert session.summary.xp_earned == 117

    def test_timer_expiry_finishes(self, make_session, signed_in_user):
        session = make_session("sprint")
        session.start()
        session.tick(299)
        assert session.state.time_remaining == 1
        assert not session.is_finished

        session.tick()
        assert session.state.time_remaining == 0
        assert session.is_finished
        assert session.submit_answer("1") is None

    def test_tick_without_timer_is_noop(self, make_session, signed_in_user):
        session = make_session("training")
        session.start()
        session.tick(1000)
        assert session.state.time_remaining is None
        assert not session.is_finished

    def test_duration_from_clock(self, make_session, signed_in_user, fake_clock):
        session = make_session("boss")
        session.start()
        fake_clock.now += 45
        answer_correctly(session)
        assert session.summary.duration_seconds == 45


class TestFinishSideEffects:
    """Tests for persistence when a session finishes."""

    def test_results_persisted(
        self, make_session, signed_in_user, user_repo, session_repo, high_score_repo
    ):
        session = make_session("express")
        session.start()
        for _ in range(5):
            answer_and_advance(session)

        user = user_repo.get_by_id(signed_in_user.id)
        assert user.xp == 117
        assert user.level == 2
        assert user.streak == 0
        assert session_repo.count_sessions(user.id) == 1
        assert session_repo.total_correct_answers(user.id) == 5
        assert session_repo.count_perfect_sessions(user.id) == 1
        assert session.new_high_score is True
        assert [hs.score for hs in high_score_repo.get_high_scores(user.id)] == [94]

    def test_achievements_unlocked(self, make_session, signed_in_user, achievement_repo):
        session = make_session("express")
        session.start()
        for _ in range(5):
            answer_and_advance(session)

        unlocked = {a.id for a in session.unlocked_achievements}
        assert {"first_steps", "perfect_1"} <= unlocked
        assert set(achievement_repo.get_unlocked(signed_in_user.id)) == unlocked

    def test_lower_score_is_not_a_high_score(self, make_session, signed_in_user):
        first = make_session("express")
        first.start()
        for _ in range(5):
            answer_and_advance(first)

        second = make_session("express")
        second.start()
        for _ in range(5):
            answer_and_advance(second, correct=False)
        assert second.new_high_score is False

    def test_finish_is_idempotent(self, make_session, signed_in_user, user_repo):
        """Only the first finish should persist; later calls return None."""
        session = make_session("sprint")
        session.start()
        answer_and_advance(session)

        summary = session.finish()
        assert summary is not None
        assert session.finish() is None
        session.tick(1000)

        assert user_repo.get_by_id(signed_in_user.id).xp == summary.xp_earned

    def test_concurrent_finish_runs_once(self, make_session, signed_in_user, session_repo):
        session = make_session("sprint")
        session.start()
        answer_and_advance(session)

        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(session.finish())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(r is not None for r in results) == 1
        assert session_repo.count_sessions(signed_in_user.id) == 1

    def test_storage_failure_is_logged_and_raised(
        self, make_session, signed_in_user, session_repo, user_repo, monkeypatch, caplog
    ):
        def broken_complete(session_id, summary):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(session_repo, "complete_session", broken_complete)
        session = make_session("express")
        session.start()
        for _ in range(4):
            answer_and_advance(session)

        with caplog.at_level(logging.ERROR, logger="session"):
            with pytest.raises(sqlite3.OperationalError):
                answer_correctly(session)

        assert "Failed to save results" in caplog.text
        assert session.summary is not None
        assert session.is_finished
        assert user_repo.get_by_id(signed_in_user.id).xp == 0


class TestCountdownTimer:
    def test_timer_thread_finishes_session(self, make_session, signed_in_user):
        mode = GameModeConfig(
            id="sprint",
            name="Sprint",
            description="Short sprint",
            rules=GameModeRules(
                time_limit=2,
                question_count=3,
                mix_subjects=True,
                difficulty_progression=False,
                show_timer=True,
                xp_multiplier=1.5,
            ),
        )
        session = make_session(mode)
        session.start()

        timer = CountdownTimer(session, period=0.01)
        timer.start()
        timer.join(timeout=5)

        assert not timer.is_alive()
        assert session.is_finished
        assert session.state.time_remaining == 0

    def test_stop_ends_thread(self, make_session, signed_in_user):
        session = make_session("sprint")
        session.start()
        timer = CountdownTimer(session, period=0.01)
        timer.start()
        timer.stop()
        timer.join(timeout=5)

        assert not timer.is_alive()
        assert not session.is_finished

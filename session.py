"""
Game session loop.

A session moves Loading -> InProgress -> Finished. It pulls a batch of
generated exercises, grades each submitted answer, keeps score, combo and
error counters, and finishes on whichever comes first: the error budget
running out, the last answer, or the countdown reaching zero. Finishing
persists results exactly once, whichever trigger fires.
"""

import logging
import math
import threading
import time
from typing import Callable, Sequence

from achievements import Achievement, unlock_new_achievements
from exercises import check_answer, generate_exercises
from exercises.config import ExerciseGeneratorConfig
from exercises.random_source import RandomSource
from game_modes import GameModeConfig, get_game_mode
from models import (
    AnswerResult,
    Exercise,
    ExerciseType,
    SessionState,
    SessionStatus,
    SessionSummary,
    User,
)
from storage import (
    AchievementRepository,
    GameSessionRepository,
    HighScoreRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

COMBO_THRESHOLD = 3
COMBO_MULTIPLIER = 2


class SessionAbortedError(RuntimeError):
    """Raised when a session cannot start (no authenticated user)."""


def combo_bonus(correct: bool, new_combo: int) -> int:
    """Bonus points for an answer: twice the combo once it reaches 3."""
    if correct and new_combo >= COMBO_THRESHOLD:
        return math.floor(new_combo * COMBO_MULTIPLIER)
    return 0


class GameSession:
    """One play-through of a game mode for the signed-in user."""

    def __init__(
        self,
        mode: GameModeConfig | str,
        user_repo: UserRepository,
        session_repo: GameSessionRepository,
        high_score_repo: HighScoreRepository,
        achievement_repo: AchievementRepository | None = None,
        types: Sequence[ExerciseType | str] | None = None,
        rng: RandomSource | None = None,
        generator_config: ExerciseGeneratorConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.mode = get_game_mode(mode) if isinstance(mode, str) else mode
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.high_score_repo = high_score_repo
        self.achievement_repo = achievement_repo
        self.types = list(types) if types else None
        self.rng = rng
        self.generator_config = generator_config
        self.clock = clock

        self.status = SessionStatus.LOADING
        self.state = SessionState()
        self.exercises: list[Exercise] = []
        self.user: User | None = None
        self.session_id: int | None = None
        self.awaiting_feedback = False
        self.last_result: AnswerResult | None = None
        self.summary: SessionSummary | None = None
        self.new_high_score = False
        self.unlocked_achievements: list[Achievement] = []

        self._lock = threading.Lock()
        self._started_at: float | None = None

    @property
    def rules(self):
        return self.mode.rules

    @property
    def is_finished(self) -> bool:
        return self.status == SessionStatus.FINISHED

    @property
    def current_exercise(self) -> Exercise | None:
        if self.status != SessionStatus.IN_PROGRESS:
            return None
        return self.exercises[self.state.current_index]

    def start(self) -> None:
        """Load the user, generate exercises and open the session record.

        Raises:
            SessionAbortedError: If nobody is signed in. Nothing is recorded.
        """
        if self.status != SessionStatus.LOADING:
            raise RuntimeError(f"Session already started ({self.status.value})")

        user = self.user_repo.get_current_user()
        if user is None:
            logger.warning("Cannot start %s session: no user signed in", self.mode.id)
            raise SessionAbortedError("Utilisateur non connecté")

        self.user = user
        self.exercises = generate_exercises(
            self.rules.effective_question_count,
            types=self.types,
            rng=self.rng,
            config=self.generator_config,
        )
        self.session_id = self.session_repo.create_session(user.id, self.mode.id)
        if self.rules.time_limit:
            self.state.time_remaining = self.rules.time_limit

        self._started_at = self.clock()
        self.status = SessionStatus.IN_PROGRESS
        logger.info(
            "Started %s session %s for %s with %d exercises",
            self.mode.id, self.session_id, user.username, len(self.exercises),
        )

    def submit_answer(self, answer: str | None) -> AnswerResult | None:
        """Grade the answer to the current exercise.

        Returns None, changing nothing, when the session is not in progress
        or the previous answer has not been acknowledged with advance().
        """
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS or self.awaiting_feedback:
                return None

            exercise = self.exercises[self.state.current_index]
            result = check_answer(exercise, answer)
            state = self.state

            new_combo = state.combo + 1 if result.correct else 0
            base_points = exercise.xp_reward if result.correct else 0
            state.score += base_points + combo_bonus(result.correct, new_combo)
            state.combo = new_combo
            state.max_combo = max(state.max_combo, new_combo)
            if result.correct:
                state.correct_answers += 1
            else:
                state.errors += 1

            self.awaiting_feedback = True
            self.last_result = result
            logger.debug(
                "Answer %d/%d %s: score=%d combo=%d errors=%d",
                state.current_index + 1, len(self.exercises),
                "correct" if result.correct else "wrong",
                state.score, state.combo, state.errors,
            )

            out_of_lives = (
                self.rules.max_errors is not None
                and state.errors >= self.rules.max_errors
            )
            last_answer = state.current_index + 1 >= len(self.exercises)

        if out_of_lives or last_answer:
            self.finish()
        return result

    def advance(self) -> bool:
        """Move past the feedback for the last answer to the next exercise."""
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS or not self.awaiting_feedback:
                return False
            self.state.current_index += 1
            self.awaiting_feedback = False
            self.last_result = None
            return True

    def tick(self, seconds: int = 1) -> None:
        """Count the timer down; finishes the session when it reaches zero."""
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS:
                return
            if self.state.time_remaining is None:
                return
            self.state.time_remaining = max(0, self.state.time_remaining - seconds)
            expired = self.state.time_remaining == 0

        if expired:
            logger.info("Time is up for session %s", self.session_id)
            self.finish()

    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return int(self.clock() - self._started_at)

    def finish(self) -> SessionSummary | None:
        """Finish the session and persist its results.

        Safe to call from several triggers at once: only the first call
        performs the side effects and returns the summary, later calls
        return None.
        """
        with self._lock:
            if self.status != SessionStatus.IN_PROGRESS:
                return None
            self.status = SessionStatus.FINISHED

            state = self.state
            state.xp_earned = math.floor(state.score * self.rules.xp_multiplier)
            summary = SessionSummary(
                user_id=self.user.id,
                mode=self.mode.id,
                score=state.score,
                total_questions=len(self.exercises),
                correct_answers=state.correct_answers,
                errors=state.errors,
                max_combo=state.max_combo,
                xp_earned=state.xp_earned,
                duration_seconds=self.elapsed_seconds(),
            )
            self.summary = summary

        logger.info(
            "Finished session %s: score=%d xp=%d (%d/%d correct)",
            self.session_id, summary.score, summary.xp_earned,
            summary.correct_answers, summary.total_questions,
        )
        try:
            self.session_repo.complete_session(self.session_id, summary)
            self.user_repo.add_xp(summary.user_id, summary.xp_earned)
            self.new_high_score = self.high_score_repo.save_high_score(
                summary.user_id, summary.mode, summary.score
            )
            if self.achievement_repo is not None:
                self.unlocked_achievements = unlock_new_achievements(
                    summary.user_id,
                    self.user_repo,
                    self.session_repo,
                    self.achievement_repo,
                )
        except Exception:
            logger.exception(
                "Failed to save results of session %s for user %s",
                self.session_id, summary.user_id,
            )
            raise
        return summary


class CountdownTimer(threading.Thread):
    """Daemon thread calling session.tick() once per period."""

    def __init__(self, session: GameSession, period: float = 1.0):
        super().__init__(daemon=True)
        self.session = session
        self.period = period
        self._stopped = threading.Event()

    def run(self) -> None:
        while not self._stopped.wait(self.period):
            if self.session.is_finished:
                break
            self.session.tick()

    def stop(self) -> None:
        self._stopped.set()

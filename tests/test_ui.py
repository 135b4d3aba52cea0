"""Tests for rich renderables and style helpers."""

import pytest
from rich.console import Console
from rich.style import Style

from achievements import get_achievement
from boolean_eval import truth_table
from models import SessionState, SessionSummary
from ui.components import (
    AchievementList,
    FeedbackPanel,
    SessionSummaryPanel,
    StatusBar,
    TruthTablePanel,
)
from ui.styles import ERROR_RED, SUCCESS_GREEN, format_time, get_mode_color, get_timer_style


def render(renderable) -> str:
    console = Console(width=120, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestStyles:
    @pytest.mark.parametrize("seconds,text", [(0, "0:00"), (59, "0:59"), (300, "5:00"), (3599, "59:59")])
    def test_format_time(self, seconds, text):
        assert format_time(seconds) == text

    def test_timer_turns_red_near_the_end(self):
        assert get_timer_style(300, 300) == Style(color=SUCCESS_GREEN)
        assert get_timer_style(30, 300) == Style(color=ERROR_RED, bold=True)

    def test_unknown_mode_uses_training_colour(self):
        assert get_mode_color("marathon") == get_mode_color("training")


class TestComponents:
    """Tests for rendered text content."""

    def test_status_bar_shows_lives(self):
        state = SessionState(score=36, combo=3, errors=1)
        text = render(StatusBar(state, max_errors=3)).strip()
        assert "36" in text
        assert "x3" in text
        assert "♥♥♡" in text

    def test_status_bar_shows_timer(self):
        state = SessionState(time_remaining=125)
        assert "2:05" in render(StatusBar(state, time_limit=300))

    def test_feedback_wrong_answer(self):
        text = render(FeedbackPanel(False, "6", user_answer="12"))
        assert "Raté !" in text
        assert "Votre réponse : 12" in text
        assert "Réponse : 6" in text

    def test_feedback_combo(self):
        text = render(FeedbackPanel(True, "6", points=16, combo=3))
        assert "+16" in text
        assert "Combo x3" in text

    def test_truth_table_rows(self):
        rows = truth_table("A AND B", ["A", "B"])
        text = render(TruthTablePanel("A AND B", ["A", "B"], rows))
        assert "A AND B" in text
        assert "Table de vérité" in text
        assert text.count("1") == 5

    def test_summary_panel(self):
        summary = SessionSummary(
            user_id=1, mode="express", score=94, total_questions=5,
            correct_answers=5, errors=0, max_combo=5, xp_earned=117,
            duration_seconds=75,
        )
        text = render(
            SessionSummaryPanel(summary, "Révision Express", True, [get_achievement("perfect_1")])
        )
        assert "94" in text
        assert "+117" in text
        assert "100%" in text
        assert "1:15" in text
        assert "Nouveau record" in text
        assert "Sans Faute" in text

    def test_achievement_list_groups_by_category(self):
        achievements = [get_achievement("streak_3"), get_achievement("first_steps")]
        text = render(AchievementList(achievements))
        assert text.index("Progression") < text.index("Premiers Pas")
        assert "Séries" in text

    def test_empty_achievement_list(self):
        assert "Aucun succès" in render(AchievementList([]))

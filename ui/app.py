from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from rich import box
from typing import Optional, List

from achievements import Achievement
from exercises.handlers import ExerciseHandler
from game_modes import GameModeConfig
from models import HighScore, SessionSummary, User
from session import GameSession
from ui.components import (
    AchievementList,
    ExercisePanel,
    FeedbackPanel,
    HighScoreTable,
    LeaderboardTable,
    ModeTable,
    SessionSummaryPanel,
    StatusBar,
    StepsPanel,
    TruthTablePanel,
)
from ui.styles import (
    ACCENT_INDIGO,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    DEFAULT_THEME,
    get_mode_color,
)


class GameUI:
    """Main UI orchestrator for the math trainer."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(theme=DEFAULT_THEME)

    def show_welcome(self, user: User, mode: GameModeConfig) -> None:
        """Display the mode banner and wait for user to press Enter."""
        content = Text()
        content.append(f"{mode.name}\n", style=f"bold {get_mode_color(mode.id)}")
        content.append(f"{mode.description}\n\n", style=MUTED_GRAY)
        content.append(f"Joueur : {user.username}", style="bold")
        content.append(f"   Niveau {user.level}   {user.xp} XP", style=INFO_BLUE)
        if user.streak:
            content.append(f"   🔥 {user.streak}", style=ACCENT_INDIGO)
        content.append("\n\nTapez 'q' à tout moment pour abandonner.", style=MUTED_GRAY)

        self.console.print(
            Panel(
                content,
                title="BTS SIO Maths",
                border_style=get_mode_color(mode.id),
                box=box.HEAVY,
                padding=(1, 2),
            )
        )
        self.console.print()
        self.console.input(Text("Appuyez sur Entrée pour commencer...", style=f"bold {MUTED_GRAY}"))

    def show_exercise(self, handler: ExerciseHandler, session: GameSession) -> str:
        """Display the current exercise and read an answer.

        Returns:
            "quit" if the user quits, otherwise the raw answer.
        """
        exercise = handler.exercise
        rules = session.rules
        panel = ExercisePanel(
            prompt_text=handler.get_prompt_text(),
            matrices=handler.get_matrices(),
            hint=handler.get_hint(),
            exercise_number=session.state.current_index + 1,
            total_exercises=len(session.exercises),
            xp_reward=exercise.xp_reward,
            chapter=exercise.chapter,
            mode_id=session.mode.id,
            status=StatusBar(
                session.state,
                max_errors=rules.max_errors,
                time_limit=rules.time_limit if rules.show_timer else None,
            ),
        )
        self.console.print(panel)
        self.console.print()

        while True:
            user_input = self.console.input(
                Text(handler.get_input_prompt(), style=f"bold {MUTED_GRAY}")
            ).strip()

            if user_input.lower() == "q":
                return "quit"

            if user_input:
                return user_input

            self.console.print(Text("Entrez une réponse (ou 'q' pour quitter)\n", style=ERROR_RED))

    def show_feedback(
        self,
        is_correct: bool,
        correct_answer: str,
        user_answer: str = "",
        points: int = 0,
        combo: int = 0,
    ) -> None:
        """Display feedback for the user's answer."""
        feedback = FeedbackPanel(
            is_correct=is_correct,
            correct_answer=correct_answer,
            user_answer=user_answer,
            points=points,
            combo=combo,
        )
        self.console.print(feedback)
        self.console.print()

    def show_session_summary(
        self,
        summary: SessionSummary,
        mode: GameModeConfig,
        new_high_score: bool = False,
        achievements: Optional[List[Achievement]] = None,
    ) -> None:
        self.console.print(
            SessionSummaryPanel(summary, mode.name, new_high_score, achievements)
        )

    def show_modes(self, modes: List[GameModeConfig]) -> None:
        self.console.print(ModeTable(modes))

    def show_truth_table(self, expression: str, variables: List[str], rows) -> None:
        self.console.print(TruthTablePanel(expression, variables, rows))

    def show_steps(self, title: str, steps: List[str]) -> None:
        """Display worked steps (base conversion, Euclid) in a panel."""
        self.console.print(StepsPanel(title, steps))

    def show_leaderboard(
        self,
        users: List[User],
        current_user_id: Optional[int] = None,
        high_scores: Optional[List[HighScore]] = None,
        achievements: Optional[List[Achievement]] = None,
    ) -> None:
        self.console.print(LeaderboardTable(users, current_user_id))
        if high_scores:
            self.console.print()
            self.console.print(HighScoreTable(high_scores))
        if achievements is not None:
            self.console.print()
            self.console.print(AchievementList(achievements))

    def show_time_up(self) -> None:
        self.console.print(Text("⏱ Temps écoulé !", style=f"bold {ERROR_RED}"))

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Erreur : {message}", style=ERROR_RED),
                title="Erreur",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_success(self, message: str) -> None:
        self.console.print(Text(message, style=SUCCESS_GREEN))

    def show_quit_message(self) -> None:
        self.console.print()
        self.console.print(Text("👋 Partie abandonnée. À bientôt !", style=MUTED_GRAY))

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()

    def wait_for_continue(self) -> None:
        """Wait for user to press Enter to continue."""
        self.console.input(Text("Appuyez sur Entrée pour continuer...", style=f"bold {MUTED_GRAY}"))

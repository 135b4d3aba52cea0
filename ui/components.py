from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich.columns import Columns
from rich.console import Group
from rich import box
from typing import Optional, List, Dict, Tuple

from achievements import Achievement, get_category_name
from game_modes import GameModeConfig
from models import FrozenMatrix, HighScore, Matrix, SessionState, SessionSummary, User
from ui.styles import (
    ACCENT_INDIGO,
    ACCENT_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    format_time,
    get_mode_color,
    get_timer_style,
)


def render_matrix(label: str, matrix: Matrix | FrozenMatrix) -> Table:
    """Render a matrix as a borderless grid titled with its label."""
    table = Table(
        show_header=False,
        title=label,
        title_style=Style(color=ACCENT_GOLD, bold=True),
        border_style=MUTED_GRAY,
        box=box.SQUARE,
        padding=(0, 1),
    )
    for _ in matrix[0]:
        table.add_column(justify="right", style=Style(color=TEXT_WHITE))
    for row in matrix:
        table.add_row(*(str(value) for value in row))
    return table


class StatusBar:
    """One-line session status: score, combo, errors and timer."""

    def __init__(
        self,
        state: SessionState,
        max_errors: Optional[int] = None,
        time_limit: Optional[int] = None,
    ):
        self.state = state
        self.max_errors = max_errors
        self.time_limit = time_limit

    def render(self) -> Text:
        text = Text()
        text.append("Score ", Style(color=MUTED_GRAY))
        text.append(str(self.state.score), Style(color=ACCENT_GOLD, bold=True))
        text.append("   Combo ", Style(color=MUTED_GRAY))
        combo_style = Style(color=ACCENT_GOLD, bold=True) if self.state.combo >= 3 else Style()
        text.append(f"x{self.state.combo}", combo_style)

        if self.max_errors is not None:
            lives = max(0, self.max_errors - self.state.errors)
            text.append("   Vies ", Style(color=MUTED_GRAY))
            text.append("♥" * lives + "♡" * (self.max_errors - lives), Style(color=ERROR_RED))
        else:
            text.append("   Erreurs ", Style(color=MUTED_GRAY))
            text.append(str(self.state.errors), Style(color=ERROR_RED))

        if self.time_limit and self.state.time_remaining is not None:
            text.append("   ⏱ ", Style(color=MUTED_GRAY))
            text.append(
                format_time(self.state.time_remaining),
                get_timer_style(self.state.time_remaining, self.time_limit),
            )
        return text

    def __rich__(self) -> Text:
        return self.render()


class ExercisePanel:
    """A styled panel for displaying exercise content."""

    def __init__(
        self,
        prompt_text: str,
        matrices: Optional[List[Tuple[str, FrozenMatrix]]] = None,
        hint: str = "",
        exercise_number: int = 0,
        total_exercises: int = 0,
        xp_reward: int = 0,
        chapter: str = "",
        mode_id: str = "training",
        status: Optional[StatusBar] = None,
    ):
        self.prompt_text = prompt_text
        self.matrices = matrices or []
        self.hint = hint
        self.exercise_number = exercise_number
        self.total_exercises = total_exercises
        self.xp_reward = xp_reward
        self.chapter = chapter
        self.mode_id = mode_id
        self.status = status

    @property
    def progress_percent(self) -> float:
        if self.total_exercises == 0:
            return 0.0
        return (self.exercise_number - 1) / self.total_exercises * 100

    def render(self) -> Panel:
        header = Text()
        if self.total_exercises > 0:
            header.append(self._create_progress_bar(), Style(color=MUTED_GRAY))
            header.append("\n")
            header.append(
                f"Question {self.exercise_number}/{self.total_exercises}",
                Style(color=MUTED_GRAY),
            )
        if self.xp_reward:
            header.append(f"   +{self.xp_reward} XP", Style(color=ACCENT_GOLD, bold=True))
        if self.chapter:
            header.append(f"\n{self.chapter}", Style(color=INFO_BLUE))
        header.append("\n\n")
        header.append(self.prompt_text, Style(color=ACCENT_INDIGO, bold=True))

        parts = [header]
        if self.matrices:
            parts.append(
                Columns([render_matrix(label, m) for label, m in self.matrices], padding=(0, 4))
            )
        if self.hint:
            parts.append(Text(self.hint, Style(color=MUTED_GRAY, italic=True)))
        if self.status is not None:
            parts.append(Text())
            parts.append(self.status.render())

        return Panel(
            Group(*parts),
            title="BTS SIO Maths",
            subtitle="Tapez votre réponse (ou 'q' pour quitter)",
            border_style=get_mode_color(self.mode_id),
            box=box.HEAVY,
            padding=(1, 2),
        )

    def _create_progress_bar(self) -> str:
        """Create a text-based progress bar."""
        width = 30
        filled = int(width * self.progress_percent / 100)
        remaining = width - filled
        bar = "█" * filled + "░" * remaining
        return f"[{bar}] {self.progress_percent:.0f}%"

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for displaying answer feedback."""

    def __init__(
        self,
        is_correct: bool,
        correct_answer: str,
        user_answer: str = "",
        points: int = 0,
        combo: int = 0,
    ):
        self.is_correct = is_correct
        self.correct_answer = correct_answer
        self.user_answer = user_answer
        self.points = points
        self.combo = combo

    def render(self) -> Panel:
        content = Text()

        if self.is_correct:
            content.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
            content.append("Correct !", Style(color=SUCCESS_GREEN, bold=True))
            if self.points:
                content.append(f"  +{self.points}", Style(color=ACCENT_GOLD, bold=True))
            if self.combo >= 3:
                content.append(f"\n🔥 Combo x{self.combo}", Style(color=ACCENT_GOLD))
        else:
            content.append("✗ ", Style(color=ERROR_RED, bold=True))
            content.append("Raté !\n", Style(color=ERROR_RED, bold=True))
            if self.user_answer:
                content.append(
                    f"Votre réponse : {self.user_answer}\n", Style(color=MUTED_GRAY)
                )
            content.append("\n")
            content.append("Réponse : ", Style(color=MUTED_GRAY))
            content.append(self.correct_answer, Style(color=SUCCESS_GREEN, bold=True))

        return Panel(
            Align.left(content),
            title="Résultat",
            border_style=SUCCESS_GREEN if self.is_correct else ERROR_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SessionSummaryPanel:
    """End-of-game summary with score, accuracy and XP."""

    def __init__(
        self,
        summary: SessionSummary,
        mode_name: str,
        new_high_score: bool = False,
        achievements: Optional[List[Achievement]] = None,
    ):
        self.summary = summary
        self.mode_name = mode_name
        self.new_high_score = new_high_score
        self.achievements = achievements or []

    @property
    def accuracy(self) -> float:
        answered = self.summary.correct_answers + self.summary.errors
        if answered == 0:
            return 0.0
        return self.summary.correct_answers / answered * 100

    def render(self) -> Panel:
        s = self.summary
        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.SIMPLE)
        stats.add_column("Label", style=Style(color=MUTED_GRAY))
        stats.add_column("Value", justify="right")

        stats.add_row("Score", Text(str(s.score), style=Style(color=ACCENT_GOLD, bold=True)))
        stats.add_row("Bonnes réponses", Text(f"{s.correct_answers}/{s.total_questions}", style=Style(color=SUCCESS_GREEN)))
        stats.add_row("Erreurs", Text(str(s.errors), style=Style(color=ERROR_RED)))
        stats.add_row("Précision", f"{self.accuracy:.0f}%")
        stats.add_row("Meilleur combo", f"x{s.max_combo}")
        stats.add_row("Durée", format_time(s.duration_seconds))
        stats.add_row("XP gagnés", Text(f"+{s.xp_earned}", style=Style(color=ACCENT_INDIGO, bold=True)))

        content = Text()
        content.append("🏁 Partie terminée !\n", Style(color=ACCENT_INDIGO, bold=True))
        content.append(f"Mode {self.mode_name}\n", Style(color=MUTED_GRAY))
        if self.new_high_score:
            content.append("\n🏆 Nouveau record !\n", Style(color=ACCENT_GOLD, bold=True))
        for achievement in self.achievements:
            content.append(f"\n🎖 {achievement.name}", Style(color=ACCENT_GOLD, bold=True))
            content.append(f" - {achievement.description}", Style(color=MUTED_GRAY))

        return Panel(
            Columns([Align.center(content), Align.center(stats)], align="center", padding=(0, 3)),
            title="Résumé",
            border_style=ACCENT_GOLD,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ModeTable:
    """Table of available game modes and their rules."""

    def __init__(self, modes: List[GameModeConfig]):
        self.modes = modes

    def render(self) -> Table:
        table = Table(
            title="Modes de jeu",
            header_style=Style(color=ACCENT_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            box=box.HEAVY,
        )
        table.add_column("Id")
        table.add_column("Mode", style=Style(bold=True))
        table.add_column("Description", style=Style(color=MUTED_GRAY))
        table.add_column("Questions", justify="right")
        table.add_column("Temps", justify="right")
        table.add_column("Vies", justify="right")
        table.add_column("XP", justify="right", style=Style(color=ACCENT_GOLD))

        for mode in self.modes:
            rules = mode.rules
            table.add_row(
                Text(mode.id, style=Style(color=get_mode_color(mode.id))),
                mode.name,
                mode.description,
                str(rules.effective_question_count),
                format_time(rules.time_limit) if rules.time_limit else "-",
                str(rules.max_errors) if rules.max_errors else "-",
                f"x{rules.xp_multiplier:g}",
            )
        return table

    def __rich__(self) -> Table:
        return self.render()


class TruthTablePanel:
    """Truth table of an expression, one row per assignment."""

    def __init__(self, expression: str, variables: List[str], rows: List[Tuple[Dict[str, bool], bool]]):
        self.expression = expression
        self.variables = variables
        self.rows = rows

    def render(self) -> Panel:
        table = Table(
            header_style=Style(color=ACCENT_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            box=box.SIMPLE_HEAVY,
        )
        for name in self.variables:
            table.add_column(name, justify="center")
        table.add_column(self.expression, justify="center", style=Style(color=ACCENT_GOLD, bold=True))

        for values, result in self.rows:
            table.add_row(*(str(int(values[name])) for name in self.variables), str(int(result)))

        return Panel(
            Align.center(table),
            title="Table de vérité",
            border_style=ACCENT_INDIGO,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class StepsPanel:
    """Worked steps of a computation; the last line is the result."""

    def __init__(self, title: str, steps: List[str]):
        self.title = title
        self.steps = steps

    def render(self) -> Panel:
        content = Text()
        for i, step in enumerate(self.steps):
            if i:
                content.append("\n")
            last = i == len(self.steps) - 1
            style = Style(color=SUCCESS_GREEN, bold=True) if last else Style(color=TEXT_WHITE)
            content.append(step, style)

        return Panel(
            Align.left(content),
            title=self.title,
            border_style=INFO_BLUE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class LeaderboardTable:
    """Global ranking by XP."""

    MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}

    def __init__(self, users: List[User], current_user_id: Optional[int] = None):
        self.users = users
        self.current_user_id = current_user_id

    def render(self) -> Table:
        table = Table(
            title="Classement",
            header_style=Style(color=ACCENT_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )
        table.add_column("#", justify="right")
        table.add_column("Joueur")
        table.add_column("Niveau", justify="right")
        table.add_column("XP", justify="right", style=Style(color=ACCENT_GOLD))
        table.add_column("Série", justify="right")

        for rank, user in enumerate(self.users, start=1):
            name_style = Style(color=ACCENT_INDIGO, bold=True) if user.id == self.current_user_id else Style()
            table.add_row(
                self.MEDALS.get(rank, str(rank)),
                Text(user.username, style=name_style),
                str(user.level),
                str(user.xp),
                f"{user.streak} 🔥" if user.streak else "0",
            )
        return table

    def __rich__(self) -> Table:
        return self.render()


class HighScoreTable:
    """A user's best scores per mode."""

    def __init__(self, high_scores: List[HighScore]):
        self.high_scores = high_scores

    def render(self) -> Table:
        table = Table(
            title="Meilleurs scores",
            header_style=Style(color=ACCENT_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            box=box.SIMPLE,
        )
        table.add_column("Mode", style=Style(bold=True))
        table.add_column("Score", justify="right", style=Style(color=ACCENT_GOLD))
        table.add_column("Date", style=Style(color=MUTED_GRAY))
        for hs in self.high_scores:
            table.add_row(
                Text(hs.mode, style=Style(color=get_mode_color(hs.mode))),
                str(hs.score),
                hs.achieved_at.strftime("%d/%m/%Y") if hs.achieved_at else "-",
            )
        return table

    def __rich__(self) -> Table:
        return self.render()


class AchievementList:
    """Unlocked achievements grouped by category."""

    def __init__(self, achievements: List[Achievement]):
        self.achievements = achievements

    def render(self) -> Panel:
        content = Text()
        if not self.achievements:
            content.append("Aucun succès débloqué pour l'instant.", Style(color=MUTED_GRAY))

        current = None
        for achievement in sorted(self.achievements, key=lambda a: a.category):
            if achievement.category != current:
                current = achievement.category
                if content:
                    content.append("\n")
                content.append(f"{get_category_name(current)}\n", Style(color=ACCENT_INDIGO, bold=True))
            content.append(f"  🎖 {achievement.name}", Style(color=ACCENT_GOLD, bold=True))
            content.append(f" - {achievement.description}\n", Style(color=MUTED_GRAY))

        return Panel(
            Align.left(content),
            title="Succès",
            border_style=ACCENT_GOLD,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()

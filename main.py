import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from achievements import get_achievement
from boolean_eval import (
    BooleanExpressionError,
    parse_expression,
    truth_column,
    truth_table,
    variable_names,
)
from exercises import get_exercise_handler, types_for_subject
from game_modes import GAME_MODES, get_game_mode
from models import Subject
from numeric_ops import conversion_steps, gcd_steps, parse_base
from session import CountdownTimer, GameSession, SessionAbortedError
from storage import (
    DEFAULT_DB_PATH,
    get_achievement_repo,
    get_game_session_repo,
    get_high_score_repo,
    get_user_repo,
    init_schema,
)
from ui import GameUI

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="BTS SIO math trainer")
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play a game session (default)")
    add_play_arguments(play_parser, defaults=argparse.SUPPRESS)

    subparsers.add_parser("modes", help="List game modes")

    tt_parser = subparsers.add_parser("truth-table", help="Print a truth table")
    tt_parser.add_argument("expression", help='Boolean expression, e.g. "A AND NOT B"')
    tt_parser.add_argument(
        "variables",
        nargs="*",
        help="Variable order (default: names in order of appearance)",
    )

    convert_parser = subparsers.add_parser(
        "convert", help="Show successive divisions for a base conversion"
    )
    convert_parser.add_argument("number", help="Number written in the source base")
    convert_parser.add_argument(
        "--base",
        "-b",
        type=int,
        default=2,
        choices=range(2, 17),
        metavar="{2..16}",
        help="Target base (default: 2)",
    )
    convert_parser.add_argument(
        "--from",
        "-f",
        dest="source_base",
        type=int,
        default=10,
        choices=range(2, 17),
        metavar="{2..16}",
        help="Base the number is written in (default: 10)",
    )

    pgcd_parser = subparsers.add_parser(
        "pgcd", help="Show the Euclidean algorithm for PGCD(a, b)"
    )
    pgcd_parser.add_argument("a", type=int)
    pgcd_parser.add_argument("b", type=int)

    board_parser = subparsers.add_parser("leaderboard", help="Show the XP ranking")
    board_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=10,
        help="Number of players to show (default: 10)",
    )

    # `main.py` with no subcommand behaves like `main.py play`
    add_play_arguments(parser)
    return parser


def add_play_arguments(parser: argparse.ArgumentParser, defaults=None) -> None:
    """Play options; the play subcommand suppresses defaults so it keeps
    values already parsed at the top level."""
    parser.add_argument(
        "--mode",
        "-m",
        default="training" if defaults is None else defaults,
        choices=[mode.id for mode in GAME_MODES],
        help="Game mode (default: training)",
    )
    parser.add_argument(
        "--user",
        "-u",
        default=defaults,
        help="Sign in as this user, creating the account if needed",
    )
    parser.add_argument(
        "--subject",
        "-s",
        default=defaults,
        choices=[subject.value for subject in Subject],
        help="Restrict training to one subject",
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def sign_in(db_path: Path, username: str, ui: GameUI) -> None:
    """Sign in as ``username``, creating the account on first use.

    Signing in counts as the day's activity for the streak.
    """
    repo = get_user_repo(db_path)
    user = repo.get_by_username(username)
    if user is None:
        user = repo.create(username)
        ui.show_info(f"Nouveau compte : {user.username}")
    repo.set_current_user(user.id)
    user = repo.update_streak(user.id, date.today())
    ui.show_success(f"Connecté en tant que {user.username}")


def run_play(args, ui: GameUI) -> int:
    """Run one interactive game session."""
    mode = get_game_mode(args.mode)

    types = None
    if args.subject:
        if mode.rules.mix_subjects:
            ui.show_error(f"Le mode {mode.name} mélange tous les sujets")
            return 2
        types = types_for_subject(Subject(args.subject))
        if not types:
            ui.show_error(f"Aucun exercice disponible pour {args.subject}")
            return 2

    if args.user:
        sign_in(args.db, args.user, ui)

    session = GameSession(
        mode,
        user_repo=get_user_repo(args.db),
        session_repo=get_game_session_repo(args.db),
        high_score_repo=get_high_score_repo(args.db),
        achievement_repo=get_achievement_repo(args.db),
        types=types,
    )
    try:
        session.start()
    except SessionAbortedError as e:
        ui.show_error(f"{e}. Utilisez --user NOM pour vous connecter.")
        return 1

    ui.clear_screen()
    ui.show_welcome(session.user, mode)

    timer = CountdownTimer(session) if mode.rules.time_limit else None
    if timer is not None:
        timer.start()

    try:
        while not session.is_finished:
            handler = get_exercise_handler(session.current_exercise)
            user_input = ui.show_exercise(handler, session)

            if user_input == "quit":
                logger.info("Session %s abandoned", session.session_id)
                ui.show_quit_message()
                return 0

            score_before = session.state.score
            result = session.submit_answer(user_input)
            if result is None:
                break

            ui.show_feedback(
                result.correct,
                result.correct_answer,
                user_input,
                points=session.state.score - score_before,
                combo=session.state.combo,
            )
            if not session.is_finished:
                ui.wait_for_continue()
                session.advance()
                ui.clear_screen()
    except KeyboardInterrupt:
        ui.show_quit_message()
        return 130
    finally:
        if timer is not None:
            timer.stop()

    if session.state.time_remaining == 0:
        ui.show_time_up()
    ui.show_session_summary(
        session.summary,
        mode,
        new_high_score=session.new_high_score,
        achievements=session.unlocked_achievements,
    )
    return 0


def run_modes(args, ui: GameUI) -> int:
    ui.show_modes(GAME_MODES)
    return 0


def run_truth_table(args, ui: GameUI) -> int:
    try:
        parse_expression(args.expression)
    except BooleanExpressionError as e:
        ui.show_error(str(e))
        return 1

    variables = args.variables or variable_names(args.expression)
    ui.show_truth_table(
        args.expression, variables, truth_table(args.expression, variables)
    )
    ui.show_info(f"Colonne : {truth_column(args.expression, variables)}")
    return 0


def run_convert(args, ui: GameUI) -> int:
    try:
        value = parse_base(args.number, args.source_base)
    except ValueError:
        ui.show_error(f"{args.number!r} n'est pas un nombre en base {args.source_base}")
        return 1

    ui.show_steps(
        f"{args.number} en base {args.base}", conversion_steps(value, args.base)
    )
    return 0


def run_pgcd(args, ui: GameUI) -> int:
    ui.show_steps(f"PGCD({args.a}, {args.b})", gcd_steps(args.a, args.b))
    return 0


def run_leaderboard(args, ui: GameUI) -> int:
    user_repo = get_user_repo(args.db)
    current = user_repo.get_current_user()

    high_scores = None
    achievements = None
    if current is not None:
        high_scores = get_high_score_repo(args.db).get_high_scores(current.id)
        achievements = [
            a
            for a in map(get_achievement, get_achievement_repo(args.db).get_unlocked(current.id))
            if a is not None
        ]

    ui.show_leaderboard(
        user_repo.get_leaderboard(args.limit),
        current_user_id=current.id if current else None,
        high_scores=high_scores,
        achievements=achievements,
    )
    return 0


COMMANDS = {
    "play": run_play,
    "modes": run_modes,
    "truth-table": run_truth_table,
    "convert": run_convert,
    "pgcd": run_pgcd,
    "leaderboard": run_leaderboard,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    init_schema(args.db)
    ui = GameUI()

    # Default to interactive play
    command = COMMANDS[args.command or "play"]
    return command(args, ui)


if __name__ == "__main__":
    sys.exit(main())

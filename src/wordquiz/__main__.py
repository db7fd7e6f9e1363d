"""Command line administration for the quiz platform."""
import argparse
import logging
import sys
from typing import List, Optional

from wordquiz.app import WordQuizApp
from wordquiz.errors import QuizError
from wordquiz.logging_config import setup_logging
from wordquiz.seed import seed_words, truncate_tables

logger = logging.getLogger(__name__)


def _cmd_init_db(app: WordQuizApp, args: argparse.Namespace) -> int:
    # Tables are created by app.start()
    print("Database ready")
    return 0


def _cmd_seed(app: WordQuizApp, args: argparse.Namespace) -> int:
    result = seed_words(app.db)
    print(result.message)
    for error in result.errors:
        print(f"  {error}")
    return 0


def _cmd_truncate(app: WordQuizApp, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to truncate without --yes", file=sys.stderr)
        return 1
    counts = truncate_tables(app.db)
    for table, count in counts.items():
        print(f"{table}: {count} rows deleted")
    return 0


def _cmd_words(app: WordQuizApp, args: argparse.Namespace) -> int:
    words = app.words.list_words(active_only=not args.all)
    for word in words:
        flag = "" if word.is_active else " (inactive)"
        print(f"{word.id:>5}  {word.text:<20} {word.difficulty.value:<7} used {word.times_used}{flag}")
    print(f"{len(words)} words")
    return 0


def _cmd_sessions(app: WordQuizApp, args: argparse.Namespace) -> int:
    for session in app.quiz.list_sessions():
        print(
            f"{session.id:>5}  {session.name:<24} {session.status.value:<10} "
            f"word {session.current_word_index + 1}/{session.total_words}"
        )
    return 0


def _cmd_stats(app: WordQuizApp, args: argparse.Namespace) -> int:
    stats = app.quiz.get_session_stats(args.session_id)
    session = stats.session
    print(f"Session {session.id}: {session.name} [{session.status.value}]")
    print(f"Attempts: {session.total_attempts}, correct: {session.correct_answers}")
    print(f"Accuracy: {stats.accuracy:.2f}%")
    print(f"Average time: {stats.average_time:.2f}s")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordquiz", description="Word quiz administration")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create database tables").set_defaults(func=_cmd_init_db)
    sub.add_parser("seed", help="Load the sample word bank").set_defaults(func=_cmd_seed)

    truncate = sub.add_parser("truncate", help="Delete all words, sessions and attempts")
    truncate.add_argument("--yes", action="store_true", help="Confirm deletion")
    truncate.set_defaults(func=_cmd_truncate)

    words = sub.add_parser("words", help="List the word bank")
    words.add_argument("--all", action="store_true", help="Include inactive words")
    words.set_defaults(func=_cmd_words)

    sub.add_parser("sessions", help="List quiz sessions").set_defaults(func=_cmd_sessions)

    stats = sub.add_parser("stats", help="Show statistics for a session")
    stats.add_argument("session_id", type=int)
    stats.set_defaults(func=_cmd_stats)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    with WordQuizApp() as app:
        try:
            return args.func(app, args)
        except QuizError as e:
            logger.error(f"{e.kind}: {e.message}")
            print(f"Error: {e.message}", file=sys.stderr)
            return 2


if __name__ == "__main__":
    sys.exit(main())

"""Application entry point for QuizPlayer."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication

from quiz_player.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION, HELP_TEXT
from quiz_player.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SERVER_URL
from quiz_player.constants.ui_constants import ACCESS_DENIED_TITLE, LOAD_FAILED_TITLE
from quiz_player.core.models import Credentials, SessionMode, SessionOptions, ViewerTier
from quiz_player.core.quiz_exporter import quiz_to_play_data, save_play_data
from quiz_player.core.quiz_importer import QuizImportError, fetch_quiz_play_data, load_quiz_from_file
from quiz_player.core.quiz_session import EmptyQuizError, QuizSession, SessionListener
from quiz_player.core.services.access_gate import SessionAccessDenied
from quiz_player.core.services.completion_client import HttpCompletionClient
from quiz_player.core.services.persisted_store import JsonFileStore
from quiz_player.server.api_server import CompletionStore, start_api_server
from quiz_player.ui.dialog_helpers import show_error
from quiz_player.ui.player_main_window import PlayerMainWindow
from quiz_player.ui.qt_scheduler import QtScheduler
from quiz_player.utils.logging_config import configure_logging

_DEFAULT_STORE_PATH = Path.home() / ".quiz_player" / "store.json"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz-player",
        description=APP_ABOUT_TEXT,
        epilog=HELP_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--quiz", type=Path, help="Quiz .txt or play-data .json file")
    source.add_argument("--slug", help="Fetch play data for this quiz from --server-url")
    parser.add_argument("--mode", choices=[m.value for m in SessionMode], default=SessionMode.FULL.value)
    parser.add_argument("--tier", choices=[t.value for t in ViewerTier], default=ViewerTier.FREE.value)
    parser.add_argument("--archived", action="store_true", help="The quiz is not the newest one")
    parser.add_argument("--max-questions", type=int, default=None, help="Demo cap in restricted mode")
    parser.add_argument("--store", type=Path, default=_DEFAULT_STORE_PATH, help="Progress file")
    parser.add_argument("--server-url", default=DEFAULT_SERVER_URL)
    parser.add_argument("--user-id", default=None)
    parser.add_argument("--token", default=None)
    parser.add_argument("--serve", action="store_true", help="Also run the completion server locally")
    parser.add_argument("--export", type=Path, default=None, help="Write the quiz as play-data JSON and exit")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, load the quiz, optionally start the API server, and launch the Qt UI."""
    args = _build_parser().parse_args(argv)
    logger = configure_logging(verbose=args.verbose)
    logger.info("Starting %s %s…", APP_NAME, APP_VERSION)

    app = QApplication(sys.argv)

    try:
        if args.quiz is not None:
            quiz = load_quiz_from_file(args.quiz).quiz
        else:
            quiz = fetch_quiz_play_data(args.server_url, args.slug)
    except QuizImportError as exc:
        logger.error("Could not load quiz: %s", exc)
        show_error(None, LOAD_FAILED_TITLE, str(exc))
        sys.exit(1)

    if args.export is not None:
        save_play_data(args.export, quiz)
        logger.info("Exported %s to %s", quiz.slug, args.export)
        return

    if args.serve:
        start_api_server(
            store=CompletionStore(),
            quizzes={quiz.slug: quiz_to_play_data(quiz)},
            host=DEFAULT_HOST,
            port=DEFAULT_PORT,
        )
        logger.info("Completion server listening on %s", DEFAULT_SERVER_URL)

    credentials = None
    if args.user_id and args.token:
        credentials = Credentials(user_id=args.user_id, token=args.token)
    options = SessionOptions(
        mode=SessionMode(args.mode),
        viewer_tier=ViewerTier(args.tier),
        is_newest=not args.archived,
        max_questions=args.max_questions,
        credentials=credentials,
    )

    scheduler = QtScheduler()
    store = JsonFileStore(args.store)
    client = None
    if credentials is not None:
        client = HttpCompletionClient(args.server_url, credentials, scheduler=scheduler)

    def build_session(listener: SessionListener) -> QuizSession:
        return QuizSession(
            quiz,
            scheduler,
            options=options,
            store=store,
            client=client,
            listener=listener,
        )

    try:
        window = PlayerMainWindow(build_session)
    except (SessionAccessDenied, EmptyQuizError) as exc:
        logger.error("Cannot start session: %s", exc)
        show_error(None, ACCESS_DENIED_TITLE, str(exc))
        sys.exit(1)

    window.resize(900, 700)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

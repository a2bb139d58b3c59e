"""Qt UI components for the quiz player."""

from .dialog_helpers import (
    ask_retry_submission,
    confirm_reset_quiz,
    show_error,
    show_info,
    show_upsell,
)
from .player_main_window import PlayerMainWindow
from .qt_scheduler import QtScheduler
from .question_renderer import render_question, render_round_intro

__all__ = [
    "PlayerMainWindow",
    "QtScheduler",
    "ask_retry_submission",
    "confirm_reset_quiz",
    "show_error",
    "show_info",
    "show_upsell",
    "render_question",
    "render_round_intro",
]

"""Qt main window that plays one quiz session."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from quiz_player.constants.ui_constants import (
    BUTTON_DISMISS,
    BUTTON_FINISH,
    BUTTON_HIDE,
    BUTTON_MARK_CORRECT,
    BUTTON_NEXT,
    BUTTON_PAUSE_TIMER,
    BUTTON_PREVIOUS,
    BUTTON_RESET,
    BUTTON_RESUME_TIMER,
    BUTTON_RETRY_SUBMISSION,
    BUTTON_REVEAL,
    BUTTON_START_ROUND,
    BUTTON_UNMARK_CORRECT,
    DEMO_COMPLETE_TEMPLATE,
    DEMO_COMPLETE_TITLE,
    JUMP_LABEL,
    QUIZ_COMPLETE_TEMPLATE,
    QUIZ_COMPLETE_TITLE,
    QUIZ_INCOMPLETE_TEMPLATE,
    QUIZ_INCOMPLETE_TITLE,
    SCORE_TEMPLATE,
    SHORTCUT_TOGGLE_TIMER,
    TIMER_TEMPLATE,
    WINDOW_TITLE,
)
from quiz_player.core.models import (
    AchievementInstance,
    AchievementNotice,
    AnswerState,
    Screen,
    SessionCursor,
    SubmissionState,
)
from quiz_player.core.markdown_renderer import renderer
from quiz_player.core.quiz_session import QuizSession, SessionListener
from quiz_player.styling.color_palette import ColorPalette, Theme
from quiz_player.styling.styles import Styles
from quiz_player.ui.dialog_helpers import (
    ask_retry_submission,
    confirm_reset_quiz,
    show_info,
    show_upsell,
)
from quiz_player.ui.question_renderer import render_question, render_round_intro

_STATUS_MESSAGE_MS = 3000


class _WindowListener(SessionListener):
    """Forwards session events to the window."""

    def __init__(self, window: "PlayerMainWindow") -> None:
        self._window = window

    def cursor_changed(self, cursor: SessionCursor) -> None:
        self._window.refresh()

    def answer_state_changed(self, question_id: str, state: AnswerState, answer_visible: bool) -> None:
        self._window.refresh()

    def score_pulse(self, question_id: str, score: int) -> None:
        self._window.statusBar().showMessage(f"+1! Score {score}", _STATUS_MESSAGE_MS)

    def achievement_unlocked(self, notice: AchievementNotice) -> None:
        self._window.add_achievement(notice.achievement)

    def achievement_expired(self, achievement: AchievementInstance) -> None:
        self._window.remove_achievement(achievement.id)

    def upsell_prompt(self) -> None:
        self._window.defer(lambda: show_upsell(self._window))

    def session_complete(self, score: int, total: int) -> None:
        message = QUIZ_COMPLETE_TEMPLATE.format(score=score, total=total)
        self._window.defer(lambda: show_info(self._window, QUIZ_COMPLETE_TITLE, message))

    def session_incomplete(self, unanswered_numbers: list[int]) -> None:
        numbers = ", ".join(str(number) for number in unanswered_numbers)
        message = QUIZ_INCOMPLETE_TEMPLATE.format(numbers=numbers)
        self._window.defer(lambda: show_info(self._window, QUIZ_INCOMPLETE_TITLE, message))

    def demo_complete(self, score: int, max_questions: int) -> None:
        message = DEMO_COMPLETE_TEMPLATE.format(score=score, total=max_questions)
        self._window.defer(lambda: show_info(self._window, DEMO_COMPLETE_TITLE, message))

    def timer_ticked(self, elapsed_seconds: int) -> None:
        self._window.update_timer(elapsed_seconds)

    def submission_succeeded(self, unlocked_slugs: list[str]) -> None:
        self._window.statusBar().showMessage("Result saved.", _STATUS_MESSAGE_MS)
        self._window.refresh()

    def submission_failed(self, reason: str) -> None:
        self._window.refresh()
        self._window.defer(lambda: self._window.offer_retry(reason))


class PlayerMainWindow(QMainWindow):
    """Shows the round intro or current question and drives the session."""

    def __init__(
        self,
        build_session: Callable[[SessionListener], QuizSession],
        theme: Theme = Theme.LIGHT,
    ) -> None:
        super().__init__()
        self._theme = theme
        self._achievement_rows: dict[str, QWidget] = {}
        self.session = build_session(_WindowListener(self))
        self.setWindowTitle(f"{WINDOW_TITLE} · {self.session.quiz.title}")

        self._build_ui()
        self.setStyleSheet(
            Styles.get_player_window_style(self.session.quiz.accent_color, self._theme)
        )
        self.update_timer(self.session.elapsed_seconds)
        self.refresh()

    # --- Layout ---

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        header_row = QHBoxLayout()
        self.title_label = QLabel(self.session.quiz.title, self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.title_label, 1)
        self.score_label = QLabel(self)
        header_row.addWidget(self.score_label)
        self.timer_label = QLabel(self)
        header_row.addWidget(self.timer_label)
        self.pause_button = self._add_button(
            header_row, BUTTON_PAUSE_TIMER, self._handle_toggle_timer
        )
        self.pause_button.setShortcut(SHORTCUT_TOGGLE_TIMER)
        root_layout.addLayout(header_row)

        self.content_view = QWebEngineView(self)
        root_layout.addWidget(self.content_view, 1)

        self.state_label = QLabel(self)
        root_layout.addWidget(self.state_label)

        self.achievements_layout = QVBoxLayout()
        root_layout.addLayout(self.achievements_layout)

        answer_row = QHBoxLayout()
        self.reveal_button = self._add_button(answer_row, BUTTON_REVEAL, self._handle_reveal)
        self.hide_button = self._add_button(answer_row, BUTTON_HIDE, self._handle_hide)
        self.correct_button = self._add_button(answer_row, BUTTON_MARK_CORRECT, self._handle_correct)
        self.incorrect_button = self._add_button(
            answer_row, BUTTON_UNMARK_CORRECT, self._handle_incorrect
        )
        root_layout.addLayout(answer_row)

        nav_row = QHBoxLayout()
        self.previous_button = self._add_button(nav_row, BUTTON_PREVIOUS, self._handle_previous)
        self.start_round_button = self._add_button(
            nav_row, BUTTON_START_ROUND, self._handle_start_round
        )
        self.start_round_button.setObjectName("primaryButton")
        self.next_button = self._add_button(nav_row, BUTTON_NEXT, self._handle_next)
        self.finish_button = self._add_button(nav_row, BUTTON_FINISH, self._handle_finish)
        root_layout.addLayout(nav_row)

        tools_row = QHBoxLayout()
        tools_row.addWidget(QLabel(JUMP_LABEL, self))
        self.jump_spin = QSpinBox(self)
        self.jump_spin.setRange(1, self.session.total_questions)
        tools_row.addWidget(self.jump_spin)
        self._add_button(tools_row, "Go", self._handle_jump)
        tools_row.addStretch(1)
        self.retry_button = self._add_button(
            tools_row, BUTTON_RETRY_SUBMISSION, self._handle_retry
        )
        self._add_button(tools_row, BUTTON_RESET, self._handle_reset)
        root_layout.addLayout(tools_row)

    def _add_button(
        self, layout: QHBoxLayout, text: str, handler: Callable[[], object]
    ) -> QPushButton:
        button = QPushButton(text, self)
        button.clicked.connect(lambda _checked=False: handler())
        layout.addWidget(button)
        return button

    # --- Rendering ---

    def refresh(self) -> None:
        session = self.session
        cursor = session.cursor
        on_question = cursor.screen is Screen.QUESTION

        if on_question:
            question = session.current_question
            state = session.answer_state(question.id)
            visible = session.is_answer_visible(question.id)
            self._show_html(
                render_question(question, cursor.question_number, session.total_questions, visible)
            )
            self.state_label.setText(state.value.capitalize())
            self.state_label.setStyleSheet(Styles.get_state_label_style(state.value, self._theme))
            self.reveal_button.setEnabled(not visible)
            self.hide_button.setEnabled(visible)
            self.correct_button.setEnabled(state is not AnswerState.CORRECT)
            self.incorrect_button.setEnabled(state is AnswerState.CORRECT)
        else:
            quiz_round = session.current_round
            count = len(session.quiz.questions_in_round(quiz_round.number))
            self._show_html(render_round_intro(quiz_round, count))
            self.state_label.setText("")
            for button in (
                self.reveal_button,
                self.hide_button,
                self.correct_button,
                self.incorrect_button,
            ):
                button.setEnabled(False)

        self.start_round_button.setVisible(not on_question)
        self.next_button.setEnabled(on_question)
        self.previous_button.setEnabled(cursor.question_index > 0)
        self.jump_spin.blockSignals(True)
        self.jump_spin.setValue(cursor.question_number)
        self.jump_spin.blockSignals(False)
        self.score_label.setText(
            SCORE_TEMPLATE.format(score=session.score, total=session.total_questions)
        )
        self.retry_button.setVisible(session.submission_state is SubmissionState.FAILED)
        self._refresh_pause_button()

    def _refresh_pause_button(self) -> None:
        session = self.session
        self.pause_button.setText(
            BUTTON_RESUME_TIMER if session.is_timer_paused else BUTTON_PAUSE_TIMER
        )
        self.pause_button.setEnabled(session.is_timer_running or session.is_timer_paused)
        self.pause_button.setShortcut(SHORTCUT_TOGGLE_TIMER)

    def _show_html(self, fragment: str) -> None:
        text_color = ColorPalette.TEXT_PRIMARY.get(self._theme)
        self.content_view.setHtml(
            renderer.wrap_document(fragment, self.session.quiz.title, text_color)
        )

    def update_timer(self, elapsed_seconds: int) -> None:
        minutes, seconds = divmod(elapsed_seconds, 60)
        self.timer_label.setText(TIMER_TEMPLATE.format(minutes=minutes, seconds=seconds))

    def add_achievement(self, achievement: AchievementInstance) -> None:
        row = QWidget(self)
        row_layout = QHBoxLayout()
        row_layout.setContentsMargins(0, 0, 0, 0)
        row.setLayout(row_layout)
        text = f"🏆 {achievement.title}"
        if achievement.description:
            text = f"{text}: {achievement.description}"
        label = QLabel(text, row)
        label.setObjectName("achievementLabel")
        row_layout.addWidget(label, 1)
        dismiss_button = QPushButton(BUTTON_DISMISS, row)
        dismiss_button.clicked.connect(lambda _checked=False: self._handle_dismiss(achievement.id))
        row_layout.addWidget(dismiss_button)
        self.achievements_layout.addWidget(row)
        self._achievement_rows[achievement.id] = row

    def remove_achievement(self, achievement_id: str) -> None:
        row = self._achievement_rows.pop(achievement_id, None)
        if row is not None:
            self.achievements_layout.removeWidget(row)
            row.deleteLater()

    def offer_retry(self, reason: str) -> None:
        if ask_retry_submission(self, reason):
            self.session.retry_submission()

    def defer(self, action: Callable[[], None]) -> None:
        """Run ``action`` after the current session call has returned."""
        QTimer.singleShot(0, action)

    # --- Handlers ---

    def _handle_reveal(self) -> None:
        self.session.reveal_answer()

    def _handle_hide(self) -> None:
        self.session.hide_answer()

    def _handle_correct(self) -> None:
        self.session.mark_correct()

    def _handle_incorrect(self) -> None:
        self.session.mark_incorrect()

    def _handle_previous(self) -> None:
        self.session.go_to_previous()

    def _handle_next(self) -> None:
        self.session.go_to_next()

    def _handle_start_round(self) -> None:
        self.session.start_round()

    def _handle_finish(self) -> None:
        self.session.finish()

    def _handle_toggle_timer(self) -> None:
        self.session.toggle_timer()
        self._refresh_pause_button()

    def _handle_jump(self) -> None:
        if not self.session.jump_to(self.jump_spin.value()):
            self.statusBar().showMessage("That question is not available.", _STATUS_MESSAGE_MS)
            self.refresh()

    def _handle_retry(self) -> None:
        self.session.retry_submission()

    def _handle_dismiss(self, achievement_id: str) -> None:
        self.session.dismiss_achievement(achievement_id)
        self.remove_achievement(achievement_id)

    def _handle_reset(self) -> None:
        if not confirm_reset_quiz(self):
            return
        for achievement_id in list(self._achievement_rows):
            self.remove_achievement(achievement_id)
        self.session.reset()
        self.update_timer(self.session.elapsed_seconds)
        self.refresh()

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        self.session.close()
        super().closeEvent(event)

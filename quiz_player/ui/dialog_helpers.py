"""Helper functions for common dialog patterns in the player UI."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget

from quiz_player.constants.ui_constants import (
    CONFIRM_RESET_MESSAGE,
    CONFIRM_RESET_TITLE,
    SUBMISSION_FAILED_TEMPLATE,
    SUBMISSION_FAILED_TITLE,
    UPSELL_MESSAGE,
    UPSELL_TITLE,
)


def confirm_reset_quiz(parent: QWidget) -> bool:
    """Ask before throwing away progress.

    Args:
        parent: Parent widget for the dialog

    Returns:
        True if user confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        CONFIRM_RESET_TITLE,
        CONFIRM_RESET_MESSAGE,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def ask_retry_submission(parent: QWidget, reason: str) -> bool:
    """Report a failed completion submission and offer a retry.

    Args:
        parent: Parent widget for the dialog
        reason: Human-readable failure description

    Returns:
        True if the user wants to retry now
    """
    reply = QMessageBox.warning(
        parent,
        SUBMISSION_FAILED_TITLE,
        SUBMISSION_FAILED_TEMPLATE.format(reason=reason),
        QMessageBox.Retry | QMessageBox.Close,
        QMessageBox.Retry,
    )
    return reply == QMessageBox.Retry


def show_upsell(parent: QWidget) -> None:
    """Prompt a restricted-mode player to sign up."""
    show_info(parent, UPSELL_TITLE, UPSELL_MESSAGE)


def show_error(parent: QWidget | None, title: str, message: str) -> None:
    """Show error dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Error message
    """
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    """Show information dialog."""
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    msg_box.exec()

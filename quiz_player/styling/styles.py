"""Centralized Qt stylesheets for the player window."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on theme and quiz accent."""

    @staticmethod
    def get_player_window_style(accent_color: str, theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QWebEngineView {{
                background-color: {ColorPalette.BACKGROUND_CARD.get(theme)};
                border: 3px solid {accent_color};
                border-radius: 12px;
                padding: 12px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.BUTTON_DISABLED_TEXT.get(theme)};
            }}
            QPushButton#primaryButton {{
                background-color: {accent_color};
                border: 1px solid {accent_color};
                font-weight: bold;
            }}
            QLabel#achievementLabel {{
                color: {ColorPalette.ACHIEVEMENT.get(theme)};
                font-weight: bold;
            }}
            QSpinBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
        """

    @staticmethod
    def get_state_label_style(state: str, theme: Theme = Theme.LIGHT) -> str:
        if state == "correct":
            return f"color: {ColorPalette.CORRECT.get(theme)}; font-weight: bold;"
        if state == "incorrect":
            return f"color: {ColorPalette.INCORRECT.get(theme)}; font-weight: bold;"
        return f"color: {ColorPalette.TEXT_SECONDARY.get(theme)};"

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

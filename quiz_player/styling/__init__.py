"""Styling module for the QuizPlayer window."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]

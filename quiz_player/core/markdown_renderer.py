"""Markdown rendering for question prompts, answers and round blurbs.

Fragments are wrapped into a standalone document for QWebEngineView. Only
CommonMark plus tables and strikethrough are enabled, and raw HTML in quiz
text is escaped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts quiz markdown into HTML fragments."""

    enable_html: bool = False
    empty_placeholder: str = "<p><em>No content provided.</em></p>"
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return self.empty_placeholder
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line without the wrapping paragraph."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return ""
        return self._markdown.renderInline(sanitized)

    def wrap_document(self, body_html: str, title: str, text_color: str = "#1f2430") -> str:
        """Wrap a fragment inside a minimal HTML document for QWebEngineView."""

        return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{escape(title)}</title>
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: {text_color}; }}
      .question-html {{ font-size: 1.2rem; line-height: 1.5; }}
    </style>
  </head>
  <body>
    <div class="question-html">{body_html}</div>
  </body>
</html>"""

    @staticmethod
    def plain(text: str) -> str:
        return escape(text)


# Shared instance; rendering keeps no per-call state.
renderer = MarkdownRenderer()

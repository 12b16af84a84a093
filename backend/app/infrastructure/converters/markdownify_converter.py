"""HTML → Markdown conversion backed by the markdownify library."""

import logging

from markdownify import ATX, markdownify

from app.application.interfaces import MarkupConverter

logger = logging.getLogger(__name__)


class MarkdownifyConverter(MarkupConverter):
    """Converts article content (HTML or plain text) to Markdown.

    Markdown escaping (``*``, ``_`` and punctuation such as ``#``, ``+``, ``-``)
    is disabled, so plain text and content already written in Markdown
    survive the export unchanged.
    """

    def __init__(self, heading_style: str = ATX, bullets: str = "-"):
        self._options = {
            "heading_style": heading_style,
            "bullets": bullets,
            "escape_asterisks": False,
            "escape_underscores": False,
            "escape_misc": False,
        }

    def to_markdown(self, markup: str) -> str:
        if not markup:
            return ""
        converted = markdownify(markup, **self._options)
        logger.debug("Converted %d chars of markup to %d chars of Markdown", len(markup), len(converted))
        return converted.strip()

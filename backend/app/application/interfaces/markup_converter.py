"""Abstract interface (port) for converting stored markup to Markdown."""

from abc import ABC, abstractmethod


class MarkupConverter(ABC):
    """Port for HTML → Markdown conversion — implemented in the infrastructure layer."""

    @abstractmethod
    def to_markdown(self, markup: str) -> str:
        """Convert an HTML (or HTML-like) fragment to Markdown text."""
        ...

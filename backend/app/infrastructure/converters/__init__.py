from .markdownify_converter import MarkdownifyConverter

__all__ = ["MarkdownifyConverter"]

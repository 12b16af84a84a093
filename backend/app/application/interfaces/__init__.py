from .article_repository import ArticleRepository
from .article_history_repository import ArticleHistoryRepository
from .markup_converter import MarkupConverter

__all__ = [
    "ArticleRepository",
    "ArticleHistoryRepository",
    "MarkupConverter",
]

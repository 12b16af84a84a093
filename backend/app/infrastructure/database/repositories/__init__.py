from .article_repository import SQLAlchemyArticleRepository
from .article_history_repository import SQLAlchemyArticleHistoryRepository

__all__ = [
    "SQLAlchemyArticleRepository",
    "SQLAlchemyArticleHistoryRepository",
]

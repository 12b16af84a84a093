from .article import ArticleHistoryModel, ArticleModel

__all__ = [
    "ArticleModel",
    "ArticleHistoryModel",
]

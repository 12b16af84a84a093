from .article import Article, ArticleHistory
from .search import ArticleSearchCriteria, Page, PageRequest, SORTABLE_FIELDS

__all__ = [
    "Article",
    "ArticleHistory",
    "ArticleSearchCriteria",
    "Page",
    "PageRequest",
    "SORTABLE_FIELDS",
]

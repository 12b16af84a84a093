from .article import (
    ArticleCreate,
    ArticleDeletedResponse,
    ArticleHistoryResponse,
    ArticlePageResponse,
    ArticleResponse,
    ArticleUpdate,
)

__all__ = [
    "ArticleCreate",
    "ArticleUpdate",
    "ArticleResponse",
    "ArticlePageResponse",
    "ArticleHistoryResponse",
    "ArticleDeletedResponse",
]

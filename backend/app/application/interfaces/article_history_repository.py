"""Abstract repository interface (port) for article history snapshots."""

from abc import ABC, abstractmethod

from app.domain.entities import ArticleHistory


class ArticleHistoryRepository(ABC):
    """Port for history persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def create(self, history: ArticleHistory) -> ArticleHistory:
        """Persist a snapshot and return it with the generated ID."""
        ...

    @abstractmethod
    async def list_by_article(self, article_id: int) -> list[ArticleHistory]:
        """All snapshots of one article, most recent first."""
        ...

    @abstractmethod
    async def delete_by_article(self, article_id: int) -> int:
        """Delete every snapshot of one article. Returns the number removed."""
        ...

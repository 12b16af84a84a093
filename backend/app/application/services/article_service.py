"""Application service (use case) for Article operations."""

import logging
from datetime import datetime, timezone

from app.application.interfaces import (
    ArticleHistoryRepository,
    ArticleRepository,
    MarkupConverter,
)
from app.application.schemas import ArticleCreate, ArticleUpdate
from app.domain.entities import (
    Article,
    ArticleHistory,
    ArticleSearchCriteria,
    Page,
    PageRequest,
)
from app.domain.exceptions import EntityNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)


class ArticleService:
    """Orchestrates article business logic: validation, history snapshots,
    view counting and Markdown export.

    Depends only on the repository and converter ports (DI). Every call runs
    inside the caller's unit of work; repositories flush, the session owner
    commits or rolls back.
    """

    def __init__(
        self,
        repository: ArticleRepository,
        history_repository: ArticleHistoryRepository,
        markup_converter: MarkupConverter,
        max_page_size: int = 100,
    ) -> None:
        self._repository = repository
        self._history_repository = history_repository
        self._markup_converter = markup_converter
        self._max_page_size = max_page_size

    # ── Reads ────────────────────────────────────────────────────────

    async def get_article(self, article_id: int) -> Article:
        """Fetch an article and count the read as a view."""
        return await self.increment_views(article_id)

    async def increment_views(self, article_id: int) -> Article:
        article = await self._repository.increment_views(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        logger.debug("Article %s viewed (views=%d)", article_id, article.views)
        return article

    async def list_articles(self, page_request: PageRequest) -> Page[Article]:
        return await self._repository.get_page(self._clamp(page_request))

    async def list_recent(self, page: int = 0, size: int = 10) -> Page[Article]:
        return await self.list_articles(PageRequest.of(page, size, "created_at", "desc"))

    async def list_popular(self, page: int = 0, size: int = 10) -> Page[Article]:
        return await self.list_articles(PageRequest.of(page, size, "views", "desc"))

    async def list_by_keyword(self, keyword: str, page: int = 0, size: int = 10) -> Page[Article]:
        """Articles whose keywords contain *keyword*; a blank keyword still skips NULL keywords."""
        page_request = self._clamp(PageRequest.of(page, size))
        return await self._repository.find_by_keywords((keyword or "").strip(), page_request)

    async def search_articles(
        self, criteria: ArticleSearchCriteria, page_request: PageRequest
    ) -> Page[Article]:
        """Return one page of articles matching every filter present in *criteria*."""
        return await self._repository.search(criteria, self._clamp(page_request))

    async def get_article_history(self, article_id: int) -> list[ArticleHistory]:
        """All content snapshots of an article, most recent first."""
        if not await self._repository.exists(article_id):
            raise EntityNotFoundError("Article", article_id)
        return await self._history_repository.list_by_article(article_id)

    # ── Writes ───────────────────────────────────────────────────────

    async def create_article(self, data: ArticleCreate) -> Article:
        """Persist a new article together with its initial history snapshot."""
        self._validate(data.title, data.content)

        now = datetime.now(timezone.utc)
        article = Article(
            title=data.title,
            content=data.content,
            keywords=data.keywords,
            views=0,
            created_at=now,
            updated_at=now,
        )
        created = await self._repository.create(article)
        await self._history_repository.create(ArticleHistory.snapshot(created))

        logger.info("Created new article with ID: %s", created.id)
        return created

    async def update_article(self, article_id: int, data: ArticleUpdate) -> Article:
        """Snapshot the current content, then replace title, content and keywords."""
        self._validate(data.title, data.content)

        article = await self._require(article_id)
        await self._history_repository.create(ArticleHistory.snapshot(article))

        article.update(title=data.title, content=data.content, keywords=data.keywords)
        updated = await self._repository.update(article)

        logger.info("Updated article with ID: %s", article_id)
        return updated

    async def delete_article(self, article_id: int) -> bool:
        """Delete an article and every history snapshot it owns."""
        await self._require(article_id)

        removed = await self._history_repository.delete_by_article(article_id)
        deleted = await self._repository.delete(article_id)

        logger.info("Deleted article with ID: %s (%d history records)", article_id, removed)
        return deleted

    # ── Export ───────────────────────────────────────────────────────

    async def export_to_markdown(self, article_id: int) -> str:
        """Render an article as a Markdown document with a metadata footer.

        Exporting does not count as a view.
        """
        article = await self._require(article_id)
        converted = self._markup_converter.to_markdown(article.content)

        return (
            f"# {article.title}\n\n"
            f"{converted}\n\n"
            "---\n"
            f"Keywords: {article.keywords or ''}\n"
            f"Created: {article.created_at.isoformat()}\n"
            f"Last Updated: {article.updated_at.isoformat()}\n"
            f"Views: {article.views}\n"
        )

    # ── Helpers ──────────────────────────────────────────────────────

    async def _require(self, article_id: int) -> Article:
        article = await self._repository.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        return article

    def _clamp(self, page_request: PageRequest) -> PageRequest:
        if page_request.size <= self._max_page_size:
            return page_request
        return PageRequest(
            page=page_request.page,
            size=self._max_page_size,
            sort_by=page_request.sort_by,
            direction=page_request.direction,
        )

    @staticmethod
    def _validate(title: str | None, content: str | None) -> None:
        if not title or not title.strip():
            raise InvalidInputError("Article title cannot be empty", field="title")
        if not content or not content.strip():
            raise InvalidInputError("Article content cannot be empty", field="content")

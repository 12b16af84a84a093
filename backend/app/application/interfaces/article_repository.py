"""Abstract repository interfaces (ports) — define the contract, not the implementation."""

from abc import ABC, abstractmethod

from app.domain.entities import Article, ArticleSearchCriteria, Page, PageRequest


class ArticleRepository(ABC):
    """Port for article persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, article_id: int) -> Article | None:
        """Retrieve a single article by its ID."""
        ...

    @abstractmethod
    async def exists(self, article_id: int) -> bool:
        """Check whether an article with the given ID exists."""
        ...

    @abstractmethod
    async def get_page(self, page_request: PageRequest) -> Page[Article]:
        """Retrieve one page of all articles in the requested order."""
        ...

    @abstractmethod
    async def search(
        self, criteria: ArticleSearchCriteria, page_request: PageRequest
    ) -> Page[Article]:
        """Retrieve one page of articles matching every present filter.

        An empty criteria object applies no filter at all.
        """
        ...

    @abstractmethod
    async def find_by_keywords(self, keyword: str, page_request: PageRequest) -> Page[Article]:
        """Case-insensitive substring match against the keywords field only."""
        ...

    @abstractmethod
    async def create(self, article: Article) -> Article:
        """Persist a new article and return it with the generated ID."""
        ...

    @abstractmethod
    async def update(self, article: Article) -> Article:
        """Write title, content, keywords and updated_at of an existing article."""
        ...

    @abstractmethod
    async def increment_views(self, article_id: int) -> Article | None:
        """Atomically add one to the view counter. Returns None if not found."""
        ...

    @abstractmethod
    async def delete(self, article_id: int) -> bool:
        """Delete an article. Returns True if deleted, False if not found."""
        ...

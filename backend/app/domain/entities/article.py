"""Domain entities — pure Python business objects, no framework dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Article:
    """Core domain entity representing a knowledge-base article."""

    title: str
    content: str
    keywords: str | None = None
    views: int = 0
    id: int | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def update(self, title: str, content: str, keywords: str | None) -> None:
        """Replace the editable fields and refresh the updated_at timestamp.

        Views, id and created_at are never changed by an update.
        """
        self.title = title
        self.content = content
        self.keywords = keywords
        self.updated_at = _utcnow()


@dataclass
class ArticleHistory:
    """Immutable snapshot of an article's content at a point in time."""

    article_id: int
    content: str
    id: int | None = None
    modified_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def snapshot(cls, article: Article) -> "ArticleHistory":
        """Capture the article's current content."""
        if article.id is None:
            raise ValueError("Cannot snapshot an article that has not been persisted")
        return cls(article_id=article.id, content=article.content)

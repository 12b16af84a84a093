"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.application.services import ArticleService
from app.infrastructure.converters import MarkdownifyConverter
from app.infrastructure.database.session import get_db_session
from app.infrastructure.database.repositories import (
    SQLAlchemyArticleHistoryRepository,
    SQLAlchemyArticleRepository,
)


async def get_article_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ArticleService, None]:
    """Provides an ArticleService with both repositories bound to the request session."""
    settings = get_settings()
    yield ArticleService(
        repository=SQLAlchemyArticleRepository(session),
        history_repository=SQLAlchemyArticleHistoryRepository(session),
        markup_converter=MarkdownifyConverter(),
        max_page_size=settings.max_page_size,
    )

"""SQLAlchemy implementation of the ArticleHistoryRepository."""

from datetime import timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import ArticleHistoryRepository
from app.domain.entities import ArticleHistory
from app.infrastructure.database.models import ArticleHistoryModel


class SQLAlchemyArticleHistoryRepository(ArticleHistoryRepository):
    """Append-only snapshot store; rows are never updated."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, history: ArticleHistory) -> ArticleHistory:
        model = ArticleHistoryModel(
            article_id=history.article_id,
            content=history.content,
            modified_at=history.modified_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def list_by_article(self, article_id: int) -> list[ArticleHistory]:
        result = await self._session.execute(self._by_article(article_id))
        return [self._to_entity(m) for m in result.scalars().all()]

    async def delete_by_article(self, article_id: int) -> int:
        result = await self._session.execute(self._by_article(article_id))
        models = result.scalars().all()
        count = len(models)
        for model in models:
            await self._session.delete(model)
        if count > 0:
            await self._session.flush()
        return count

    @staticmethod
    def _by_article(article_id: int):
        return (
            select(ArticleHistoryModel)
            .where(ArticleHistoryModel.article_id == article_id)
            .order_by(ArticleHistoryModel.modified_at.desc(), ArticleHistoryModel.id.desc())
        )

    @staticmethod
    def _to_entity(model: ArticleHistoryModel) -> ArticleHistory:
        modified_at = model.modified_at
        if modified_at.tzinfo is None:
            modified_at = modified_at.replace(tzinfo=timezone.utc)
        return ArticleHistory(
            id=model.id,
            article_id=model.article_id,
            content=model.content,
            modified_at=modified_at,
        )

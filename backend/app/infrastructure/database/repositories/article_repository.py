"""Concrete repository implementation backed by SQLAlchemy."""

from datetime import datetime, timezone

from sqlalchemy import ColumnElement, Select, and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import ArticleRepository
from app.domain.entities import Article, ArticleSearchCriteria, Page, PageRequest
from app.infrastructure.database.models import ArticleModel

_SORT_COLUMNS = {
    "id": ArticleModel.id,
    "title": ArticleModel.title,
    "views": ArticleModel.views,
    "created_at": ArticleModel.created_at,
    "updated_at": ArticleModel.updated_at,
}


def build_search_conditions(criteria: ArticleSearchCriteria) -> list[ColumnElement[bool]]:
    """Compose one SQL condition per present filter; the caller ANDs them.

    Returns an empty list when no filter is present, meaning "no WHERE
    clause" rather than "match nothing".
    """
    conditions: list[ColumnElement[bool]] = []

    if criteria.keyword:
        conditions.append(
            or_(
                ArticleModel.title.icontains(criteria.keyword, autoescape=True),
                ArticleModel.content.icontains(criteria.keyword, autoescape=True),
                ArticleModel.keywords.icontains(criteria.keyword, autoescape=True),
            )
        )

    if criteria.from_date is not None:
        conditions.append(ArticleModel.created_at >= criteria.from_date)
    if criteria.to_date is not None:
        conditions.append(ArticleModel.created_at <= criteria.to_date)

    if criteria.min_views is not None and criteria.min_views > 0:
        conditions.append(ArticleModel.views >= criteria.min_views)

    tag_conditions = [
        ArticleModel.keywords.contains(tag, autoescape=True)
        for tag in criteria.tags
        if tag
    ]
    if tag_conditions:
        conditions.append(or_(*tag_conditions))

    return conditions


class SQLAlchemyArticleRepository(ArticleRepository):
    """Implements the ArticleRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ArticleModel) -> Article:
        """Map ORM model → domain entity."""
        return Article(
            id=model.id,
            title=model.title,
            content=model.content,
            keywords=model.keywords,
            views=model.views,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def _to_model(self, entity: Article) -> ArticleModel:
        """Map domain entity → ORM model (for creation)."""
        return ArticleModel(
            title=entity.title,
            content=entity.content,
            keywords=entity.keywords,
            views=entity.views,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get_by_id(self, article_id: int) -> Article | None:
        result = await self._session.get(ArticleModel, article_id)
        return self._to_entity(result) if result else None

    async def exists(self, article_id: int) -> bool:
        result = await self._session.execute(
            select(ArticleModel.id).where(ArticleModel.id == article_id)
        )
        return result.scalar_one_or_none() is not None

    async def get_page(self, page_request: PageRequest) -> Page[Article]:
        return await self._fetch_page([], page_request)

    async def search(
        self, criteria: ArticleSearchCriteria, page_request: PageRequest
    ) -> Page[Article]:
        return await self._fetch_page(build_search_conditions(criteria), page_request)

    async def find_by_keywords(self, keyword: str, page_request: PageRequest) -> Page[Article]:
        condition = ArticleModel.keywords.icontains(keyword, autoescape=True)
        return await self._fetch_page([condition], page_request)

    async def create(self, article: Article) -> Article:
        model = self._to_model(article)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, article: Article) -> Article:
        model = await self._session.get(ArticleModel, article.id)
        if model is None:
            raise ValueError(f"Article {article.id} not found in database")
        model.title = article.title
        model.content = article.content
        model.keywords = article.keywords
        model.updated_at = article.updated_at
        await self._session.flush()
        return self._to_entity(model)

    async def increment_views(self, article_id: int) -> Article | None:
        result = await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == article_id)
            .values(views=ArticleModel.views + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        model = await self._session.get(ArticleModel, article_id, populate_existing=True)
        return self._to_entity(model) if model else None

    async def delete(self, article_id: int) -> bool:
        model = await self._session.get(ArticleModel, article_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    # ── Paging ───────────────────────────────────────────────────────

    async def _fetch_page(
        self, conditions: list[ColumnElement[bool]], page_request: PageRequest
    ) -> Page[Article]:
        count_stmt = select(func.count()).select_from(ArticleModel)
        stmt: Select = select(ArticleModel)
        if conditions:
            count_stmt = count_stmt.where(and_(*conditions))
            stmt = stmt.where(and_(*conditions))

        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            stmt.order_by(*_order_by(page_request))
            .offset(page_request.offset)
            .limit(page_request.size)
        )
        result = await self._session.execute(stmt)
        return Page(
            items=[self._to_entity(row) for row in result.scalars().all()],
            total=total,
            page=page_request.page,
            size=page_request.size,
        )


def _order_by(page_request: PageRequest) -> list[ColumnElement]:
    column = _SORT_COLUMNS[page_request.sort_by]
    if page_request.descending:
        return [column.desc(), ArticleModel.id.desc()]
    return [column.asc(), ArticleModel.id.asc()]


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they were written as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

"""Article endpoints — CRUD, search, history and Markdown export."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.application.schemas import (
    ArticleCreate,
    ArticleDeletedResponse,
    ArticleHistoryResponse,
    ArticlePageResponse,
    ArticleResponse,
    ArticleUpdate,
)
from app.application.services import ArticleService
from app.config import get_settings
from app.domain.entities import Article, ArticleSearchCriteria, Page, PageRequest
from app.domain.exceptions import EntityNotFoundError, InvalidInputError
from app.infrastructure.dependencies import get_article_service
from app.presentation.api.errors import ArticleDeleteFailedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["Articles"])


# ── Helpers ──────────────────────────────────────────────────────────

def _to_page_response(page: Page[Article]) -> ArticlePageResponse:
    return ArticlePageResponse(
        items=[ArticleResponse.model_validate(a, from_attributes=True) for a in page.items],
        total=page.total,
        page=page.page,
        size=page.size,
        total_pages=page.total_pages,
    )


def _page_request(
    page: int, size: int | None, sort_by: str = "createdAt", direction: str = "desc"
) -> PageRequest:
    try:
        return PageRequest.of(page, size or get_settings().default_page_size, sort_by, direction)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# ── Listing & search ─────────────────────────────────────────────────
# Static paths are registered before /{article_id}.

@router.get("", response_model=ArticlePageResponse)
async def list_articles(
    page: int = Query(0, ge=0),
    size: int | None = Query(None, ge=1),
    sort_by: str = Query("createdAt", alias="sortBy"),
    direction: str = Query("desc"),
    service: ArticleService = Depends(get_article_service),
) -> ArticlePageResponse:
    """Retrieve a sorted, paginated list of articles."""
    result = await service.list_articles(_page_request(page, size, sort_by, direction))
    return _to_page_response(result)


@router.get("/search", response_model=ArticlePageResponse)
async def search_articles(
    keyword: str | None = Query(None, description="Substring of title, content or keywords"),
    page: int = Query(0, ge=0),
    size: int | None = Query(None, ge=1),
    from_date: datetime | None = Query(None, alias="fromDate"),
    to_date: datetime | None = Query(None, alias="toDate"),
    min_views: int | None = Query(None, alias="minViews"),
    tags: list[str] | None = Query(None, description="Repeat or comma-separate"),
    bracket_tags: list[str] | None = Query(None, alias="tags[]", include_in_schema=False),
    sort_by: str = Query("createdAt", alias="sortBy"),
    direction: str = Query("desc"),
    service: ArticleService = Depends(get_article_service),
) -> ArticlePageResponse:
    """Search articles; every supplied filter must match, absent filters are ignored."""
    criteria = ArticleSearchCriteria(
        keyword=keyword,
        from_date=from_date,
        to_date=to_date,
        min_views=min_views,
        tags=[*(tags or []), *(bracket_tags or [])],
    )
    result = await service.search_articles(
        criteria, _page_request(page, size, sort_by, direction)
    )
    return _to_page_response(result)


@router.get("/recent", response_model=ArticlePageResponse)
async def list_recent_articles(
    page: int = Query(0, ge=0),
    size: int | None = Query(None, ge=1),
    service: ArticleService = Depends(get_article_service),
) -> ArticlePageResponse:
    """Newest articles first."""
    result = await service.list_recent(page, size or get_settings().default_page_size)
    return _to_page_response(result)


@router.get("/popular", response_model=ArticlePageResponse)
async def list_popular_articles(
    page: int = Query(0, ge=0),
    size: int | None = Query(None, ge=1),
    service: ArticleService = Depends(get_article_service),
) -> ArticlePageResponse:
    """Most viewed articles first."""
    result = await service.list_popular(page, size or get_settings().default_page_size)
    return _to_page_response(result)


@router.get("/by-keyword", response_model=ArticlePageResponse)
async def list_articles_by_keyword(
    keyword: str = Query(..., description="Substring of the keywords field"),
    page: int = Query(0, ge=0),
    size: int | None = Query(None, ge=1),
    service: ArticleService = Depends(get_article_service),
) -> ArticlePageResponse:
    """Articles whose keywords contain the given text (case-insensitive)."""
    result = await service.list_by_keyword(
        keyword, page, size or get_settings().default_page_size
    )
    return _to_page_response(result)


# ── Single article ───────────────────────────────────────────────────

@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: int,
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    """Retrieve a single article by ID; each call counts as one view."""
    try:
        article = await service.get_article(article_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    data: ArticleCreate,
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    """Create a new article and its initial history snapshot."""
    try:
        article = await service.create_article(data)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Failed to create article")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.put("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: int,
    data: ArticleUpdate,
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    """Replace title, content and keywords; the previous content goes to history."""
    try:
        article = await service.update_article(article_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception("Failed to update article %s", article_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.delete("/{article_id}", response_model=ArticleDeletedResponse)
async def delete_article(
    article_id: int,
    service: ArticleService = Depends(get_article_service),
) -> ArticleDeletedResponse:
    """Delete an article together with its history."""
    try:
        await service.delete_article(article_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.exception("Failed to delete article %s", article_id)
        raise ArticleDeleteFailedError(article_id, e) from e
    return ArticleDeletedResponse(message="Article successfully deleted", id=article_id)


@router.get("/{article_id}/history", response_model=list[ArticleHistoryResponse])
async def get_article_history(
    article_id: int,
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleHistoryResponse]:
    """Content snapshots of an article, most recent first."""
    try:
        history = await service.get_article_history(article_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [ArticleHistoryResponse.model_validate(h, from_attributes=True) for h in history]


@router.get(
    "/{article_id}/export",
    response_class=Response,
    responses={200: {"content": {"text/markdown": {}}}},
)
async def export_article(
    article_id: int,
    service: ArticleService = Depends(get_article_service),
) -> Response:
    """Download an article as a Markdown file."""
    try:
        markdown = await service.export_to_markdown(article_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(
        content=markdown,
        media_type="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="article-{article_id}.md"'},
    )

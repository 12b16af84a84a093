"""Pydantic DTOs (Data Transfer Objects) for the Article feature."""

from datetime import datetime

from pydantic import BaseModel, Field


class ArticleWrite(BaseModel):
    """Fields a client may set on an article.

    Blank or missing title/content are rejected by ArticleService, not here,
    so they surface as a 400 InvalidInputError rather than a schema error.
    Unknown fields such as ``id`` or ``views`` are ignored.
    """

    title: str | None = Field(None, max_length=255, examples=["Getting Started"])
    content: str | None = Field(None, examples=["<p>This is a knowledge base article.</p>"])
    keywords: str | None = Field(None, examples=["onboarding, setup"])


class ArticleCreate(ArticleWrite):
    """Schema for creating a new article."""


class ArticleUpdate(ArticleWrite):
    """Schema for updating an article — title, content and keywords are replaced."""


class ArticleResponse(BaseModel):
    """Schema returned to the client."""

    id: int
    title: str
    content: str
    keywords: str | None = None
    views: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ArticlePageResponse(BaseModel):
    """One page of articles plus exact paging metadata."""

    items: list[ArticleResponse]
    total: int
    page: int
    size: int
    total_pages: int


class ArticleHistoryResponse(BaseModel):
    """A single content snapshot."""

    id: int
    article_id: int
    content: str
    modified_at: datetime

    model_config = {"from_attributes": True}


class ArticleDeletedResponse(BaseModel):
    message: str
    id: int

"""Domain value objects for paging and filtering article listings."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, TypeVar

from app.domain.exceptions import InvalidInputError

T = TypeVar("T")

# Public (camelCase) sort names → canonical field names.
_SORT_ALIASES: dict[str, str] = {
    "id": "id",
    "title": "title",
    "views": "views",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}

SORTABLE_FIELDS = frozenset(_SORT_ALIASES.values())


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size and ordering."""

    page: int = 0
    size: int = 10
    sort_by: str = "created_at"
    direction: str = "desc"

    @classmethod
    def of(
        cls,
        page: int = 0,
        size: int = 10,
        sort_by: str = "created_at",
        direction: str = "desc",
    ) -> "PageRequest":
        """Build a request from raw (possibly camelCase) query values.

        Raises InvalidInputError for unknown sort fields or directions.
        """
        if page < 0:
            raise InvalidInputError("Page index must not be negative", field="page")
        if size < 1:
            raise InvalidInputError("Page size must be at least 1", field="size")

        canonical = _SORT_ALIASES.get(sort_by.strip())
        if canonical is None:
            raise InvalidInputError(
                f"Cannot sort by '{sort_by}'; expected one of {sorted(SORTABLE_FIELDS)}",
                field="sortBy",
            )

        normalized_direction = direction.strip().lower()
        if normalized_direction not in ("asc", "desc"):
            raise InvalidInputError(
                f"Invalid sort direction '{direction}'; expected 'asc' or 'desc'",
                field="direction",
            )
        return cls(page=page, size=size, sort_by=canonical, direction=normalized_direction)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


@dataclass
class Page(Generic[T]):
    """A bounded slice of a result set plus the exact total count."""

    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return self.page >= self.total_pages - 1


@dataclass
class ArticleSearchCriteria:
    """Optional filters for article search; absent filters are not applied.

    Values are normalized on construction: the keyword is trimmed (blank
    means absent), a non-positive minimum view count means absent, and tags
    are trimmed, split on commas and stripped of blanks. Dates are converted
    to UTC; naive values are taken to be UTC already.
    """

    keyword: str | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None
    min_views: int | None = None
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.keyword is not None:
            self.keyword = self.keyword.strip() or None
        self.from_date = _to_utc(self.from_date)
        self.to_date = _to_utc(self.to_date)
        if self.min_views is not None and self.min_views <= 0:
            self.min_views = None
        self.tags = _split_tags(self.tags)

    @property
    def is_empty(self) -> bool:
        return (
            self.keyword is None
            and self.from_date is None
            and self.to_date is None
            and self.min_views is None
            and not self.tags
        )


def _to_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _split_tags(raw_tags: list[str] | None) -> list[str]:
    tags: list[str] = []
    for raw in raw_tags or []:
        for part in raw.split(","):
            tag = part.strip()
            if tag and tag not in tags:
                tags.append(tag)
    return tags

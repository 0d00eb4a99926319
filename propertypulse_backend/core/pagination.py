"""
Shared pagination utilities for consistent pagination across all repositories.

Repositories page with ``skip``/``limit``; the page number is derived from
them rather than passed in.
"""

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from .exceptions import ValidationError

T = TypeVar("T")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class ListOptions(BaseModel):
    """Options accepted by every repository ``list`` call."""

    filters: dict[str, Any] = Field(default_factory=dict)
    sort: dict[str, str] | None = None
    search: str | None = None
    skip: int = 0
    limit: int = DEFAULT_LIMIT
    populate: bool = True

    def with_filters(self, **filters: Any) -> "ListOptions":
        """Return a copy whose filters are extended with ``filters``."""
        merged = {**self.filters, **filters}
        return self.model_copy(update={"filters": merged})

    def with_sort(self, **sort: str) -> "ListOptions":
        """Return a copy sorted by ``sort`` unless the caller chose an order."""
        if self.sort:
            return self
        return self.model_copy(update={"sort": dict(sort)})


class Page(BaseModel, Generic[T]):
    """
    Generic paginated results container.

    ``page`` is ``skip // limit + 1`` and ``total_pages`` is
    ``ceil(total / limit)``.
    """

    items: list[T]
    total: int
    page: int
    total_pages: int
    skip: int
    limit: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @classmethod
    def create(cls, items: list[T], total: int, skip: int, limit: int) -> "Page[T]":
        """
        Create a page with calculated metadata.

        Args:
            items: Items on the current page
            total: Total number of matching items
            skip: Number of items skipped before this page
            limit: Maximum number of items per page

        Returns:
            Page instance with calculated metadata
        """
        return cls(
            items=items,
            total=total,
            page=calculate_page(skip, limit),
            total_pages=math.ceil(total / limit),
            skip=skip,
            limit=limit,
        )


def validate_pagination_params(skip: int, limit: int) -> tuple[int, int]:
    """
    Validate skip/limit pagination parameters.

    Raises:
        ValidationError: If parameters are out of range
    """
    if skip < 0:
        raise ValidationError("must be >= 0", field="skip", value=skip)

    if limit < 1:
        raise ValidationError("must be >= 1", field="limit", value=limit)

    if limit > MAX_LIMIT:
        raise ValidationError(f"cannot exceed {MAX_LIMIT}", field="limit", value=limit)

    return skip, limit


def calculate_page(skip: int, limit: int) -> int:
    """Page number (1-based) that starts at offset ``skip``."""
    return skip // limit + 1

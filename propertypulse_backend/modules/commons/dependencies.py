"""Query parameters shared by list endpoints."""

from typing import Annotated

from fastapi import Depends, Query

from ...core.filters import SortDirection
from ...core.pagination import DEFAULT_LIMIT, MAX_LIMIT, ListOptions


def list_options(
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    sort_by: str | None = Query(None),
    sort_order: SortDirection = Query(SortDirection.DESC),
) -> ListOptions:
    sort = {sort_by: sort_order.value} if sort_by else None
    return ListOptions(skip=skip, limit=limit, sort=sort)


ListParams = Annotated[ListOptions, Depends(list_options)]

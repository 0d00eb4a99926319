"""
SQLAlchemy implementation of the repository contract.

One session per operation. Constraint failures are classified from the
driver error and translated into the shared exception taxonomy.
"""

import json
import logging
from typing import Any, ClassVar

from pydantic import BaseModel
from sqlalchemy import String, cast, delete, func, inspect, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select
from sqlalchemy.types import JSON

from ..exceptions import DatabaseError
from ..filters import FilterCondition, SortDirection, parse_filters, parse_sort
from ..pagination import ListOptions, Page, validate_pagination_params
from .base import ReadT, Repository, plain_values
from .errors import classify_integrity_error, translate_store_error

logger = logging.getLogger(__name__)


def escape_like(value: str, escape: str = "\\") -> str:
    """Make LIKE wildcards in ``value`` match literally."""
    for char in (escape, "%", "_"):
        value = value.replace(char, escape + char)
    return value


def row_to_dict(obj: Any) -> dict[str, Any]:
    """Column values of a mapped instance."""
    mapper = inspect(obj).mapper
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


class SQLRepository(Repository[ReadT]):
    """
    Base repository over an ``async_sessionmaker``.

    Subclasses set ``model`` plus the schema attributes of ``Repository``.
    Relations named in ``relations`` must exist as relationship attributes
    of the same name on ``model``.
    """

    model: ClassVar[type]

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    # Query building

    def _column(self, field: str):
        return getattr(self.model, field)

    def _condition(self, condition: FilterCondition):
        column = self._column(condition.field)
        value = condition.value
        op = condition.op

        if op == "eq":
            return column == value
        if op == "ne":
            return or_(column != value, column.is_(None))
        if op == "gt":
            return column > value
        if op == "gte":
            return column >= value
        if op == "lt":
            return column < value
        if op == "lte":
            return column <= value
        if op == "in":
            return column.in_(list(value))

        # contains / icontains
        if isinstance(column.type, JSON):
            # List membership: match the serialised element.
            pattern = escape_like(json.dumps(value))
            return cast(column, String).like(f"%{pattern}%", escape="\\")
        if op == "icontains":
            return column.icontains(value, autoescape=True)
        return column.contains(value, autoescape=True)

    def _apply_filters(self, query: Select, filters: dict[str, Any] | None) -> Select:
        for condition in parse_filters(filters, self.filterable_fields):
            query = query.where(self._condition(condition))
        return query

    def _apply_search(self, query: Select, search: str | None) -> Select:
        if search and self.search_fields:
            query = query.where(
                or_(
                    *(
                        self._column(name).icontains(search, autoescape=True)
                        for name in self.search_fields
                    )
                )
            )
        return query

    def _apply_relationships(self, query: Select, populate: bool) -> Select:
        if populate:
            for name in self.relations:
                query = query.options(selectinload(getattr(self.model, name)))
        return query

    def _apply_ordering(self, query: Select, sort: dict[str, str] | None) -> Select:
        for sort_field in parse_sort(sort, self.filterable_fields):
            column = self._column(sort_field.field)
            if sort_field.direction == SortDirection.DESC:
                query = query.order_by(column.desc().nulls_last())
            else:
                query = query.order_by(column.asc().nulls_last())
        return query.order_by(self.model.id)

    # Conversion

    def _to_read(self, obj: Any, populate: bool = True) -> ReadT:
        data = row_to_dict(obj)
        if populate:
            unloaded = inspect(obj).unloaded
            for name in self.relations:
                if name in unloaded:
                    continue
                related = getattr(obj, name)
                data[name] = (
                    plain_values(row_to_dict(related)) if related is not None else None
                )
        return self.read_schema.model_validate(data)

    async def _load(self, session: AsyncSession, id: str, populate: bool = True):
        query = select(self.model).where(self.model.id == id)
        query = self._apply_relationships(query, populate)
        query = query.execution_options(populate_existing=True)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def _commit(self, session: AsyncSession) -> None:
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            code = classify_integrity_error(e)
            logger.debug(
                "Integrity error on %s", self.resource_type, extra={"code": code.value}
            )
            raise translate_store_error(code, self.resource_type, str(e.orig)) from None
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError(
                f"Failed to write {self.resource_type.lower()}", details={"error": str(e)}
            ) from e

    # Contract

    async def create(self, data: BaseModel | dict[str, Any]) -> ReadT:
        values = self._validate_create(data)
        async with self.session_factory() as session:
            obj = self.model(**values)
            session.add(obj)
            await self._commit(session)
            logger.debug("Created %s %s", self.resource_type, obj.id)
            return self._to_read(await self._load(session, obj.id))

    async def find_by_id(self, id: str, populate: bool = True) -> ReadT | None:
        async with self.session_factory() as session:
            obj = await self._load(session, id, populate)
            return self._to_read(obj, populate) if obj is not None else None

    async def update(self, id: str, patch: BaseModel | dict[str, Any]) -> ReadT | None:
        async with self.session_factory() as session:
            obj = await session.get(self.model, id)
            if obj is None:
                return None

            changes = self._validate_update(row_to_dict(obj), patch)
            for field, value in changes.items():
                setattr(obj, field, value)
            await self._commit(session)
            logger.debug("Updated %s %s", self.resource_type, id)
            return self._to_read(await self._load(session, id))

    async def delete(self, id: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(delete(self.model).where(self.model.id == id))
            await self._commit(session)
            return result.rowcount > 0

    async def count(self, filters: dict[str, Any] | None = None) -> int:
        query = self._apply_filters(select(func.count()).select_from(self.model), filters)
        async with self.session_factory() as session:
            result = await session.execute(query)
            return result.scalar() or 0

    async def list(self, options: ListOptions | dict[str, Any] | None = None) -> Page[ReadT]:
        options = self._options(options)
        skip, limit = validate_pagination_params(options.skip, options.limit)

        query = self._apply_filters(select(self.model), options.filters)
        query = self._apply_search(query, options.search)
        query = self._apply_relationships(query, options.populate)
        query = self._apply_ordering(query, options.sort)
        query = query.offset(skip).limit(limit)

        count_query = self._apply_filters(
            select(func.count()).select_from(self.model), options.filters
        )
        count_query = self._apply_search(count_query, options.search)

        async with self.session_factory() as session:
            total = (await session.execute(count_query)).scalar() or 0
            rows = (await session.execute(query)).scalars().all()
            items = [self._to_read(row, options.populate) for row in rows]

        return Page.create(items=items, total=total, skip=skip, limit=limit)

"""
Backend-neutral repository contract.

Each entity has one abstract repository (its finders are written once in
terms of ``list``/``count``) and one concrete class per storage backend.
Input validation, status-transition rules and entity invariants live here
so that every backend enforces them identically.
"""

import enum
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

import pydantic
from pydantic import BaseModel

from ..exceptions import ValidationError
from ..pagination import ListOptions, Page
from ..utils import ensure_utc

ReadT = TypeVar("ReadT", bound=BaseModel)


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


def plain_values(values: dict[str, Any]) -> dict[str, Any]:
    """Replace enum members with their values and make datetimes UTC."""
    return {key: _plain(value) for key, value in values.items()}


def validate_with(
    schema: type[BaseModel], data: BaseModel | dict[str, Any], partial: bool = False
) -> dict[str, Any]:
    """Validate ``data`` against ``schema`` and return plain field values.

    With ``partial`` only the fields the caller actually set are returned.
    """
    if isinstance(data, BaseModel) and not isinstance(data, schema):
        data = data.model_dump(exclude_unset=partial)
    try:
        model = data if isinstance(data, schema) else schema.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ValidationError(
            first["msg"], field=field, details={"errors": e.errors(include_url=False)}
        ) from None
    return plain_values(model.model_dump(exclude_unset=partial))


class Repository(ABC, Generic[ReadT]):
    """
    Storage-agnostic CRUD contract shared by every entity.

    Attributes:
        resource_type: Human readable entity name used in error messages
        create_schema: Schema validating ``create`` input
        update_schema: Schema validating ``update`` patches (all optional)
        read_schema: Schema every read returns
        relations: Relation name -> (foreign key field, related table)
        search_fields: Fields matched case-insensitively by ``ListOptions.search``
        status_transitions: Allowed ``status`` moves, keyed by current status
        default_sort: Order used when ``list`` gets no sort
    """

    resource_type: ClassVar[str] = "Record"
    create_schema: ClassVar[type[BaseModel]]
    update_schema: ClassVar[type[BaseModel]]
    read_schema: ClassVar[type[BaseModel]]
    relations: ClassVar[dict[str, tuple[str, str]]] = {}
    search_fields: ClassVar[tuple[str, ...]] = ()
    status_transitions: ClassVar[dict[str, set[str]]] = {}
    default_sort: ClassVar[dict[str, str]] = {"created_at": "desc"}

    @property
    def filterable_fields(self) -> set[str]:
        return set(self.read_schema.model_fields) - set(self.relations)

    # Hooks

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        """Adjust validated create values before they are stored."""
        return values

    def prepare_update(
        self, current: dict[str, Any], changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Adjust a validated patch given the stored record."""
        return changes

    def validate_record(self, record: dict[str, Any]) -> None:
        """Check cross-field invariants on a complete record."""

    # Shared input handling

    def _validate_create(self, data: BaseModel | dict[str, Any]) -> dict[str, Any]:
        values = self.prepare_create(validate_with(self.create_schema, data))
        self.validate_record(values)
        return values

    def _validate_update(
        self, current: dict[str, Any], patch: BaseModel | dict[str, Any]
    ) -> dict[str, Any]:
        changes = validate_with(self.update_schema, patch, partial=True)
        changes = self.prepare_update(current, changes)
        merged = {**plain_values(current), **changes}
        self._check_transition(current.get("status"), merged.get("status"))
        self.validate_record(merged)
        return changes

    def _check_transition(self, current: Any, target: Any) -> None:
        if not self.status_transitions:
            return
        if isinstance(current, enum.Enum):
            current = current.value
        if isinstance(target, enum.Enum):
            target = target.value
        if current == target:
            return
        if target not in self.status_transitions.get(current, set()):
            raise ValidationError(
                f"cannot move {self.resource_type.lower()} from {current} to {target}",
                field="status",
                value=target,
            )

    def _options(self, options: ListOptions | dict[str, Any] | None) -> ListOptions:
        if options is None:
            options = ListOptions()
        elif isinstance(options, dict):
            options = ListOptions(**options)
        return options.with_sort(**self.default_sort)

    # Contract

    @abstractmethod
    async def create(self, data: BaseModel | dict[str, Any]) -> ReadT:
        """Persist a new record and return it with relations populated."""

    @abstractmethod
    async def find_by_id(self, id: str, populate: bool = True) -> ReadT | None:
        """Return the record or None."""

    @abstractmethod
    async def update(self, id: str, patch: BaseModel | dict[str, Any]) -> ReadT | None:
        """Apply a partial update; None when the record does not exist."""

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Remove the record; False when nothing was removed."""

    @abstractmethod
    async def list(self, options: ListOptions | dict[str, Any] | None = None) -> Page[ReadT]:
        """Filtered, sorted, paginated listing."""

    @abstractmethod
    async def count(self, filters: dict[str, Any] | None = None) -> int:
        """Number of records matching ``filters``."""

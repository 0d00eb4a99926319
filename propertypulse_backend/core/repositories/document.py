"""
Document-store implementation of the repository contract.

``DocumentStore`` keeps collections of plain dicts in memory, enforces the
unique and foreign-key rules registered for each collection (including
``ON DELETE`` behaviour) and can persist itself to a JSON file with
aiofiles. Writes are serialised with an ``asyncio.Lock``.
"""

import asyncio
import copy
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, ClassVar

import aiofiles
from pydantic import BaseModel

from ..filters import matches, parse_filters, parse_sort, sort_documents
from ..pagination import ListOptions, Page, validate_pagination_params
from ..utils import new_id, utc_now
from .base import ReadT, Repository
from .errors import StoreError, StoreErrorCode, translate_store_error

logger = logging.getLogger(__name__)

CASCADE = "cascade"
SET_NULL = "set_null"


@dataclass(frozen=True)
class ForeignKey:
    collection: str
    on_delete: str = CASCADE


@dataclass
class CollectionSchema:
    name: str
    unique: tuple[str, ...] = ()
    foreign_keys: dict[str, ForeignKey] = field(default_factory=dict)
    required: tuple[str, ...] = ()


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return {"$decimal": str(value)}
    if isinstance(value, datetime):
        return {"$datetime": value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode(obj: dict[str, Any]) -> Any:
    if len(obj) == 1:
        if "$decimal" in obj:
            return Decimal(obj["$decimal"])
        if "$datetime" in obj:
            return datetime.fromisoformat(obj["$datetime"])
    return obj


class DocumentStore:
    """In-process document database with optional JSON-file persistence."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._schemas: dict[str, CollectionSchema] = {}
        self._lock = asyncio.Lock()
        self._loaded = False

    def register(self, schema: CollectionSchema) -> None:
        self._schemas[schema.name] = schema
        self._collections.setdefault(schema.name, {})

    @property
    def collections(self) -> list[str]:
        return sorted(self._schemas)

    # Persistence

    async def load(self) -> None:
        """Read the backing file once, if there is one."""
        if self._loaded:
            return
        self._loaded = True
        if self.path is None or not self.path.exists():
            return

        async with aiofiles.open(self.path, encoding="utf-8") as f:
            content = await f.read()
        data = json.loads(content, object_hook=_decode) if content.strip() else {}
        for name, documents in data.items():
            self._collections.setdefault(name, {}).update(documents)
        logger.info("Loaded document store from %s", self.path)

    async def flush(self) -> None:
        if self.path is None:
            return
        content = json.dumps(self._collections, default=_encode, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to write document store %s: %s", self.path, e)
            raise StoreError(
                StoreErrorCode.UNKNOWN, f"could not write {self.path}: {e}"
            ) from e

    async def ping(self) -> None:
        await self.load()

    # Reads

    def get(self, collection: str, id: str | None) -> dict[str, Any] | None:
        if id is None:
            return None
        document = self._collections.get(collection, {}).get(id)
        return copy.deepcopy(document) if document is not None else None

    def all(self, collection: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(d) for d in self._collections.get(collection, {}).values()]

    # Writes

    def _snapshot(self) -> dict[str, dict[str, dict[str, Any]]]:
        return {name: dict(documents) for name, documents in self._collections.items()}

    async def _commit(self, snapshot: dict[str, dict[str, dict[str, Any]]]) -> None:
        """Persist pending changes, restoring ``snapshot`` if the write fails."""
        try:
            await self.flush()
        except StoreError:
            self._collections = snapshot
            raise

    def _check_constraints(
        self, collection: str, document: dict[str, Any], exclude_id: str | None = None
    ) -> None:
        schema = self._schemas[collection]

        for name in schema.required:
            if document.get(name) is None:
                raise StoreError(StoreErrorCode.NULL_VIOLATION, f"{name} is required", name)

        for name in schema.unique:
            value = document.get(name)
            if value is None:
                continue
            for other_id, other in self._collections[collection].items():
                if other_id != exclude_id and other.get(name) == value:
                    raise StoreError(
                        StoreErrorCode.UNIQUE_VIOLATION, f"duplicate {name}", name
                    )

        for name, fk in schema.foreign_keys.items():
            value = document.get(name)
            if value is not None and value not in self._collections.get(fk.collection, {}):
                raise StoreError(
                    StoreErrorCode.FOREIGN_KEY_VIOLATION,
                    f"{name} references a missing {fk.collection} record",
                    name,
                )

    async def insert(self, collection: str, values: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            now = utc_now()
            document = {"id": new_id(), "created_at": now, "updated_at": now, **values}
            self._check_constraints(collection, document)
            snapshot = self._snapshot()
            self._collections[collection][document["id"]] = document
            await self._commit(snapshot)
            return copy.deepcopy(document)

    async def update(
        self, collection: str, id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        async with self._lock:
            current = self._collections[collection].get(id)
            if current is None:
                return None
            document = {**current, **changes, "updated_at": utc_now()}
            self._check_constraints(collection, document, exclude_id=id)
            snapshot = self._snapshot()
            self._collections[collection][id] = document
            await self._commit(snapshot)
            return copy.deepcopy(document)

    def _delete_cascade(self, collection: str, id: str) -> None:
        if self._collections[collection].pop(id, None) is None:
            return
        for child_name, child in self._schemas.items():
            for fk_field, fk in child.foreign_keys.items():
                if fk.collection != collection:
                    continue
                dependants = [
                    doc_id
                    for doc_id, doc in self._collections[child_name].items()
                    if doc.get(fk_field) == id
                ]
                for doc_id in dependants:
                    if fk.on_delete == SET_NULL:
                        documents = self._collections[child_name]
                        documents[doc_id] = {**documents[doc_id], fk_field: None}
                    else:
                        self._delete_cascade(child_name, doc_id)

    async def delete(self, collection: str, id: str) -> bool:
        async with self._lock:
            if id not in self._collections[collection]:
                return False
            snapshot = self._snapshot()
            self._delete_cascade(collection, id)
            await self._commit(snapshot)
            return True


class DocumentRepository(Repository[ReadT]):
    """
    Base repository over a ``DocumentStore`` collection.

    Subclasses set ``collection`` and may declare ``unique_fields``,
    ``required_fields`` and ``foreign_keys``; the factory registers them
    with the store.
    """

    collection: ClassVar[str]
    unique_fields: ClassVar[tuple[str, ...]] = ()
    required_fields: ClassVar[tuple[str, ...]] = ()
    foreign_keys: ClassVar[dict[str, ForeignKey]] = {}

    def __init__(self, store: DocumentStore):
        self.store = store

    @classmethod
    def collection_schema(cls) -> CollectionSchema:
        return CollectionSchema(
            name=cls.collection,
            unique=cls.unique_fields,
            foreign_keys=dict(cls.foreign_keys),
            required=cls.required_fields,
        )

    def _to_read(self, document: dict[str, Any], populate: bool = True) -> ReadT:
        data = dict(document)
        if populate:
            for name, (fk_field, related_collection) in self.relations.items():
                data[name] = self.store.get(related_collection, document.get(fk_field))
        return self.read_schema.model_validate(data)

    def _translate(self, error: StoreError):
        return translate_store_error(error.code, self.resource_type, str(error), error.field)

    async def create(self, data: BaseModel | dict[str, Any]) -> ReadT:
        values = self._validate_create(data)
        try:
            document = await self.store.insert(self.collection, values)
        except StoreError as e:
            raise self._translate(e) from None
        logger.debug("Created %s %s", self.resource_type, document["id"])
        return self._to_read(document)

    async def find_by_id(self, id: str, populate: bool = True) -> ReadT | None:
        document = self.store.get(self.collection, id)
        return self._to_read(document, populate) if document is not None else None

    async def update(self, id: str, patch: BaseModel | dict[str, Any]) -> ReadT | None:
        current = self.store.get(self.collection, id)
        if current is None:
            return None
        changes = self._validate_update(current, patch)
        try:
            document = await self.store.update(self.collection, id, changes)
        except StoreError as e:
            raise self._translate(e) from None
        if document is None:
            return None
        logger.debug("Updated %s %s", self.resource_type, id)
        return self._to_read(document)

    async def delete(self, id: str) -> bool:
        try:
            return await self.store.delete(self.collection, id)
        except StoreError as e:
            raise self._translate(e) from None

    def _matches_search(self, document: dict[str, Any], search: str | None) -> bool:
        if not search or not self.search_fields:
            return True
        needle = search.lower()
        return any(
            needle in str(document.get(name) or "").lower() for name in self.search_fields
        )

    def _select(
        self, filters: dict[str, Any] | None, search: str | None = None
    ) -> list[dict[str, Any]]:
        conditions = parse_filters(filters, self.filterable_fields)
        return [
            d
            for d in self.store.all(self.collection)
            if matches(d, conditions) and self._matches_search(d, search)
        ]

    async def count(self, filters: dict[str, Any] | None = None) -> int:
        return len(self._select(filters))

    async def list(self, options: ListOptions | dict[str, Any] | None = None) -> Page[ReadT]:
        options = self._options(options)
        skip, limit = validate_pagination_params(options.skip, options.limit)

        documents = sort_documents(
            self._select(options.filters, options.search),
            parse_sort(options.sort, self.filterable_fields),
        )
        items = [self._to_read(d, options.populate) for d in documents[skip : skip + limit]]
        return Page.create(items=items, total=len(documents), skip=skip, limit=limit)

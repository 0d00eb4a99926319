"""Document store constraints and JSON-file persistence."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from propertypulse_backend.core.exceptions import DatabaseError
from propertypulse_backend.core.repositories import (
    SET_NULL,
    CollectionSchema,
    DocumentStore,
    ForeignKey,
    StoreError,
    StoreErrorCode,
)
from propertypulse_backend.modules.users.repository import DocumentUserRepository


def make_store(path=None) -> DocumentStore:
    store = DocumentStore(path)
    store.register(CollectionSchema("owners", unique=("email",), required=("email",)))
    store.register(
        CollectionSchema("homes", foreign_keys={"owner_id": ForeignKey("owners")})
    )
    store.register(
        CollectionSchema(
            "notes", foreign_keys={"home_id": ForeignKey("homes", on_delete=SET_NULL)}
        )
    )
    return store


async def test_insert_assigns_id_and_timestamps():
    store = make_store()
    owner = await store.insert("owners", {"email": "a@example.com"})
    assert owner["id"]
    assert owner["created_at"] == owner["updated_at"]
    assert store.get("owners", owner["id"]) == owner


async def test_returned_documents_are_copies():
    store = make_store()
    owner = await store.insert("owners", {"email": "a@example.com"})
    owner["email"] = "changed@example.com"
    assert store.get("owners", owner["id"])["email"] == "a@example.com"


async def test_unique_and_required_fields():
    store = make_store()
    first = await store.insert("owners", {"email": "a@example.com"})
    await store.insert("owners", {"email": "b@example.com"})

    with pytest.raises(StoreError) as exc_info:
        await store.insert("owners", {"email": "a@example.com"})
    assert exc_info.value.code == StoreErrorCode.UNIQUE_VIOLATION

    with pytest.raises(StoreError) as exc_info:
        await store.update("owners", first["id"], {"email": "b@example.com"})
    assert exc_info.value.field == "email"

    with pytest.raises(StoreError) as exc_info:
        await store.insert("owners", {"name": "nobody"})
    assert exc_info.value.code == StoreErrorCode.NULL_VIOLATION

    # Re-saving the same value is not a conflict with itself.
    assert await store.update("owners", first["id"], {"email": "a@example.com"})


async def test_foreign_keys_and_delete_rules():
    store = make_store()
    owner = await store.insert("owners", {"email": "a@example.com"})
    home = await store.insert("homes", {"owner_id": owner["id"]})
    note = await store.insert("notes", {"home_id": home["id"], "text": "hi"})

    with pytest.raises(StoreError) as exc_info:
        await store.insert("homes", {"owner_id": "missing"})
    assert exc_info.value.code == StoreErrorCode.FOREIGN_KEY_VIOLATION

    assert await store.delete("owners", owner["id"]) is True
    assert store.get("homes", home["id"]) is None
    assert store.get("notes", note["id"])["home_id"] is None
    assert await store.delete("owners", owner["id"]) is False


async def test_update_missing_document():
    store = make_store()
    assert await store.update("owners", "missing", {"email": "x@example.com"}) is None


async def test_persistence_round_trip(tmp_path):
    path = tmp_path / "data" / "store.json"
    store = make_store(path)
    await store.load()
    owner = await store.insert(
        "owners",
        {
            "email": "a@example.com",
            "balance": Decimal("1234.50"),
            "joined": datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc),
        },
    )
    assert path.exists()

    reopened = make_store(path)
    await reopened.load()
    restored = reopened.get("owners", owner["id"])
    assert restored["balance"] == Decimal("1234.50")
    assert isinstance(restored["balance"], Decimal)
    assert restored["joined"] == owner["joined"]
    assert restored["created_at"].tzinfo is not None


async def test_load_missing_or_empty_file(tmp_path):
    path = tmp_path / "store.json"
    store = make_store(path)
    await store.load()
    assert store.all("owners") == []

    path.write_text("  ")
    empty = make_store(path)
    await empty.load()
    assert empty.all("owners") == []
    await empty.ping()


def unwritable_path(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return blocker / "store.json"


async def test_failed_write_leaves_store_unchanged(tmp_path):
    store = make_store(tmp_path / "store.json")
    owner = await store.insert("owners", {"email": "a@example.com"})
    home = await store.insert("homes", {"owner_id": owner["id"]})
    note = await store.insert("notes", {"home_id": home["id"], "text": "hi"})
    store.path = unwritable_path(tmp_path)

    with pytest.raises(StoreError) as exc_info:
        await store.insert("owners", {"email": "b@example.com"})
    assert exc_info.value.code == StoreErrorCode.UNKNOWN
    assert [o["email"] for o in store.all("owners")] == ["a@example.com"]

    with pytest.raises(StoreError):
        await store.update("owners", owner["id"], {"email": "c@example.com"})
    assert store.get("owners", owner["id"])["email"] == "a@example.com"

    with pytest.raises(StoreError):
        await store.delete("owners", owner["id"])
    assert store.get("owners", owner["id"]) is not None
    assert store.get("homes", home["id"]) is not None
    assert store.get("notes", note["id"])["home_id"] == home["id"]


async def test_repository_reports_write_failure_as_database_error(tmp_path):
    store = DocumentStore(unwritable_path(tmp_path))
    store.register(DocumentUserRepository.collection_schema())
    users = DocumentUserRepository(store)

    with pytest.raises(DatabaseError) as exc_info:
        await users.create(
            {
                "email": "a@example.com",
                "first_name": "Ada",
                "last_name": "Lane",
                "role": "TENANT",
                "password": "secret-pass",
            }
        )
    assert exc_info.value.details["code"] == "P0000"
    assert store.all("users") == []

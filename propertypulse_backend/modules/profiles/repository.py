"""Matching profile repositories.

Both profiles are one-to-one with their owner and are addressed by the
owner's id: ``upsert_for_*`` creates the profile on first write and patches
it afterwards.
"""

from typing import Any

from pydantic import BaseModel

from ...core.exceptions import ValidationError
from ...core.pagination import ListOptions
from ...core.repositories import (
    DocumentRepository,
    ForeignKey,
    Repository,
    SQLRepository,
    validate_with,
)
from .models import PropertyMatchProfile, TenantProfile
from .schemas import (
    PropertyMatchProfileCreate,
    PropertyMatchProfileData,
    PropertyMatchProfileResponse,
    TenantProfileCreate,
    TenantProfileData,
    TenantProfileResponse,
)


class OwnedProfileRepository(Repository):
    """Shared lookups for profiles keyed by a unique owner column."""

    owner_field: str

    async def _find_by_owner(self, owner_id: str):
        page = await self.list(ListOptions(filters={self.owner_field: owner_id}, limit=1))
        return page.items[0] if page.items else None

    async def _upsert(self, owner_id: str, data: BaseModel | dict[str, Any]):
        changes = validate_with(self.update_schema, data, partial=True)
        existing = await self._find_by_owner(owner_id)
        if existing is None:
            values = {k: v for k, v in changes.items() if v is not None}
            return await self.create({**values, self.owner_field: owner_id})
        return await self.update(existing.id, changes)

    async def _delete_by_owner(self, owner_id: str) -> bool:
        existing = await self._find_by_owner(owner_id)
        if existing is None:
            return False
        return await self.delete(existing.id)


class TenantProfileRepository(OwnedProfileRepository):
    resource_type = "TenantProfile"
    create_schema = TenantProfileCreate
    update_schema = TenantProfileData
    read_schema = TenantProfileResponse
    relations = {"user": ("user_id", "users")}
    owner_field = "user_id"

    async def find_by_user_id(self, user_id: str) -> TenantProfileResponse | None:
        return await self._find_by_owner(user_id)

    async def upsert_for_user(
        self, user_id: str, data: TenantProfileData | dict[str, Any]
    ) -> TenantProfileResponse:
        return await self._upsert(user_id, data)

    async def delete_for_user(self, user_id: str) -> bool:
        return await self._delete_by_owner(user_id)

    def validate_record(self, record: dict[str, Any]) -> None:
        low, high = record.get("budget_min"), record.get("budget_max")
        if low is not None and high is not None and low > high:
            raise ValidationError("cannot exceed budget_max", field="budget_min", value=low)


class PropertyMatchProfileRepository(OwnedProfileRepository):
    resource_type = "PropertyMatchProfile"
    create_schema = PropertyMatchProfileCreate
    update_schema = PropertyMatchProfileData
    read_schema = PropertyMatchProfileResponse
    relations = {"property": ("property_id", "properties")}
    owner_field = "property_id"

    async def find_by_property_id(self, property_id: str) -> PropertyMatchProfileResponse | None:
        return await self._find_by_owner(property_id)

    async def upsert_for_property(
        self, property_id: str, data: PropertyMatchProfileData | dict[str, Any]
    ) -> PropertyMatchProfileResponse:
        return await self._upsert(property_id, data)

    async def delete_for_property(self, property_id: str) -> bool:
        return await self._delete_by_owner(property_id)


class SQLTenantProfileRepository(SQLRepository, TenantProfileRepository):
    model = TenantProfile


class DocumentTenantProfileRepository(DocumentRepository, TenantProfileRepository):
    collection = "tenant_profiles"
    unique_fields = ("user_id",)
    required_fields = ("user_id",)
    foreign_keys = {"user_id": ForeignKey("users")}


class SQLPropertyMatchProfileRepository(SQLRepository, PropertyMatchProfileRepository):
    model = PropertyMatchProfile


class DocumentPropertyMatchProfileRepository(DocumentRepository, PropertyMatchProfileRepository):
    collection = "property_match_profiles"
    unique_fields = ("property_id",)
    required_fields = ("property_id",)
    foreign_keys = {"property_id": ForeignKey("properties")}

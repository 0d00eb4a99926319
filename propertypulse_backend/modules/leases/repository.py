"""Lease repositories."""

from datetime import datetime
from typing import Any

from ...core.exceptions import ValidationError
from ...core.pagination import ListOptions, Page
from ...core.repositories import DocumentRepository, ForeignKey, Repository, SQLRepository
from ...core.utils import days_from, ensure_utc, utc_now
from .models import Lease, LeaseStatus
from .schemas import LeaseCreate, LeaseResponse, LeaseUpdate


class LeaseRepository(Repository[LeaseResponse]):
    resource_type = "Lease"
    create_schema = LeaseCreate
    update_schema = LeaseUpdate
    read_schema = LeaseResponse
    relations = {
        "property": ("property_id", "properties"),
        "tenant": ("tenant_id", "users"),
    }
    status_transitions = {
        LeaseStatus.ACTIVE.value: {LeaseStatus.EXPIRED.value, LeaseStatus.TERMINATED.value},
    }

    def validate_record(self, record: dict[str, Any]) -> None:
        start, end = record.get("start_date"), record.get("end_date")
        if start and end and not ensure_utc(start) < ensure_utc(end):
            raise ValidationError("must be after start_date", field="end_date", value=end)

    async def find_by_property_id(
        self, property_id: str, options: ListOptions | None = None
    ) -> Page[LeaseResponse]:
        return await self.list((options or ListOptions()).with_filters(property_id=property_id))

    async def find_by_tenant_id(
        self, tenant_id: str, options: ListOptions | None = None
    ) -> Page[LeaseResponse]:
        return await self.list((options or ListOptions()).with_filters(tenant_id=tenant_id))

    async def find_active_leases(
        self, now: datetime | None = None, options: ListOptions | None = None
    ) -> Page[LeaseResponse]:
        """Active leases whose term covers ``now``."""
        now = now or utc_now()
        return await self.list(
            (options or ListOptions()).with_filters(
                status=LeaseStatus.ACTIVE,
                start_date={"lte": now},
                end_date={"gte": now},
            )
        )

    async def find_expiring_leases(
        self,
        days: int = 30,
        now: datetime | None = None,
        options: ListOptions | None = None,
    ) -> Page[LeaseResponse]:
        """Active leases ending within the next ``days`` days, soonest first."""
        now = now or utc_now()
        options = (options or ListOptions()).with_sort(end_date="asc")
        return await self.list(
            options.with_filters(
                status=LeaseStatus.ACTIVE,
                end_date={"gte": now, "lte": days_from(now, days)},
            )
        )


class SQLLeaseRepository(SQLRepository[LeaseResponse], LeaseRepository):
    model = Lease


class DocumentLeaseRepository(DocumentRepository[LeaseResponse], LeaseRepository):
    collection = "leases"
    required_fields = ("property_id", "tenant_id", "start_date", "end_date", "monthly_rent")
    foreign_keys = {
        "property_id": ForeignKey("properties"),
        "tenant_id": ForeignKey("users"),
    }

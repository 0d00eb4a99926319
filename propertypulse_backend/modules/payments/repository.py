"""Payment repositories.

A payment carries a ``paid_date`` only while it is PAID; marking it PAID
without a date stamps the current time.
"""

from datetime import datetime
from typing import Any

from ...core.exceptions import ValidationError
from ...core.pagination import ListOptions, Page
from ...core.repositories import DocumentRepository, ForeignKey, Repository, SQLRepository
from ...core.utils import days_from, utc_now
from .models import Payment, PaymentStatus
from .schemas import PaymentCreate, PaymentResponse, PaymentUpdate

PAID = PaymentStatus.PAID.value


class PaymentRepository(Repository[PaymentResponse]):
    resource_type = "Payment"
    create_schema = PaymentCreate
    update_schema = PaymentUpdate
    read_schema = PaymentResponse
    relations = {
        "lease": ("lease_id", "leases"),
        "tenant": ("tenant_id", "users"),
    }
    status_transitions = {
        PaymentStatus.PENDING.value: {PAID, PaymentStatus.OVERDUE.value},
        PaymentStatus.OVERDUE.value: {PAID},
    }

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        if values.get("status") == PAID and values.get("paid_date") is None:
            values["paid_date"] = utc_now()
        return values

    def prepare_update(self, current, changes):
        if (
            changes.get("status") == PAID
            and changes.get("paid_date") is None
            and current.get("paid_date") is None
        ):
            changes["paid_date"] = utc_now()
        return changes

    def validate_record(self, record: dict[str, Any]) -> None:
        if record.get("paid_date") is not None and record.get("status") != PAID:
            raise ValidationError(
                "may only be set on a PAID payment", field="paid_date", value=record["paid_date"]
            )

    async def find_by_lease_id(
        self, lease_id: str, options: ListOptions | None = None
    ) -> Page[PaymentResponse]:
        options = (options or ListOptions()).with_sort(due_date="desc")
        return await self.list(options.with_filters(lease_id=lease_id))

    async def find_by_tenant_id(
        self, tenant_id: str, options: ListOptions | None = None
    ) -> Page[PaymentResponse]:
        options = (options or ListOptions()).with_sort(due_date="desc")
        return await self.list(options.with_filters(tenant_id=tenant_id))

    async def find_overdue_payments(
        self, now: datetime | None = None, options: ListOptions | None = None
    ) -> Page[PaymentResponse]:
        """Unpaid payments due before ``now``, oldest due date first."""
        now = now or utc_now()
        options = (options or ListOptions()).with_sort(due_date="asc")
        return await self.list(
            options.with_filters(
                due_date={"lt": now},
                status={"in": [PaymentStatus.PENDING.value, PaymentStatus.OVERDUE.value]},
            )
        )

    async def find_upcoming_payments(
        self,
        days: int = 7,
        now: datetime | None = None,
        options: ListOptions | None = None,
    ) -> Page[PaymentResponse]:
        """Pending payments due within the next ``days`` days."""
        now = now or utc_now()
        options = (options or ListOptions()).with_sort(due_date="asc")
        return await self.list(
            options.with_filters(
                due_date={"gte": now, "lte": days_from(now, days)},
                status=PaymentStatus.PENDING,
            )
        )


class SQLPaymentRepository(SQLRepository[PaymentResponse], PaymentRepository):
    model = Payment


class DocumentPaymentRepository(DocumentRepository[PaymentResponse], PaymentRepository):
    collection = "payments"
    required_fields = ("lease_id", "tenant_id", "amount", "due_date")
    foreign_keys = {
        "lease_id": ForeignKey("leases"),
        "tenant_id": ForeignKey("users"),
    }

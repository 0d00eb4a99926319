"""Payment schemas for PropertyPulse."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ..commons import LeaseSummary, UserSummary
from .models import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    lease_id: str
    tenant_id: str
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    due_date: datetime
    paid_date: datetime | None = None
    status: PaymentStatus = PaymentStatus.PENDING
    method: PaymentMethod | None = None
    reference: str | None = Field(None, max_length=255)


class PaymentUpdate(BaseModel):
    amount: Decimal | None = Field(None, gt=0, max_digits=12, decimal_places=2)
    due_date: datetime | None = None
    paid_date: datetime | None = None
    status: PaymentStatus | None = None
    method: PaymentMethod | None = None
    reference: str | None = Field(None, max_length=255)


class PaymentResponse(PaymentCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lease: LeaseSummary | None = None
    tenant: UserSummary | None = None
    created_at: datetime
    updated_at: datetime

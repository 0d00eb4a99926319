"""Lease schemas for PropertyPulse."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ..commons import PropertySummary, UserSummary
from .models import LeaseStatus


class LeaseCreate(BaseModel):
    property_id: str
    tenant_id: str
    start_date: datetime
    end_date: datetime
    monthly_rent: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    security_deposit: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    status: LeaseStatus = LeaseStatus.ACTIVE


class LeaseUpdate(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None
    monthly_rent: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    security_deposit: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    status: LeaseStatus | None = None


class LeaseResponse(LeaseCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    property: PropertySummary | None = None
    tenant: UserSummary | None = None
    created_at: datetime
    updated_at: datetime

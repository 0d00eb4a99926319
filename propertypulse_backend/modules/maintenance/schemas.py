"""Maintenance ticket schemas for PropertyPulse."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..commons import PropertySummary, UserSummary
from .models import TicketPriority, TicketStatus


class TicketCreate(BaseModel):
    property_id: str
    tenant_id: str
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    priority: TicketPriority = TicketPriority.MEDIUM
    status: TicketStatus = TicketStatus.OPEN


class TicketUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    priority: TicketPriority | None = None
    status: TicketStatus | None = None


class TicketResponse(TicketCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    property: PropertySummary | None = None
    tenant: UserSummary | None = None
    created_at: datetime
    updated_at: datetime

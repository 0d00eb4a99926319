"""Rental application schemas for PropertyPulse."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..commons import PropertySummary, UserSummary
from .models import ApplicationStatus


class ApplicationCreate(BaseModel):
    property_id: str
    applicant_id: str | None = None
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    monthly_income: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    occupants: int = Field(default=1, ge=1)
    message: str | None = None


class ApplicationUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=120)
    last_name: str | None = Field(None, min_length=1, max_length=120)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    monthly_income: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    occupants: int | None = Field(None, ge=1)
    message: str | None = None
    status: ApplicationStatus | None = None
    review_notes: str | None = None


class ApplicationReview(BaseModel):
    """Decision recorded by the landlord."""

    status: ApplicationStatus
    review_notes: str | None = None


class ApplicationResponse(ApplicationCreate):
    model_config = ConfigDict(from_attributes=True)

    email: str
    id: str
    status: ApplicationStatus
    review_notes: str | None = None
    reviewed_at: datetime | None = None
    property: PropertySummary | None = None
    applicant: UserSummary | None = None
    created_at: datetime
    updated_at: datetime

"""Common schemas shared across all modules."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ...core.pagination import Page
from ...core.utils import utc_now

T = TypeVar("T")


class BaseResponse(BaseModel, Generic[T]):
    """Envelope wrapping every API response."""

    success: bool = Field(
        default=True, description="Whether the request was successful"
    )
    message: str | None = Field(default=None, description="Response message")
    data: T | None = Field(default=None, description="Response data")
    error: Any | None = Field(default=None, description="Error details if any")
    timestamp: datetime = Field(
        default_factory=utc_now, description="Response timestamp"
    )


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated response schema."""

    items: list[T] = Field(default_factory=list, description="List of items")
    total: int = Field(default=0, description="Total number of items")
    page: int = Field(default=1, description="Current page number")
    total_pages: int = Field(default=0, description="Total number of pages")
    skip: int = Field(default=0, description="Items skipped before this page")
    limit: int = Field(default=10, description="Items per page")

    @classmethod
    def from_page(cls, page: "Page[T]") -> "PaginatedResponse[T]":
        return cls(**page.model_dump(exclude={"items"}), items=page.items)


class UserSummary(BaseModel):
    """Compact user shape embedded in related records."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    role: str


class PropertySummary(BaseModel):
    """Compact property shape embedded in related records."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    address_city: str
    address_state: str
    landlord_id: str


class LeaseSummary(BaseModel):
    """Compact lease shape embedded in related records."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    tenant_id: str
    start_date: datetime
    end_date: datetime
    status: str

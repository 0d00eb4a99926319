"""Common module for shared schemas."""

from .dependencies import ListParams, list_options
from .schemas import (
    BaseResponse,
    LeaseSummary,
    PaginatedResponse,
    PropertySummary,
    UserSummary,
)

__all__ = [
    "ListParams",
    "list_options",
    "BaseResponse",
    "PaginatedResponse",
    "LeaseSummary",
    "PropertySummary",
    "UserSummary",
]

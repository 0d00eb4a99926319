"""Core infrastructure for the PropertyPulse backend."""

from .exceptions import (
    AccessForbidden,
    ApiError,
    AuthenticationRequired,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    NetworkError,
    NotFoundError,
    PropertyPulseException,
    RateLimited,
    RelatedResourceNotFoundError,
    ServerError,
    ValidationError,
)
from .pagination import ListOptions, Page, validate_pagination_params

__all__ = [
    "AccessForbidden",
    "ApiError",
    "AuthenticationRequired",
    "ConfigurationError",
    "ConflictError",
    "DatabaseError",
    "ListOptions",
    "NetworkError",
    "NotFoundError",
    "Page",
    "PropertyPulseException",
    "RateLimited",
    "RelatedResourceNotFoundError",
    "ServerError",
    "ValidationError",
    "validate_pagination_params",
]

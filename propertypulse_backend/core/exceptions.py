"""
Custom exception classes for consistent error handling across all modules.

The same taxonomy is raised by repositories on the server side and by the
API client on the caller side. Every exception carries a message, an HTTP
status (0 for transport failures) and optional structured data.
"""

from typing import Any


class PropertyPulseException(Exception):
    """Base exception for all PropertyPulse related errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.status_code

    @property
    def data(self) -> Any:
        return self.details.get("data", self.details or None)


class ValidationError(PropertyPulseException):
    """Raised when data validation fails."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class AuthenticationRequired(PropertyPulseException):
    """Raised when a request carries no valid credentials."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class AccessForbidden(PropertyPulseException):
    """Raised when the caller lacks permission to perform an action."""

    status_code = 403

    def __init__(
        self, message: str = "Access forbidden", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)


class NotFoundError(PropertyPulseException):
    """Raised when a resource is not found."""

    status_code = 404

    def __init__(
        self, message: str = "Resource not found", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)


class ConflictError(PropertyPulseException):
    """Raised when a write collides with a unique constraint."""

    status_code = 409

    def __init__(
        self,
        message: str = "Resource already exists",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class RelatedResourceNotFoundError(NotFoundError, ConflictError):
    """Raised when a foreign key references a row that does not exist.

    Callers may treat it either as a missing relation or as a constraint
    conflict; the HTTP layer renders it as 404.
    """

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            message = f"{resource_type} references a missing record via '{field}'"
        else:
            message = f"{resource_type} references a missing record"
        PropertyPulseException.__init__(self, message, details)
        self.resource_type = resource_type
        self.field = field


class RateLimited(PropertyPulseException):
    """Raised when the caller exceeded a request quota."""

    status_code = 429

    def __init__(
        self,
        message: str = "Too many requests",
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.retry_after = retry_after


class NetworkError(PropertyPulseException):
    """Raised when no HTTP response could be obtained."""

    status_code = 0

    def __init__(self, message: str = "Network error", details: dict[str, Any] | None = None):
        super().__init__(message, details)


class ApiError(PropertyPulseException):
    """Raised for a remote HTTP error that has no more specific type."""

    def __init__(self, message: str, status_code: int, data: Any = None):
        super().__init__(message, {"data": data}, status_code=status_code)


class ServerError(ApiError):
    """Raised when a remote server answered with a 5xx status."""


class ConfigurationError(PropertyPulseException):
    """Raised when the application is configured with unusable values."""

    status_code = 500


class DatabaseError(PropertyPulseException):
    """Raised when database operations fail."""

    status_code = 500

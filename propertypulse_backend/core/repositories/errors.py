"""Storage error codes shared by every backend.

Each backend reports constraint failures as one of these codes; the
repository layer maps them onto the public exception taxonomy in one place.
"""

import enum

from sqlalchemy.exc import IntegrityError

from ..exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    PropertyPulseException,
    RelatedResourceNotFoundError,
    ValidationError,
)


class StoreErrorCode(str, enum.Enum):
    UNIQUE_VIOLATION = "P2002"
    FOREIGN_KEY_VIOLATION = "P2003"
    NULL_VIOLATION = "P2011"
    CHECK_VIOLATION = "P2004"
    RECORD_NOT_FOUND = "P2025"
    UNKNOWN = "P0000"


class StoreError(Exception):
    """Raised by the document store with a discriminable code."""

    def __init__(self, code: StoreErrorCode, message: str, field: str | None = None):
        self.code = code
        self.field = field
        super().__init__(message)


_SQLSTATE_CODES = {
    "23505": StoreErrorCode.UNIQUE_VIOLATION,
    "23503": StoreErrorCode.FOREIGN_KEY_VIOLATION,
    "23502": StoreErrorCode.NULL_VIOLATION,
    "23514": StoreErrorCode.CHECK_VIOLATION,
}

_MESSAGE_CODES = (
    ("unique constraint", StoreErrorCode.UNIQUE_VIOLATION),
    ("duplicate key", StoreErrorCode.UNIQUE_VIOLATION),
    ("foreign key constraint", StoreErrorCode.FOREIGN_KEY_VIOLATION),
    ("not null constraint", StoreErrorCode.NULL_VIOLATION),
    ("null value in column", StoreErrorCode.NULL_VIOLATION),
    ("check constraint", StoreErrorCode.CHECK_VIOLATION),
)


def classify_integrity_error(exc: IntegrityError) -> StoreErrorCode:
    """Work out which constraint an ``IntegrityError`` came from.

    PostgreSQL drivers expose a SQLSTATE; SQLite only has the message.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _SQLSTATE_CODES:
        return _SQLSTATE_CODES[sqlstate]

    message = str(orig).lower()
    for fragment, code in _MESSAGE_CODES:
        if fragment in message:
            return code
    return StoreErrorCode.UNKNOWN


def translate_store_error(
    code: StoreErrorCode,
    resource_type: str,
    message: str,
    field: str | None = None,
) -> PropertyPulseException:
    """Map a storage error code onto the public exception taxonomy."""
    details = {"code": code.value}
    if code == StoreErrorCode.UNIQUE_VIOLATION:
        return ConflictError(f"{resource_type} already exists", details=details)
    if code == StoreErrorCode.FOREIGN_KEY_VIOLATION:
        return RelatedResourceNotFoundError(resource_type, field=field, details=details)
    if code in (StoreErrorCode.NULL_VIOLATION, StoreErrorCode.CHECK_VIOLATION):
        return ValidationError(message, field=field, details=details)
    if code == StoreErrorCode.RECORD_NOT_FOUND:
        return NotFoundError(f"{resource_type} not found", details=details)
    return DatabaseError(f"{resource_type} storage failure: {message}", details=details)

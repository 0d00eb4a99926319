"""Repository base classes for the SQL and document backends."""

from .base import Repository, validate_with
from .document import (
    CASCADE,
    SET_NULL,
    CollectionSchema,
    DocumentRepository,
    DocumentStore,
    ForeignKey,
)
from .errors import StoreError, StoreErrorCode, classify_integrity_error, translate_store_error
from .sql import SQLRepository

__all__ = [
    "CASCADE",
    "SET_NULL",
    "CollectionSchema",
    "DocumentRepository",
    "DocumentStore",
    "ForeignKey",
    "Repository",
    "SQLRepository",
    "StoreError",
    "StoreErrorCode",
    "classify_integrity_error",
    "translate_store_error",
    "validate_with",
]

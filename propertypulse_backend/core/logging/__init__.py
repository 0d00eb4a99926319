"""Logging infrastructure for the PropertyPulse backend."""

from .context import (
    TransactionIdFilter,
    generate_transaction_id,
    get_transaction_id,
    set_transaction_id,
)
from .file_logger import FileLogger, setup_file_logging
from .logger_config import get_logger, setup_logging, shutdown_logging
from .middleware import LoggingMiddleware
from .structured_logger import StructuredFormatter

__all__ = [
    "FileLogger",
    "LoggingMiddleware",
    "StructuredFormatter",
    "TransactionIdFilter",
    "generate_transaction_id",
    "get_logger",
    "get_transaction_id",
    "set_transaction_id",
    "setup_file_logging",
    "setup_logging",
    "shutdown_logging",
]

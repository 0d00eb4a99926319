"""
Structured JSON logging for PropertyPulse.

Every record is rendered as one JSON object carrying the transaction id of
the request that produced it.
"""

import logging
import sys
import traceback
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from ..utils import utc_now
from .context import TransactionIdFilter, get_transaction_id

SERVICE_NAME = "propertypulse-backend"
SERVICE_VERSION = "0.1.0"

DEFAULT_FORMAT = "%(timestamp)s %(level)s %(transaction_id)s %(message)s"


class StructuredFormatter(JsonFormatter):
    """JSON formatter that adds standard fields for observability."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = utc_now().isoformat()
        log_record["transaction_id"] = getattr(
            record, "transaction_id", None
        ) or get_transaction_id()

        log_record["level"] = record.levelname
        log_record["logger_name"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        log_record["service"] = {"name": SERVICE_NAME, "version": SERVICE_VERSION}

        if record.exc_info and record.exc_info[0] is not None:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        for field in ("msg", "args", "created", "msecs", "relativeCreated", "pathname"):
            log_record.pop(field, None)


def build_formatter(use_json_format: bool) -> logging.Formatter:
    """Return the JSON formatter or a plain single-line one."""
    if use_json_format:
        return StructuredFormatter(fmt=DEFAULT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(
        "%(asctime)s | %(levelname)s | %(transaction_id)s | "
        "%(name)s:%(lineno)d | %(message)s"
    )


def setup_structured_logging(
    log_level: str = "INFO", use_json_format: bool = True
) -> logging.Logger:
    """
    Attach a stdout handler to the ``propertypulse_backend`` logger.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR)
        use_json_format: Render records as JSON when true

    Returns:
        Configured logger instance
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger("propertypulse_backend")
    logger.setLevel(level)
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(build_formatter(use_json_format))
    console_handler.addFilter(TransactionIdFilter())
    logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    return logger

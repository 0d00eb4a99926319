"""Structured log output and transaction id propagation."""

import json
import logging
import sys

from propertypulse_backend.core.logging import (
    StructuredFormatter,
    TransactionIdFilter,
    get_logger,
    set_transaction_id,
)
from propertypulse_backend.core.logging.structured_logger import DEFAULT_FORMAT, build_formatter


def make_record(message="Lease created", **extra):
    logger = logging.getLogger("propertypulse_backend.tests")
    record = logger.makeRecord(
        logger.name, logging.INFO, __file__, 12, message, (), None, func="handler", extra=extra
    )
    TransactionIdFilter().filter(record)
    return record


def test_structured_formatter_fields():
    set_transaction_id("txn-1234")
    try:
        record = make_record(lease_id="l-1")
    finally:
        set_transaction_id(None)

    payload = json.loads(StructuredFormatter(fmt=DEFAULT_FORMAT).format(record))
    assert payload["message"] == "Lease created"
    assert payload["level"] == "INFO"
    assert payload["transaction_id"] == "txn-1234"
    assert payload["lease_id"] == "l-1"
    assert payload["logger_name"] == "propertypulse_backend.tests"
    assert payload["service"]["name"] == "propertypulse-backend"
    assert "timestamp" in payload
    assert "pathname" not in payload


def test_records_outside_a_request_get_a_placeholder():
    record = make_record()
    assert record.transaction_id == "-"


def test_exception_details_are_structured():
    try:
        raise RuntimeError("disk full")
    except RuntimeError:
        logger = logging.getLogger("propertypulse_backend.tests")
        record = logger.makeRecord(
            logger.name, logging.ERROR, __file__, 1, "boom", (), sys.exc_info()
        )
    payload = json.loads(StructuredFormatter(fmt=DEFAULT_FORMAT).format(record))
    assert payload["exception"]["type"] == "RuntimeError"
    assert payload["exception"]["message"] == "disk full"


def test_plain_formatter_includes_transaction_id():
    record = make_record("Plain line")
    line = build_formatter(use_json_format=False).format(record)
    assert "| - |" in line
    assert line.endswith("Plain line")


def test_get_logger_namespacing():
    assert get_logger().name == "propertypulse_backend"
    assert get_logger("repositories").name == "propertypulse_backend.repositories"
    assert get_logger("propertypulse_backend.main").name == "propertypulse_backend.main"

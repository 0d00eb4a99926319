"""Transaction id tracking for log correlation."""

import logging
import uuid
from contextvars import ContextVar

_transaction_id: ContextVar[str | None] = ContextVar("transaction_id", default=None)


def generate_transaction_id() -> str:
    """Generate a short id for request tracking."""
    return uuid.uuid4().hex[:8]


def get_transaction_id() -> str | None:
    """Transaction id of the current context, if one was set."""
    return _transaction_id.get()


def set_transaction_id(txn_id: str | None) -> None:
    _transaction_id.set(txn_id)


class TransactionIdFilter(logging.Filter):
    """Logging filter that stamps records with the current transaction id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "transaction_id", None):
            record.transaction_id = get_transaction_id() or "-"
        return True

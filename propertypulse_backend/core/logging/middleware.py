"""
Request tracking middleware for logging correlation.

Assigns a transaction id per request (honouring an incoming
``x-transaction-id`` header), echoes it on the response, and logs request
start and completion with duration.
"""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .context import generate_transaction_id, set_transaction_id

TRANSACTION_HEADER = "x-transaction-id"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request/response logging with transaction tracking."""

    def __init__(self, app, logger: logging.Logger | None = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("propertypulse_backend.requests")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        txn_id = request.headers.get(TRANSACTION_HEADER) or generate_transaction_id()
        set_transaction_id(txn_id)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        self.logger.info(
            "Request started",
            extra={
                "transaction_id": txn_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": client_ip,
                "user_agent": request.headers.get("user-agent", "unknown"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                "Request failed",
                extra={
                    "transaction_id": txn_id,
                    "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise
        finally:
            set_transaction_id(None)

        self.logger.info(
            "Request completed",
            extra={
                "transaction_id": txn_id,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        response.headers[TRANSACTION_HEADER] = txn_id
        return response

"""
Resilient HTTP client for the PropertyPulse API.

Every call is retried on rate limiting (429), server errors (5xx) and
transport failures, up to a per-call retry budget. 429 waits for the
server's ``Retry-After``; everything else backs off exponentially
(1s, 2s, 4s...). Authentication, permission and not-found failures are
raised at once, and a 401 also forgets the stored token.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from ..config import Settings
from ..core.exceptions import (
    AccessForbidden,
    ApiError,
    AuthenticationRequired,
    NetworkError,
    NotFoundError,
    PropertyPulseException,
    RateLimited,
    ServerError,
)
from .token_store import MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 2
DEFAULT_RETRY_AFTER = 2.0

RETRYABLE_ERRORS = (RateLimited, ServerError, NetworkError)


def parse_retry_after(value: str | None, now: datetime | None = None) -> float:
    """Seconds to wait from a ``Retry-After`` header (seconds or HTTP date)."""
    if not value:
        return DEFAULT_RETRY_AFTER
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


def backoff_delay(retry_state: RetryCallState) -> float:
    """Delay before the next attempt, from the error that ended the last one."""
    error = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(error, RateLimited):
        return error.retry_after if error.retry_after is not None else DEFAULT_RETRY_AFTER
    return float(2 ** (retry_state.attempt_number - 1))


def _body(response: httpx.Response) -> Any:
    if "application/json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def _server_message(data: Any, response: httpx.Response) -> str:
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if message:
            return str(message)
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def error_for_response(response: httpx.Response, data: Any) -> PropertyPulseException:
    """Map a non-2xx response onto the exception taxonomy."""
    status = response.status_code
    if status == 401:
        return AuthenticationRequired(details={"data": data})
    if status == 403:
        return AccessForbidden(details={"data": data})
    if status == 404:
        return NotFoundError(details={"data": data})
    message = _server_message(data, response)
    if status == 429:
        return RateLimited(
            message,
            retry_after=parse_retry_after(response.headers.get("retry-after")),
            details={"data": data},
        )
    if status >= 500:
        return ServerError(message, status, data)
    return ApiError(message, status, data)


class ApiClient:
    """
    Async client with auth headers, error mapping and retries.

    Args:
        base_url: API root, e.g. ``http://localhost:8000/api``
        token_store: Holds the bearer token; in memory by default
        retries: Retries per call after the first attempt
        timeout: Per-request timeout in seconds
        sleep: Awaitable used between attempts
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore | None = None,
        retries: int = DEFAULT_RETRIES,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store if token_store is not None else MemoryTokenStore()
        self.retries = retries
        self.sleep = sleep
        self.default_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(headers or {}),
        }
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ApiClient":
        kwargs.setdefault("retries", settings.api_client_retries)
        kwargs.setdefault("timeout", settings.api_client_timeout)
        return cls(settings.api_base_url, **kwargs)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, extra: dict[str, str] | None, multipart: bool) -> dict[str, str]:
        headers = dict(self.default_headers)
        token = self.token_store.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        headers.update(extra or {})
        if multipart:
            # httpx writes the multipart boundary itself.
            headers.pop("Content-Type", None)
        return headers

    async def _send(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise NetworkError(f"Network error: {e}") from e

        data = _body(response)
        if response.is_success:
            return data

        error = error_for_response(response, data)
        if isinstance(error, AuthenticationRequired):
            self.token_store.clear()
        raise error

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
        retries: int | None = None,
    ) -> Any:
        """
        Send a request and return the decoded body.

        Raises:
            AuthenticationRequired: On 401, after clearing the stored token
            AccessForbidden: On 403
            NotFoundError: On 404
            RateLimited: On 429 once the retry budget is spent
            ServerError: On 5xx once the retry budget is spent
            NetworkError: When no response arrived within the retry budget
            ApiError: On any other non-2xx status
        """
        budget = self.retries if retries is None else retries
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs = {
            "headers": self._headers(headers, multipart=files is not None),
            "params": params,
        }
        if files is not None:
            kwargs.update(files=files, data=data)
        elif json is not None:
            kwargs["json"] = json
        elif data is not None:
            kwargs["data"] = data

        retrying = AsyncRetrying(
            stop=stop_after_attempt(budget + 1),
            wait=backoff_delay,
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            sleep=self.sleep,
            before_sleep=self._log_retry(method, endpoint),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(method, url, **kwargs)

    @staticmethod
    def _log_retry(method: str, endpoint: str) -> Callable[[RetryCallState], None]:
        def log(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            logger.warning(
                f"Retrying {method} {endpoint} after {retry_state.next_action.sleep:.1f}s "
                f"(attempt {retry_state.attempt_number}): {error}"
            )

        return log

    # Verb helpers

    async def get(self, endpoint: str, **kwargs) -> Any:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return await self.request("POST", endpoint, json=json, **kwargs)

    async def put(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PUT", endpoint, json=json, **kwargs)

    async def patch(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PATCH", endpoint, json=json, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, **kwargs)

    # Session

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Sign in and keep the issued access token for later calls."""
        body = await self.post("/auth/login", {"email": email, "password": password})
        self.token_store.set(body["data"]["access_token"])
        return body

    def logout(self) -> None:
        self.token_store.clear()

"""Python client for the PropertyPulse API."""

from .api_client import ApiClient, parse_retry_after
from .token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "ApiClient",
    "FileTokenStore",
    "MemoryTokenStore",
    "TokenStore",
    "parse_retry_after",
]

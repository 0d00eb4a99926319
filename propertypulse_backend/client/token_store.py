"""Where the API client keeps the bearer token between calls."""

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    """Token held for the lifetime of the process."""

    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Token persisted to a file so separate runs share one login."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self) -> str | None:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        logger.debug("Cleared stored token", extra={"path": str(self.path)})

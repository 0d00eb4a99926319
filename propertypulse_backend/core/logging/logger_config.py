"""
Central logging configuration for PropertyPulse.

``setup_logging`` is called once from the application lifespan with the
loaded settings.
"""

import logging

from ...config import Settings
from .file_logger import FileLogger, setup_file_logging
from .structured_logger import setup_structured_logging


class LoggingConfig:
    """Tracks what has been configured so setup is idempotent."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self._is_configured = False

    def setup(self, settings: Settings) -> logging.Logger:
        if self._is_configured:
            return get_logger()

        use_json_format = settings.log_format.lower() == "json"
        if settings.log_to_file:
            self.file_logger = setup_file_logging(
                log_file_path=settings.log_file_path,
                log_level=settings.log_level,
                use_json_format=use_json_format,
                max_bytes=settings.log_max_bytes,
                backup_count=settings.log_backup_count,
            )
        else:
            setup_structured_logging(settings.log_level, use_json_format)

        self._is_configured = True
        return get_logger()

    def shutdown(self) -> None:
        if self.file_logger:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


_logging_config = LoggingConfig()


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure logging from settings; repeated calls are no-ops."""
    return _logging_config.setup(settings)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger under the application namespace.

    Args:
        name: Optional suffix, e.g. ``"repositories.sql"``
    """
    if name and not name.startswith("propertypulse_backend"):
        return logging.getLogger(f"propertypulse_backend.{name}")
    if name:
        return logging.getLogger(name)
    return logging.getLogger("propertypulse_backend")


def shutdown_logging() -> None:
    """Stop the file listener, flushing queued records."""
    _logging_config.shutdown()

"""
Queue-based rotating file logging.

Records are pushed onto a queue by the application threads and written to
stdout and a rotating file by a background listener.
"""

import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler

from .context import TransactionIdFilter
from .structured_logger import build_formatter

EXTERNAL_LOGGER_LEVELS = {
    "sqlalchemy": logging.WARNING,
    "httpx": logging.WARNING,
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
}


class FileLogger:
    """Queue-based file logger with rotation."""

    def __init__(
        self,
        log_file_path: str = "logs/app.log",
        max_bytes: int = 50 * 1024 * 1024,
        backup_count: int = 5,
        log_level: str = "INFO",
        use_json_format: bool = True,
    ):
        self.log_file_path = log_file_path
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.level = getattr(logging, log_level.upper())
        self.use_json_format = use_json_format
        self._log_queue: queue.Queue = queue.Queue()
        self._listener: QueueListener | None = None
        self._queue_handler: QueueHandler | None = None

        directory = os.path.dirname(log_file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def _handlers(self) -> list[logging.Handler]:
        file_handler = RotatingFileHandler(
            self.log_file_path, maxBytes=self.max_bytes, backupCount=self.backup_count
        )
        console_handler = logging.StreamHandler(sys.stdout)

        handlers: list[logging.Handler] = [console_handler, file_handler]
        for handler in handlers:
            handler.setLevel(self.level)
            handler.setFormatter(build_formatter(self.use_json_format))
        return handlers

    def start(self) -> None:
        """Start the background listener."""
        self._listener = QueueListener(
            self._log_queue, *self._handlers(), respect_handler_level=True
        )
        self._listener.start()

    @property
    def queue_handler(self) -> QueueHandler:
        if self._queue_handler is None:
            self._queue_handler = QueueHandler(self._log_queue)
            self._queue_handler.setLevel(self.level)
            # The filter must run on the producing thread to see its context.
            self._queue_handler.addFilter(TransactionIdFilter())
        return self._queue_handler

    def stop(self) -> None:
        """Flush pending records and stop the listener."""
        if self._listener:
            self._listener.stop()
            self._listener = None


def setup_file_logging(
    log_file_path: str = "logs/app.log",
    log_level: str = "INFO",
    use_json_format: bool = True,
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> FileLogger:
    """
    Start queue-based file logging and route the root logger through it.

    Args:
        log_file_path: Path to the log file
        log_level: Logging level
        use_json_format: Whether to use JSON formatting
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        The running FileLogger
    """
    file_logger = FileLogger(
        log_file_path=log_file_path,
        max_bytes=max_bytes,
        backup_count=backup_count,
        log_level=log_level,
        use_json_format=use_json_format,
    )
    file_logger.start()
    configure_external_loggers(file_logger.queue_handler, file_logger.level)
    return file_logger


def configure_external_loggers(queue_handler: QueueHandler, level: int) -> None:
    """Send the root logger and noisy libraries through ``queue_handler``."""
    for logger_name, logger_level in EXTERNAL_LOGGER_LEVELS.items():
        ext_logger = logging.getLogger(logger_name)
        ext_logger.handlers.clear()
        ext_logger.addHandler(queue_handler)
        ext_logger.propagate = False
        ext_logger.setLevel(logger_level)

    app_logger = logging.getLogger("propertypulse_backend")
    app_logger.handlers.clear()
    app_logger.propagate = True
    app_logger.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(queue_handler)
    root_logger.setLevel(level)

    logging.captureWarnings(True)

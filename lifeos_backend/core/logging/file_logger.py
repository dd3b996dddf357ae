"""
File logging with queue-based writing and rotation.
"""

import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler

from .structured_logger import build_formatter


class FileLogger:
    """Queue-based file logger with rotation capabilities."""

    def __init__(
        self,
        log_file_path: str = "logs/app.log",
        max_bytes: int = 50 * 1024 * 1024,  # 50MB
        backup_count: int = 5,
        log_level: str = "INFO",
        use_json_format: bool = True,
    ):
        self.log_file_path = log_file_path
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.log_level = getattr(logging, log_level.upper())
        self.use_json_format = use_json_format
        self._log_queue: queue.Queue = queue.Queue()
        self._listener: QueueListener | None = None
        self._queue_handler: QueueHandler | None = None

        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

    def _handlers(self) -> list[logging.Handler]:
        file_handler = RotatingFileHandler(
            self.log_file_path, maxBytes=self.max_bytes, backupCount=self.backup_count
        )
        console_handler = logging.StreamHandler(sys.stdout)
        for handler in (file_handler, console_handler):
            handler.setLevel(self.log_level)
            handler.setFormatter(build_formatter(self.use_json_format))
        return [console_handler, file_handler]

    def start(self) -> QueueHandler:
        """Start the background listener and return the handler feeding it."""
        self._listener = QueueListener(
            self._log_queue, *self._handlers(), respect_handler_level=True
        )
        self._listener.start()

        self._queue_handler = QueueHandler(self._log_queue)
        self._queue_handler.setLevel(self.log_level)
        return self._queue_handler

    def stop(self) -> None:
        """Stop the queue listener gracefully."""
        if self._listener:
            self._listener.stop()
            self._listener = None


def route_loggers_to(handler: logging.Handler) -> None:
    """Send the root and library loggers through ``handler``."""
    external_levels = {
        "httpx": logging.WARNING,
        "sqlalchemy": logging.WARNING,
        "uvicorn": logging.INFO,
        "fastapi": logging.INFO,
    }
    for logger_name, level in external_levels.items():
        ext_logger = logging.getLogger(logger_name)
        ext_logger.handlers.clear()
        ext_logger.addHandler(handler)
        ext_logger.propagate = False
        ext_logger.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(handler.level)

    logging.captureWarnings(True)

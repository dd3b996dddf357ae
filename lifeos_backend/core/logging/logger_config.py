"""
Central logging configuration for Life OS.
"""

import logging

from ...config import settings
from .file_logger import FileLogger, route_loggers_to
from .middleware import TransactionIdFilter
from .structured_logger import setup_structured_logging


class LoggingConfig:
    """Central logging configuration manager."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self._is_configured = False

    def setup(
        self,
        log_to_file: bool,
        log_level: str,
        log_file_path: str,
        use_json_format: bool,
        max_bytes: int,
        backup_count: int,
    ) -> logging.Logger:
        if self._is_configured:
            return get_logger()

        transaction_filter = TransactionIdFilter()

        if log_to_file:
            self.file_logger = FileLogger(
                log_file_path=log_file_path,
                max_bytes=max_bytes,
                backup_count=backup_count,
                log_level=log_level,
                use_json_format=use_json_format,
            )
            queue_handler = self.file_logger.start()
            queue_handler.addFilter(transaction_filter)
            route_loggers_to(queue_handler)
        else:
            logger = setup_structured_logging(log_level, use_json_format)
            for handler in logger.handlers:
                handler.addFilter(transaction_filter)

        self._is_configured = True
        return get_logger()

    def shutdown(self) -> None:
        if self.file_logger:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


_logging_config = LoggingConfig()


def setup_logging() -> logging.Logger:
    """Configure logging from the loaded settings."""
    return _logging_config.setup(
        log_to_file=settings.log_to_file,
        log_level=settings.log_level,
        log_file_path=settings.log_file_path,
        use_json_format=settings.log_format.lower() == "json",
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance namespaced under the application logger.

    Module paths that already start with ``lifeos_backend`` are used as is.
    """
    if not name:
        return logging.getLogger("lifeos_backend")
    if name.startswith("lifeos_backend"):
        return logging.getLogger(name)
    return logging.getLogger(f"lifeos_backend.{name}")


def shutdown_logging() -> None:
    """Shutdown logging gracefully."""
    _logging_config.shutdown()

"""Structured logging setup for the inspection review backend."""

import logging
from contextvars import ContextVar
from typing import Optional, Dict, Any
from pathlib import Path


class ContextFilter(logging.Filter):
    """
    Add review context (inspection id, component, ...) to log records.

    Fields listed in ``defaults`` are always present on the record so format
    strings such as ``%(inspection_id)s`` never fail outside a review. The
    context lives in a ``ContextVar``, so each thread (and each asyncio task)
    sees only the fields it set itself.
    """

    defaults: Dict[str, Any] = {"inspection_id": "-", "component": "-"}

    def __init__(self):
        super().__init__()
        self._context: ContextVar = ContextVar(f"log_context_{id(self)}", default={})

    @property
    def context(self) -> Dict[str, Any]:
        return self._context.get()

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context fields to log record."""
        for key, value in {**self.defaults, **self.context}.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True

    def set_context(self, **kwargs):
        """Set context fields for logging."""
        # never mutate the stored dict; other contexts may share it
        self._context.set({**self.context, **kwargs})

    def clear_context(self):
        """Clear all context fields."""
        self._context.set({})


# Global context filter instance
_context_filter = ContextFilter()


def setup_logging(
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up structured logging with optional file output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format string for log messages
        log_file: Optional path to log file

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_context_filter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_context_filter)
        root_logger.addHandler(file_handler)

    return root_logger


def setup_logging_from_config(logging_config) -> logging.Logger:
    """Configure logging from a ``LoggingConfig`` instance."""
    return setup_logging(
        level=logging_config.level,
        log_format=logging_config.format,
        log_file=logging_config.file or None
    )


def get_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return dict(_context_filter.context)


def set_context(**kwargs):
    """
    Set context fields for all subsequent log messages.

    Example:
        set_context(inspection_id="INSP-001", component="lifecycle")
        logger.info("Approving quote")  # Will include inspection_id and component

    Args:
        **kwargs: Context key-value pairs
    """
    _context_filter.set_context(**kwargs)


def clear_context():
    """Clear all context fields."""
    _context_filter.clear_context()

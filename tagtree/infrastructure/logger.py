#!/usr/bin/env python3
"""Structured logging for tagtree.

Thin wrapper over the standard ``logging`` module that attaches key-value
context to every message:
- Log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- Structured context (key-value pairs)
- Console or rotating file output
- Thread-local context stack

The walker, tag table and audit operations all log through the global
logger unless given one, so a single ``set_global_logger`` call from the CLI
controls every message of a run.

Example:
    >>> logger = Logger(level=LogLevel.INFO)
    >>> logger.info("Tag table built", files=120, tags=34)
    >>> with logger.add_context(command="query"):
    ...     logger.debug("Cannot list directory", path="/data/private")
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50

    @classmethod
    def parse(cls, level: Union["LogLevel", int, str]) -> "LogLevel":
        """Accept a LogLevel, a logging constant or a level name."""
        if isinstance(level, str):
            return cls[level.upper()]
        return cls(level)


def _formatted(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


class Logger:
    """Structured logger with context support.

    Messages are rendered as ``"<msg> | key=value ..."`` and the raw context
    dictionary is also passed to handlers through ``extra={"context": ...}``.
    """

    _local = threading.local()

    def __init__(
        self,
        name: str = "tagtree",
        level: Union[LogLevel, str] = LogLevel.WARNING,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Logger name for identification
            level: Minimum log level to output
            handlers: Handlers replacing the default stderr handler
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.set_level(level)

        if handlers is None:
            handlers = [_formatted(logging.StreamHandler())]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

        # Keep tagtree output out of the root logger
        self.logger.propagate = False

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level (LogLevel or level name)."""
        self.logger.setLevel(LogLevel.parse(level))

    def create_file_handler(
        self,
        filename: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
    ) -> logging.handlers.RotatingFileHandler:
        """Create a rotating file handler using the tagtree log format.

        Args:
            filename: Path to log file
            max_bytes: Maximum size before rotation
            backup_count: Number of backup files to keep
        """
        return _formatted(
            logging.handlers.RotatingFileHandler(
                filename, maxBytes=max_bytes, backupCount=backup_count
            )
        )

    def add_handler(self, handler: logging.Handler) -> None:
        """Add a new output handler."""
        self.logger.addHandler(handler)

    def _stack(self) -> List[Dict[str, Any]]:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    @contextmanager
    def add_context(self, **kwargs):
        """Attach key-value pairs to every message logged inside the block.

        Example:
            >>> with logger.add_context(command="check"):
            ...     audit.check(root)
        """
        stack = self._stack()
        stack.append(kwargs)
        try:
            yield
        finally:
            stack.pop()

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return

        combined: Dict[str, Any] = {}
        for ctx in self._stack():
            combined.update(ctx)
        combined.update(context)

        if combined:
            msg = f"{msg} | " + " ".join(f"{k}={v}" for k, v in combined.items())
        self.logger.log(level, msg, extra={"context": combined})

    def debug(self, msg: str, **context) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, msg, context)


# Global logger instance
_global_logger: Optional[Logger] = None


def get_logger(name: str = "tagtree") -> Logger:
    """Return the global logger, creating one named ``name`` if needed."""
    global _global_logger
    if _global_logger is None or _global_logger.name != name:
        _global_logger = Logger(name=name)
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger to use globally
    """
    global _global_logger
    _global_logger = logger

# -*- coding: utf-8 -*-
"""Location: ./schemock/services/logging_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Logging Service.

Thin wrapper around the standard ``logging`` module so every module obtains
its logger the same way and the HTTP binding can configure handlers once:

    logging_service = LoggingService()
    logger = logging_service.get_logger(__name__)

Examples:
    >>> service = LoggingService()
    >>> service.get_logger("schemock.test").name
    'schemock.test'
    >>> formatter = JSONLineFormatter()
    >>> import logging
    >>> record = logging.LogRecord("schemock", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    >>> formatter.format(record).startswith('{"timestamp":')
    True
"""

# Standard
from datetime import datetime, timezone
import logging
import sys
from typing import Optional

# Third-Party
import orjson

_HANDLER_NAME = "schemock-console"
_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JSONLineFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as a JSON line.

        Args:
            record: Log record.

        Returns:
            str: Serialized JSON object.
        """
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry).decode()


class LoggingService:
    """Configure the ``schemock`` logger hierarchy and hand out loggers."""

    def __init__(self) -> None:
        """Initialize the logging service."""
        self._root = logging.getLogger("schemock")

    def initialize(self, level: str = "INFO", log_format: str = "text", stream: Optional[object] = None) -> None:
        """Attach a console handler to the ``schemock`` logger.

        Calling it again replaces the previous handler, so reconfiguring on
        reload never duplicates log lines.

        Args:
            level: Log level name.
            log_format: ``text`` or ``json``.
            stream: Output stream, defaults to ``sys.stderr``.

        Examples:
            >>> import io
            >>> buf = io.StringIO()
            >>> svc = LoggingService()
            >>> svc.initialize("INFO", "text", stream=buf)
            >>> svc.get_logger("schemock.doctest").info("ready")
            >>> "ready" in buf.getvalue()
            True
            >>> svc.shutdown()
        """
        self.shutdown()
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(_HANDLER_NAME)
        if log_format == "json":
            handler.setFormatter(JSONLineFormatter())
        else:
            handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
        self._root.addHandler(handler)
        self.set_level(level)

    def set_level(self, level: str) -> None:
        """Change the level of the ``schemock`` logger.

        Args:
            level: Log level name.
        """
        self._root.setLevel(level.upper())

    def get_logger(self, name: str) -> logging.Logger:
        """Return a named logger.

        Args:
            name: Logger name, usually ``__name__``.

        Returns:
            logging.Logger: The logger.
        """
        return logging.getLogger(name)

    def shutdown(self) -> None:
        """Detach the console handler installed by ``initialize``."""
        for handler in list(self._root.handlers):
            if handler.get_name() == _HANDLER_NAME:
                self._root.removeHandler(handler)
                handler.close()

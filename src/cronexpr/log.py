"""Logging setup for cronexpr.

Modules log through ``logging.getLogger(__name__)``; nothing is printed until
an application (or the ``cronexpr`` command) calls :func:`configure_logging`.

Example output:
    console: 2024-01-15 10:30:00 WARNING [cronexpr.compiler] '?' may not be ...
    json:    {"timestamp": "2024-01-15T10:30:00+00:00", "level": "warning", ...}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TextIO

ROOT_LOGGER = "cronexpr"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
CONSOLE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """Formats each record as a single-line JSON object."""

    def __init__(self, *, sort_keys: bool = False) -> None:
        super().__init__()
        self._sort_keys = sort_keys

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, sort_keys=self._sort_keys, default=str)


def configure_logging(
    level: int | str = logging.WARNING,
    fmt: str = "console",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install a stream handler on the ``cronexpr`` logger.

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Log level (name or number).
        fmt: "console" or "json".
        stream: Output stream (default: stderr).

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    if fmt not in ("console", "json"):
        raise ValueError(f"Unknown log format: {fmt!r}")

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_cronexpr_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATE_FORMAT))
    handler._cronexpr_handler = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger

"""Logging setup for the service.

Modules log through ``logging.getLogger(__name__)``; this module only decides
where records go and how they look, based on ``settings.log_level`` and
``settings.log_format``.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from app.core.config import LogFormatEnum, settings

SIMPLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def build_formatter(log_format: LogFormatEnum) -> logging.Formatter:
    if log_format == LogFormatEnum.json:
        return JsonFormatter()
    return logging.Formatter(SIMPLE_FORMAT)


def configure_logging(
    level: str | None = None,
    log_format: LogFormatEnum | None = None,
) -> logging.Handler:
    """Install a single stream handler on the root logger.

    Calling it again replaces the handler installed by a previous call, so
    the application factory and the test suite can both invoke it.

    Returns:
        The handler that was installed.
    """
    level = level or settings.log_level.value
    log_format = log_format or settings.log_format

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_chat_roster", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(log_format))
    handler._chat_roster = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)

    # SQL echo is controlled by the engine, keep its logger quiet otherwise
    if not settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return handler


__all__ = ["JsonFormatter", "build_formatter", "configure_logging"]

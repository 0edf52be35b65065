"""JSON console logging for the store and the command-line entry point."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, TextIO

from .redaction import sanitize_params, sanitize_text

# Request context the store attaches with ``extra=``; each one present on a
# record becomes a top-level key of the JSON event.
EVENT_FIELDS: tuple[str, ...] = (
    "location",
    "url",
    "params",
    "status_code",
    "error_type",
    "days",
)


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, dict):
        return sanitize_params(value)
    return value


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per line with the store's request context flattened in.

    The message, exception text and every string or params-dict context value
    pass through redaction, so the API key never reaches the console.
    """

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for name in EVENT_FIELDS:
            if hasattr(record, name):
                event[name] = _redact(getattr(record, name))
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(
    name: str = "visualcrossing_weather",
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a JSON console handler to ``name`` and return the logger.

    ``visualcrossing_weather.store`` is a child of the default name, so fetch
    events land on the same handler. A second call only changes the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if not any(isinstance(h.formatter, JsonConsoleFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)
    return logger

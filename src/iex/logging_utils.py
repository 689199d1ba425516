from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional, TextIO


class JsonFormatter(logging.Formatter):
    # Attributes copied from `extra=` into the payload when set.
    extra_keys: tuple[str, ...] = ("symbol", "asset", "endpoint", "status_code", "error")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in self.extra_keys:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str, *, stream: Optional[TextIO] = None) -> None:
    """
    Route all logging through one JSON handler.

    Defaults to stderr: stdout carries command output.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    logging.getLogger("httpx").setLevel(logging.WARNING)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

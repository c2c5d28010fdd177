"""Structured logging helpers: JSON lines with context."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

PACKAGE_LOGGER = "dev_bootstrap"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        command = getattr(record, "command", None)
        if command:
            payload["command"] = command
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str = PACKAGE_LOGGER, *, verbose: bool | None = None) -> logging.Logger:
    """Return *name*'s logger; the JSON stderr handler sits on the package logger.

    ``verbose`` switches the package level between INFO and DEBUG (at DEBUG
    every external command is logged before it runs). ``None`` leaves it alone.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    if verbose is not None:
        root.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logging.getLogger(name)

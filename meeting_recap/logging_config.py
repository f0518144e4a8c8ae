"""Logging setup: one stream handler emitting JSON lines."""

from __future__ import annotations

import json
import logging
import time
from typing import Any


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname,
            "ts": int(time.time() * 1000),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    level = level.strip()
    if level.isdigit():
        return int(level)
    resolved = logging.getLevelName(level.upper())
    # getLevelName returns "Level X" for unknown names
    if isinstance(resolved, str):
        return logging.INFO
    return int(resolved)


def setup_logging(level: int | str | None = None) -> None:
    """Install the JSON handler on the root logger.

    Args:
        level: Numeric level or level name (``"DEBUG"``, ``"info"``...).
            Unknown names fall back to INFO.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(_resolve_level(level))

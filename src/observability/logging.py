"""Structured JSON logging for the gateway."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from observability.context import get_log_fields, get_request_id

ROOT_LOGGER_NAME = "mcp_gateway"


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    Records whose ``msg`` is a dict are merged into the payload, so call sites
    can log ``{"event": "tool.invoke", ...}`` directly.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": get_request_id(),
        }
        payload.update(get_log_fields())
        if isinstance(record.msg, dict):
            payload.update(record.msg)
            if not payload.get("message"):
                payload["message"] = payload.get("event", "")
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install the JSON handler on the gateway logger and return it."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger

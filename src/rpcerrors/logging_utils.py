from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict


EXTRA_FIELDS = (
    "event",
    "request_id",
    "method",
    "path",
    "status_code",
    "code",
    "duration_ms",
    "exception_type",
)


class JsonFormatter(logging.Formatter):
    """
    Render each record as a single JSON line.

    Only the fields in EXTRA_FIELDS are copied from `extra=`, so request
    metadata and the status code name land as top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Additional metadata passed via logger.info(..., extra={})
        for attr in EXTRA_FIELDS:
            if hasattr(record, attr):
                log_payload[attr] = getattr(record, attr)

        # Include exception details when available
        if record.exc_info:
            log_payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_payload, ensure_ascii=False, default=str)


def configure_logger(name: str = "rpcerrors.gateway", level: int = logging.INFO) -> logging.Logger:
    """
    Return `name` with one stdout JSON handler attached.

    Safe to call repeatedly: a logger that already has handlers keeps them.
    Records do not propagate to the root logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    logger.propagate = False
    return logger

"""Structured JSON logging configuration.

Every record becomes one JSON object. Extra fields whose names look like
credentials are masked, so a stray `extra={"password": ...}` or
`extra={"token": ...}` never reaches the log stream.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any

SERVICE_NAME = "users-auth"

REDACTED = "[redacted]"
_SENSITIVE_MARKERS = ("password", "secret", "token", "authorization")


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SENSITIVE_MARKERS)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON, masking credential-like extra fields."""

    # LogRecord attributes that are not passed through as extra fields
    _STANDARD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message'}

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in self._STANDARD_ATTRS or callable(value):
                continue
            log_data[key] = REDACTED if _is_sensitive(key) else value

        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str = "INFO"):
    """Install the JSON formatter on the root and uvicorn access loggers."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)

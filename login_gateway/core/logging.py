# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging — machine-parseable, one JSON line per record.

Callers log stages, reasons and failure kinds only. Credential values
(username, password, token) are never passed to a logger; the redaction
filter masks any that slip into a message anyway.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

from login_gateway.core.config import settings

REDACTED = "***"

_SECRET_PATTERNS = [
    # password=..., token: '...', secret=...
    re.compile(r"\b((?:password|passwd|token|secret|username)\s*[=:]\s*)(?:\"[^\"]*\"|'[^']*'|[^\s,&;\"']+)",
               re.IGNORECASE),
    # "password": "..."
    re.compile(r"([\"'](?:password|passwd|token|secret|username)[\"']\s*:\s*)(?:\"[^\"]*\"|'[^']*')",
               re.IGNORECASE),
    # Authorization: Bearer ...
    re.compile(r"\b(bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
]


def redact(text: str) -> str:
    """Mask credential values in a rendered log message."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(rf"\g<1>{REDACTED}", text)
    return text


class CredentialRedactionFilter(logging.Filter):
    """Rewrite each record's message with credential values masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """Emit every log record as a single JSON line for machine parsing."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            log_data["error"] = redact(str(record.exc_info[1]))
            log_data["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(log_data)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a configured logger instance."""
    logger_name = name or settings.SERVICE_NAME
    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        handler.addFilter(CredentialRedactionFilter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger

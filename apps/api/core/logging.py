"""
Logging setup shared by the API and the plan CLI.

The API logs one JSON object per line to stdout; the CLI logs plain text to
stderr so generated JSON on stdout stays clean.
"""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from core.config import settings

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Engine loggers follow DEBUG; framework loggers stay quiet
PLAN_LOGGER = "services.plan_builder"
QUIET_LOGGERS = ("uvicorn.access", "multipart")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, tagged with service and environment."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Request timing and plan parameters arrive via extra={"extra_fields": {...}}
        extra = getattr(record, "extra_fields", None)
        if isinstance(extra, dict):
            entry.update(extra)

        return json.dumps(entry, default=str)


def setup_logging(log_format: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Replace root handlers with a single stream handler.

    log_format defaults to settings.LOG_FORMAT; production always logs JSON.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    log_format = (log_format or settings.LOG_FORMAT).lower()

    if log_format == "json" or settings.ENVIRONMENT == "production":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger(PLAN_LOGGER).setLevel(logging.DEBUG if settings.DEBUG else log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger

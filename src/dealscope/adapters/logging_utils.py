# src/dealscope/adapters/logging_utils.py
"""
JSON-lines logging for the API and analysis services.

One object per line on stdout, tagged with the deployment env so the
service logs can be filtered without a separate collector config.
"""
import json
import logging
import sys
from datetime import datetime, timezone

from .config import config


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "env": config.ENV,
            "level": record.levelname,
            "logger": record.name,
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }
        # request or deal context passed via extra={"context": {...}}
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    """Logger with a single stdout JSON handler, level taken from DEALSCOPE_LOG_LEVEL."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL.upper())
        logger.propagate = False
    return logger

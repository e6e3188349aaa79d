"""Agate AI — Structured JSON Logging.

Every logger lives under the ``agate`` namespace and shares one stdout
handler installed on that parent, so request context passed via ``extra=``
(route, campaign, latency, status, provider) lands in the JSON line.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from app.config import settings

ROOT_LOGGER = "agate"

CONTEXT_FIELDS = (
    "route",
    "user_id",
    "campaign_id",
    "latency_ms",
    "status_code",
    "provider",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
        root.propagate = False
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return root


def get_logger(name: str) -> logging.Logger:
    """Return ``agate.<name>``; the JSON handler sits on the parent."""
    _configure_root()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")

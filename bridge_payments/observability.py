"""
Structured logging for the bridge.

Every module logs through ``logging.getLogger(__name__)`` and attaches
context with ``extra=``. JSONFormatter surfaces the known context keys
when present; unknown keys stay on the record and are ignored.

Source seeds are never passed to a logger, so no formatter has to
scrub them.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

SURFACED_KEYS = (
    "error_code",
    "error",
    "state",
    "destination",
    "account_id",
    "asset_issuer",
    "memo_type",
    "memo",
    "tx_hash",
    "status_code",
    "path",
    "horizon_url",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in SURFACED_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install a root handler. Call once at startup.

    Args:
        level: Level name; unknown names fall back to INFO.
        fmt: "json" for JSONFormatter, anything else for plain text.

    Returns:
        The installed handler.
    """
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler

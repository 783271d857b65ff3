"""Structured Logging — JSON formatter and one-shot logging setup.

Invariants:
    - Every JSON line carries timestamp (the record's creation time), level, logger, message
    - Identity/invite/request fields passed via `extra=` appear only when set
    - setup_logging is idempotent: calling it again replaces the handler it installed

Design Decisions:
    - Plain stdlib formatter, no logging library: output is one JSON object per line
    - httpx request logging lowered to WARNING so upstream URLs do not flood INFO
    - Called from the FastAPI lifespan and from the leaderboard CLI
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "identity", "invite_code", "category", "error_code",
    "path", "method", "status_code",
)
_HANDLER_NAME = "invitegate"


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({
            key: record.__dict__[key]
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the application handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return handler

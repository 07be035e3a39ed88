"""Structured Logging — JSON formatter and setup, always on stderr.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (capability, request_id, error_code, uri) surfaced when present
    - Logs never touch stdout: stdout carries the protocol stream
    - setup_logging() is idempotent: calling it twice installs one handler

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup by main()
"""

import json
import logging
import sys
from datetime import datetime, timezone


_EXTRA_KEYS = ("capability", "request_id", "error_code", "uri")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class _StderrHandler(logging.StreamHandler):
    """Marker subclass so repeated setup can find its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging for the process."""
    for existing in list(logging.root.handlers):
        if isinstance(existing, _StderrHandler):
            logging.root.removeHandler(existing)

    handler = _StderrHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler

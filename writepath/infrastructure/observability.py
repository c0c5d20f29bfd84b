"""Structured Logging — step-aware formatters for the write-pattern runner.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Step context (step, operation, affected) surfaced when present
    - A WritePathError attached to a record (extra={"error": err} or exc_info)
      is rendered as its to_dict() envelope, and error_code is filled from it
    - JSON format by default, one-line text with LOG_FORMAT=text

Design Decisions:
    - setup_logging called once by the runner before the database is touched
    - Text format keeps tracebacks only for non-WritePathError exceptions
"""

import json
import logging
from datetime import datetime, timezone

from writepath.core.errors import WritePathError

_CONTEXT_FIELDS = ("step", "operation", "affected", "result")


def error_envelope(record: logging.LogRecord) -> dict | None:
    """The WritePathError envelope carried by a record, if any."""
    error = record.__dict__.get("error")
    if isinstance(error, WritePathError):
        return error.to_dict()
    if isinstance(error, dict):
        return error
    if record.exc_info and isinstance(record.exc_info[1], WritePathError):
        return record.exc_info[1].to_dict()
    return None


def _context(record: logging.LogRecord) -> dict:
    fields = {
        key: record.__dict__[key]
        for key in _CONTEXT_FIELDS
        if record.__dict__.get(key) is not None
    }
    envelope = error_envelope(record)
    error_code = record.__dict__.get("error_code") or (
        envelope.get("code") if envelope else None
    )
    if error_code:
        fields["error_code"] = error_code
    if envelope:
        fields["error"] = envelope
    return fields


class JSONFormatter(logging.Formatter):
    """Format logs as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(_context(record))
        if record.exc_info and not isinstance(record.exc_info[1], WritePathError):
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class StepFormatter(logging.Formatter):
    """Human-readable line: message followed by step=... affected=... error_code=..."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        fields = _context(record)
        fields.pop("result", None)
        envelope = fields.pop("error", None)
        exc_info, exc_text = record.exc_info, record.exc_text
        record.exc_info, record.exc_text = None, None
        try:
            line = super().format(record)
        finally:
            record.exc_info, record.exc_text = exc_info, exc_text
        suffix = " ".join(f"{k}={v}" for k, v in fields.items())
        if envelope and envelope.get("entity"):
            suffix += f" entity={envelope['entity']}"
        if suffix:
            line = f"{line} [{suffix.strip()}]"
        if exc_info and not isinstance(exc_info[1], WritePathError):
            line = f"{line}\n{self.formatException(exc_info)}"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else StepFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))

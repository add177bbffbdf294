from __future__ import annotations

import json
import logging
from typing import Any

AUDIT_LOGGER = "radshield.audit"

# Extra fields lifted into structured output when present on a record
_FIELDS = (
    "event",
    "request_id",
    "total_redactions",
    "by_type",
    "score",
    "issues",
    "duration_ms",
    "model",
    "tokens_total",
)


class JsonFormatter(logging.Formatter):
    """Small JSON formatter for structured audit logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(level: str | int | None = None, fmt: str | None = None) -> None:
    """Configure logging.

    Defaults come from settings (``RADSHIELD_LOG_LEVEL``,
    ``RADSHIELD_LOG_FORMAT``). ``json`` switches to structured output with
    the audit fields.
    """
    if level is None or fmt is None:
        from .config import get_settings

        settings = get_settings()
        level = level if level is not None else settings.log_level
        fmt = fmt if fmt is not None else settings.log_format

    if isinstance(level, str):
        level = level.upper()

    if fmt == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler], force=True)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%H:%M:%S",
            force=True,
        )


def audit_event(event: str, request_id: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log one audit event. Callers pass counts and ids, never original values."""
    logging.getLogger(AUDIT_LOGGER).log(
        level,
        event,
        extra={"event": event, "request_id": request_id, **fields},
    )

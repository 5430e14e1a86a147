"""Structured JSON logging utilities."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging

from canvasqti.correlation import get_conversion_id

# Keys passed through ``extra=`` that end up in the JSON payload.
CONTEXT_FIELDS = ("item_ident", "qtype", "diagnostic", "question_count", "format_name")


class JsonFormatter(logging.Formatter):
    """JSON formatter carrying the conversion id and item context."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "conversion_id": get_conversion_id(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logger for JSON output."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

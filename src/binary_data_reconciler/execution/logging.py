"""Structured logging configuration.

Every line is one JSON object. The execution id and node name a record was
logged for are lifted to the top level so a reconciliation pass can be
filtered by execution; any other `extra` fields stay nested under `extra`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any

CORRELATION_FIELDS = ("execution_id", "node")
NOISY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")

_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"asctime", "message"}


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        fields = _record_fields(record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CORRELATION_FIELDS:
            if name in fields:
                payload[name] = fields.pop(name)
        if fields:
            payload["extra"] = fields
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _JsonHandler(logging.StreamHandler):
    pass


def configure_logging(level: str, *, stream: IO[str] | None = None) -> None:
    """Send root logging to `stream` (stdout by default) as JSON lines.

    Calling this again replaces the handler it installed earlier; handlers
    added by anything else are left alone.
    """

    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _JsonHandler)]:
        root.removeHandler(handler)

    handler = _JsonHandler(stream=stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    # boto logs every request at DEBUG.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))

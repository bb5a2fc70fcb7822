from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import sys
from typing import Any

from talentscout.logging_context import get_request_id

REDACTED = "[REDACTED]"

# Gemini takes its key as ``?key=`` or ``x-goog-api-key``.
DEFAULT_REDACT_FIELDS = frozenset(
    {
        "api_key",
        "authorization",
        "cookie",
        "gemini_api_key",
        "key",
        "x-goog-api-key",
    }
)

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "color_message"}

# Loggers silenced below WARNING whatever the configured level.
_QUIET_LOGGERS = ("httpx", "httpcore")

_LEVEL_TAGS = {
    logging.DEBUG: "DBG",
    logging.INFO: "INF",
    logging.WARNING: "WRN",
    logging.ERROR: "ERR",
    logging.CRITICAL: "CRT",
}


def parse_redact_fields(raw: str | None) -> set[str]:
    extra = (part.strip().lower() for part in (raw or "").split(","))
    return set(DEFAULT_REDACT_FIELDS).union(part for part in extra if part)


def configure_logging(
    *,
    level: str,
    log_format: str,
    redact_fields: set[str],
    include_uvicorn_access: bool,
) -> None:
    """Install one stdout handler on the root logger.

    Uvicorn loggers lose their own handlers and propagate to the root, so
    every line shares one format. ``log_format`` is ``json`` or anything
    else for the console layout.
    """
    root_level = logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)
    formatter_cls = JsonLogFormatter if log_format.strip().lower() == "json" else ConsoleLogFormatter

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(root_level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(formatter_cls(redact_fields=redact_fields))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(root_level)

    access_level = root_level if include_uvicorn_access else logging.WARNING
    for name, logger_level in (
        ("uvicorn", root_level),
        ("uvicorn.error", root_level),
        ("uvicorn.access", access_level),
    ):
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(logger_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))


class RequestContextFilter(logging.Filter):
    """Stamps records with the id of the HTTP request being served, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            request_id = get_request_id()
            if request_id is not None:
                record.request_id = request_id
        return True


class Redactor:
    def __init__(self, fields: set[str] | frozenset[str]) -> None:
        self._fields = frozenset(field.lower() for field in fields)

    def __call__(self, key: str, value: Any) -> Any:
        if key.lower() in self._fields:
            return REDACTED
        if isinstance(value, dict):
            return {str(inner): self(str(inner), item) for inner, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self(key, item) for item in value]
        return value


def record_fields(record: logging.LogRecord, redact: Redactor) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%SZ"),
        "level": record.levelname.lower(),
        "logger": record.name,
        "event": getattr(record, "event", None) or record.getMessage(),
    }
    for key, value in vars(record).items():
        if key in _RESERVED_ATTRS or key.startswith("_") or key in fields:
            continue
        if key == "request_id" and not value:
            continue
        fields[key] = redact(key, value)
    return fields


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, redact_fields: set[str]) -> None:
        super().__init__()
        self._redact = Redactor(redact_fields)

    def format(self, record: logging.LogRecord) -> str:
        fields = record_fields(record, self._redact)
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        return json.dumps(fields, ensure_ascii=True, default=str)


class ConsoleLogFormatter(logging.Formatter):
    """``time | LVL | logger | event | rid=.. | GET /path 200 12ms | k=v ...``"""

    def __init__(self, *, redact_fields: set[str]) -> None:
        super().__init__()
        self._redact = Redactor(redact_fields)

    def format(self, record: logging.LogRecord) -> str:
        fields = record_fields(record, self._redact)
        head = [
            fields.pop("timestamp"),
            _LEVEL_TAGS.get(record.levelno, record.levelname[:3].upper()),
            fields.pop("logger"),
            fields.pop("event"),
        ]
        fields.pop("level")
        request_id = fields.pop("request_id", None)
        if request_id:
            head.append(f"rid={request_id}")
        http_summary = _http_summary(fields)
        if http_summary:
            head.append(http_summary)
        head.extend(f"{key}={fields[key]}" for key in sorted(fields))
        if record.exc_info:
            head.append(f"exception={self.formatException(record.exc_info)}")
        return " | ".join(str(part) for part in head if part)


def _http_summary(fields: dict[str, Any]) -> str:
    method = fields.pop("method", None)
    path = fields.pop("path", None)
    status_code = fields.pop("status_code", None)
    duration_ms = fields.pop("duration_ms", None)
    pieces = [f"{method} {path}" if method and path else ""]
    if status_code is not None:
        pieces.append(str(status_code))
    if duration_ms is not None:
        pieces.append(f"{duration_ms}ms")
    return " ".join(piece for piece in pieces if piece)

"""Structured logging for the products API.

- ``request_id`` travels in a contextvar set by the request middleware
- a :class:`Redactor` masks secrets and raw product payloads in log extras
- records are rendered as one JSON object per line (or plain text)
- output goes to stdout or to an optionally rotating file
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging import LogRecord
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterable, Mapping

from products_api.core.config import LogSettings, settings

REDACTED = "[REDACTED]"

# Product fields are client data of unknown sensitivity: never log them raw.
SENSITIVE_KEYS_DEFAULT: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "token",
        "secret",
        "password",
        "fields",
        "new_fields",
        "payload",
    }
)

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> None:
    _request_id_var.set(request_id)


def get_request_id() -> str | None:
    """Return the correlation id of the request being served, if any."""
    return _request_id_var.get()


def clear_request_id() -> None:
    _request_id_var.set(None)


class Redactor:
    """Replace values stored under sensitive keys, at any nesting depth.

    Key matching is case-insensitive. Mappings are rebuilt and lists/tuples
    keep their type; other values pass through unchanged.
    """

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        keys = SENSITIVE_KEYS_DEFAULT if sensitive_keys is None else sensitive_keys
        self.sensitive_keys = frozenset(k.lower() for k in keys)

    def is_sensitive(self, key: Any) -> bool:
        return str(key).lower() in self.sensitive_keys

    def __call__(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {k: REDACTED if self.is_sensitive(k) else self(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(self(v) for v in value)
        return value

    def extras(self, record: LogRecord) -> dict[str, Any]:
        """Redacted copy of the user supplied attributes of ``record``."""
        return {
            key: REDACTED if self.is_sensitive(key) else self(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }


class RequestIdFilter(logging.Filter):
    """Stamp the contextvar request id on records that lack one."""

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        if getattr(record, "request_id", None) is None:
            request_id = get_request_id()
            if request_id:
                record.request_id = request_id
        return True


class SensitiveDataFilter(logging.Filter):
    """Redact record extras in place, for formatters that print them."""

    def __init__(self, sensitive_keys: Iterable[str] | None = None) -> None:
        super().__init__()
        self.redactor = Redactor(sensitive_keys)

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        for key, value in self.redactor.extras(record).items():
            setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record: core fields first, then redacted extras."""

    def __init__(
        self,
        *,
        sensitive_keys: Iterable[str] | None = None,
        ensure_ascii: bool = True,
    ) -> None:
        super().__init__()
        self.redactor = Redactor(sensitive_keys)
        self.ensure_ascii = ensure_ascii

    def format(self, record: LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None) or get_request_id()
        if request_id:
            payload["request_id"] = request_id
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        payload.update(self.redactor.extras(record))
        return json.dumps(payload, default=str, ensure_ascii=self.ensure_ascii)


def _file_handler(cfg: LogSettings) -> logging.Handler:
    path = Path(cfg.file_path or "logs/app.log")
    path.parent.mkdir(parents=True, exist_ok=True)
    if cfg.max_bytes:
        return RotatingFileHandler(
            path, maxBytes=cfg.max_bytes, backupCount=cfg.backup_count, encoding="utf-8"
        )
    return logging.FileHandler(path, encoding="utf-8")


def _formatter(cfg: LogSettings) -> logging.Formatter:
    if cfg.format.lower() == "plain":
        return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    return JsonFormatter()


def configure_logging(log_settings: LogSettings | None = None) -> None:
    """Install a single configured handler on the root logger.

    Calling it again replaces the previous handler, so building several apps
    in one process (as the tests do) does not duplicate output.

    Args:
        log_settings: Logging configuration; the global settings by default.
    """
    cfg = log_settings or settings.log

    if cfg.output.lower() == "file":
        handler = _file_handler(cfg)
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(_formatter(cfg))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))

    # uvicorn installs its own handlers; keep its records off the root one
    for name in ("uvicorn", "uvicorn.access"):
        logging.getLogger(name).propagate = False

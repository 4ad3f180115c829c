"""Structured logging setup: structlog event loggers over stdlib handlers, with redaction."""

from __future__ import annotations

import json
import logging
import math
import re
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Final, Literal, TextIO

import structlog

from conflint.engine.primitives import looks_like_secret_key

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
LogRedactor = Callable[[JSONValue], JSONValue]
LogFormat = Literal["text", "json"]

_REDACTED_VALUE: Final[str] = "***REDACTED***"
_DEFAULT_LOGGER_NAME: Final[str] = "conflint"
LOG_FORMATS: Final[tuple[str, ...]] = ("text", "json")

_SENSITIVE_ASSIGNMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(api[_-]?key|token|password|secret|client_secret|authorization)\b\s*([:=])\s*([^\s,;]+)"
)
_BEARER_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/-]+=*")

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)

# Library default: silent until setup_logging installs a real handler.
logging.getLogger(_DEFAULT_LOGGER_NAME).addHandler(logging.NullHandler())


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Configuration for the stderr log sink."""

    level: int | str = "WARNING"
    log_format: LogFormat = "text"
    logger_name: str = _DEFAULT_LOGGER_NAME
    redact_secrets: bool = True
    stream: TextIO | None = None


def get_logger(name: str) -> Any:
    """Return a structlog logger that forwards events to stdlib logger ``name``.

    Events are logged as ``logger.info("event_name", key=value, ...)``; the
    keyword arguments become record extras rendered under ``fields``.
    """

    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Install one formatted stream handler on the package logger and return it."""

    cfg = config if config is not None else LoggingConfig()
    level = _parse_log_level(cfg.level)
    if cfg.log_format not in LOG_FORMATS:
        raise ValueError(
            f"unsupported log format {cfg.log_format!r}; expected one of: {', '.join(LOG_FORMATS)}"
        )
    logger_name = cfg.logger_name.strip()
    if not logger_name:
        raise ValueError("logger_name must not be empty")

    redactor = default_log_redactor if cfg.redact_secrets else _identity_redactor
    formatter: logging.Formatter
    if cfg.log_format == "json":
        formatter = _JsonLineFormatter(redactor=redactor)
    else:
        formatter = _TextLineFormatter(redactor=redactor)

    handler = logging.StreamHandler(cfg.stream if cfg.stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    logger = logging.getLogger(logger_name)
    _close_handlers(logger)
    logger.setLevel(level)
    logger.propagate = False
    logger.addHandler(handler)
    return logger


def shutdown_logging(logger_name: str = _DEFAULT_LOGGER_NAME) -> None:
    """Flush and detach handlers installed by :func:`setup_logging`."""

    logger = logging.getLogger(logger_name)
    _close_handlers(logger)
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def default_log_redactor(value: JSONValue) -> JSONValue:
    """Deep redaction of secret-looking keys and assignments."""
    return _redact_value(value, key_context=None)


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits canonical JSON objects per log line."""

    def __init__(self, *, redactor: LogRedactor) -> None:
        super().__init__()
        self._redactor = redactor

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": _coerce_log_message(self._redactor(record.getMessage())),
        }

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = self._redactor(extras)

        if record.exc_info is not None:
            event["exception"] = _coerce_log_message(
                self._redactor(self.formatException(record.exc_info))
            )

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class _TextLineFormatter(logging.Formatter):
    """Human-oriented ``<time> <LEVEL> <logger>: <event> key=value`` lines."""

    def __init__(self, *, redactor: LogRedactor) -> None:
        super().__init__()
        self._redactor = redactor

    def format(self, record: logging.LogRecord) -> str:
        message = _coerce_log_message(self._redactor(record.getMessage()))
        line = f"{_iso8601z_from_epoch(record.created)} {record.levelname} {record.name}: {message}"

        redacted = self._redactor(_extract_extra_fields(record))
        if isinstance(redacted, dict) and redacted:
            rendered = " ".join(
                f"{key}={_coerce_log_message(value)}" for key, value in sorted(redacted.items())
            )
            line = f"{line} {rendered}"

        if record.exc_info is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _close_handlers(logger: logging.Logger) -> None:
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.flush()
        existing.close()


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")

    normalized = value.strip().upper()
    parsed = logging.getLevelName(normalized)
    if isinstance(parsed, int):
        return parsed

    raise ValueError(f"unsupported logging level {value!r}")


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _coerce_log_message(value: JSONValue) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS or key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)
    return fields


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        return repr(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_normalize_json_value(item) for item in value), key=repr)
    return repr(value)


def _identity_redactor(value: JSONValue) -> JSONValue:
    return value


def _redact_value(value: JSONValue, *, key_context: str | None) -> JSONValue:
    if key_context is not None and looks_like_secret_key(key_context):
        return _REDACTED_VALUE

    if isinstance(value, str):
        return _redact_string(value)

    if isinstance(value, list):
        return [_redact_value(item, key_context=None) for item in value]

    if isinstance(value, dict):
        return {key: _redact_value(item, key_context=key) for key, item in value.items()}

    return value


def _redact_string(text: str) -> str:
    redacted = _SENSITIVE_ASSIGNMENT_PATTERN.sub(
        lambda match: f"{match.group(1)}{match.group(2)}{_REDACTED_VALUE}", text
    )
    return _BEARER_TOKEN_PATTERN.sub(f"Bearer {_REDACTED_VALUE}", redacted)


__all__ = [
    "JSONScalar",
    "JSONValue",
    "LOG_FORMATS",
    "LogFormat",
    "LogRedactor",
    "LoggingConfig",
    "default_log_redactor",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
]

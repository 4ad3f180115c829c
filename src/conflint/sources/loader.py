"""
conflint — configuration source loader.

File: src/conflint/sources/loader.py
Last updated: 2026-10-18

Purpose
- Turn a configuration file on disk into the flat mapping the engine checks.

What should be included in this file
- File-type detection by name (``.json`` and dotenv files).
- A strict JSON reader and a lenient ``KEY=VALUE`` dotenv reader.

Functional requirements
- Unsupported names, missing files and malformed JSON raise ``SourceLoadError``.
- Dotenv values are always strings; quoting is stripped once.

Non-functional requirements
- Reads are UTF-8 and side-effect free.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Literal, cast

from conflint.observability.logging import get_logger

SourceFormat = Literal["json", "env"]

SUPPORTED_FORMATS_HINT: Final[str] = "Supported formats: .json, .env"
_QUOTES: Final[tuple[str, ...]] = ('"', "'")

_log = get_logger(__name__)


class SourceLoadError(ValueError):
    """Raised when a configuration source cannot be read or parsed."""


@dataclass(frozen=True, slots=True)
class LoadedSource:
    """Parsed configuration together with where and how it was read."""

    data: dict[str, object]
    format: SourceFormat
    path: Path


def get_file_type(path: str | Path) -> SourceFormat:
    """Classify ``path`` as ``json`` or ``env`` from its name alone."""

    candidate = Path(path)
    name = candidate.name.lower()
    if candidate.suffix.lower() == ".json":
        return "json"
    if name == ".env" or name.endswith(".env") or name.startswith(".env."):
        return "env"
    raise SourceLoadError(f"Unsupported file format: {path}. {SUPPORTED_FORMATS_HINT}")


def parse_json_file(path: str | Path) -> dict[str, object]:
    content = _read_text(path)
    try:
        loaded = json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        raise SourceLoadError(f"Invalid JSON format: {exc}") from exc

    if not isinstance(loaded, Mapping):
        raise SourceLoadError(
            f"Invalid JSON format: top-level value must be an object, got {_json_kind(loaded)}"
        )
    return dict(cast("Mapping[str, object]", loaded))


def parse_env_file(path: str | Path) -> dict[str, object]:
    return cast("dict[str, object]", parse_env_text(_read_text(path)))


def parse_env_text(content: str) -> dict[str, str]:
    """Parse dotenv ``KEY=VALUE`` lines; later duplicates win."""

    config: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, _, value = line.partition("=")
        key = key.strip()
        if not key:
            continue
        config[key] = _strip_quotes(value.strip())
    return config


def parse_config_file(path: str | Path) -> LoadedSource:
    """Detect the format of ``path`` and parse it."""

    source_format = get_file_type(path)
    if source_format == "json":
        data = parse_json_file(path)
    else:
        data = parse_env_file(path)

    _log.debug("config_source_loaded", path=str(path), format=source_format, keys=len(data))
    return LoadedSource(data=data, format=source_format, path=Path(path))


def _read_text(path: str | Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SourceLoadError(f"File not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceLoadError(f"Failed to read file: {exc}") from exc


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


def _reject_constant(token: str) -> object:
    raise ValueError(f"non-standard JSON constant {token!r}")


def _json_kind(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "array"


__all__ = [
    "LoadedSource",
    "SUPPORTED_FORMATS_HINT",
    "SourceFormat",
    "SourceLoadError",
    "get_file_type",
    "parse_config_file",
    "parse_env_file",
    "parse_env_text",
    "parse_json_file",
]

"""
conflint — tool settings loader.

File: src/conflint/config/loader.py
Last updated: 2026-10-18

Purpose
- Load effective tool settings from defaults, TOML file, env vars, and CLI overrides.

What should be included in this file
- Precedence logic: CLI > env (CONFLINT_) > file > defaults.
- TOML loading via ``tomllib``.
- Deterministic environment variable mapping and coercion.
- Path normalization relative to the settings file location.

Functional requirements
- Reject invalid settings via schema validation.
- An explicitly named settings file must exist; the implicit one is optional.

Non-functional requirements
- Keep loading deterministic and reproducible.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal

from conflint.config.schema import (
    PATH_LIST_FIELDS,
    assert_valid_settings,
    default_settings,
    merge_settings,
)
from conflint.observability.logging import get_logger

DEFAULT_SETTINGS_FILE: Final[str] = "conflint.toml"
ENV_PREFIX: Final[str] = "CONFLINT_"

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

ValueKind = Literal["str", "int", "bool", "list"]

_log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _Binding:
    path: tuple[str, ...]
    value_type: ValueKind


class SettingsLoadError(ValueError):
    """Raised when settings cannot be loaded or overrides cannot be coerced."""


def load_settings(
    settings_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load effective settings with deterministic precedence: CLI > env > file > defaults."""

    resolved_path = _resolve_settings_path(settings_path)
    explicit_path = settings_path is not None
    env_map = dict(os.environ if environ is None else environ)

    file_payload = _load_toml_file(resolved_path, required=explicit_path)
    merged = merge_settings(default_settings(), file_payload)
    merged = assert_valid_settings(merged)
    merged = normalize_paths(merged, base_dir=resolved_path.parent)

    env_overrides = _collect_env_overrides(merged, env_map)
    cli_payload = _materialize_cli_overrides(dict(cli_overrides or {}))

    merged = merge_settings(merged, env_overrides)
    merged = merge_settings(merged, cli_payload)
    merged = assert_valid_settings(merged)

    _log.debug(
        "settings_loaded",
        settings_file=str(resolved_path) if file_payload else None,
        env_overrides=sorted(_dotted_paths(env_overrides)),
        cli_overrides=sorted(_dotted_paths(cli_payload)),
    )
    return merged


def normalize_paths(settings: Mapping[str, object], *, base_dir: Path) -> dict[str, Any]:
    """Normalize configured path lists relative to ``base_dir``."""

    materialized = merge_settings({}, settings)
    for field_path in PATH_LIST_FIELDS:
        value = _get_nested(materialized, field_path)
        if isinstance(value, list):
            normalized = [
                _normalize_one_path(item, base_dir) if isinstance(item, str) else item
                for item in value
            ]
            _set_nested(materialized, field_path, normalized)
    return materialized


def dump_effective_settings(settings: Mapping[str, object], *, indent: int | None = None) -> str:
    """Return deterministic JSON dump of effective settings.

    Compact by default; ``indent`` switches to a human-readable layout.
    """

    if indent is not None:
        return json.dumps(settings, sort_keys=True, indent=indent, ensure_ascii=False)
    return json.dumps(settings, sort_keys=True, separators=(",", ":"), ensure_ascii=False)



def env_binding_names(settings: Mapping[str, object] | None = None) -> tuple[str, ...]:
    """Environment variable names that override settings, sorted."""

    return tuple(sorted(_build_bindings(settings if settings is not None else default_settings())))


def _resolve_settings_path(settings_path: str | Path | None) -> Path:
    if settings_path is None:
        return (Path.cwd() / DEFAULT_SETTINGS_FILE).resolve()
    return Path(settings_path).expanduser().resolve()


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise SettingsLoadError(f"settings file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise SettingsLoadError(f"unable to read settings file {path}: {exc}") from exc

    return parsed


def _collect_env_overrides(
    settings: Mapping[str, object], environ: Mapping[str, str]
) -> dict[str, Any]:
    bindings = _build_bindings(settings)
    overrides: dict[str, Any] = {}
    for env_name in sorted(bindings):
        raw = environ.get(env_name)
        if raw is None:
            continue
        binding = bindings[env_name]
        value = _coerce_env(raw, binding.value_type, env_name, binding.path)
        _set_nested(overrides, binding.path, value)
    return overrides


def _build_bindings(settings: Mapping[str, object]) -> dict[str, _Binding]:
    bindings: dict[str, _Binding] = {}
    for path, value in _iter_leaf_paths(settings):
        kind = _kind_for_value(value)
        if kind is None:
            continue
        bindings[_env_name_for_path(path)] = _Binding(path=path, value_type=kind)
    return bindings


def _iter_leaf_paths(
    payload: Mapping[str, object],
    prefix: tuple[str, ...] = (),
) -> list[tuple[tuple[str, ...], object]]:
    pairs: list[tuple[tuple[str, ...], object]] = []
    for key in sorted(payload):
        value = payload[key]
        path = (*prefix, key)
        if isinstance(value, Mapping):
            pairs.extend(_iter_leaf_paths(value, path))
        else:
            pairs.append((path, value))
    return pairs


def _kind_for_value(value: object) -> ValueKind | None:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, str):
        return "str"
    if isinstance(value, list):
        return "list"
    return None


def _coerce_env(
    raw: str,
    value_type: ValueKind,
    env_name: str,
    path: tuple[str, ...],
) -> object:
    value = raw.strip()
    if value_type == "str":
        return value
    if value_type == "list":
        # Comma-separated; relative entries resolve against the working directory.
        return [
            _normalize_one_path(item.strip(), Path.cwd())
            for item in value.split(",")
            if item.strip()
        ]
    if value_type == "int":
        try:
            return int(value)
        except ValueError as exc:
            raise SettingsLoadError(f"{env_name} -> {'.'.join(path)} must be an integer") from exc

    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise SettingsLoadError(
        f"{env_name} -> {'.'.join(path)} must be a boolean (true/false/1/0/yes/no/on/off)"
    )


def _materialize_cli_overrides(cli_overrides: Mapping[str, object]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key in sorted(cli_overrides):
        value = cli_overrides[key]
        if value is None:
            continue
        path = tuple(part for part in key.split(".") if part)
        if not path:
            raise SettingsLoadError(f"invalid CLI override key {key!r}")
        _set_nested(payload, path, value)
    return payload


def _set_nested(target: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    cursor = target
    for part in path[:-1]:
        next_node = cursor.get(part)
        if not isinstance(next_node, dict):
            next_node = {}
            cursor[part] = next_node
        cursor = next_node
    cursor[path[-1]] = value


def _get_nested(payload: Mapping[str, object], path: tuple[str, ...]) -> object | None:
    cursor: object = payload
    for part in path:
        if not isinstance(cursor, Mapping):
            return None
        if part not in cursor:
            return None
        cursor = cursor[part]
    return cursor


def _dotted_paths(payload: Mapping[str, object]) -> list[str]:
    return [".".join(path) for path, _ in _iter_leaf_paths(payload)]


def _normalize_one_path(raw: str, base_dir: Path) -> str:
    expanded = os.path.expandvars(raw)
    candidate = Path(expanded).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    normalized = Path(os.path.normpath(str(candidate)))
    return normalized.as_posix()


def _env_name_for_path(path: tuple[str, ...]) -> str:
    return ENV_PREFIX + "_".join(part.upper() for part in path)


__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "ENV_PREFIX",
    "SettingsLoadError",
    "dump_effective_settings",
    "env_binding_names",
    "load_settings",
    "normalize_paths",
]

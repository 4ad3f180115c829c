"""
conflint — tool settings schema and validation.

File: src/conflint/config/schema.py
Last updated: 2026-10-18

Purpose
- Define authoritative defaults for ``conflint.toml`` and strict validation rules.

What should be included in this file
- Validation rules for sections, types and enums.
- Deterministic deep-merge helpers used by the loader.

Functional requirements
- Validate settings payloads and return structured errors (field path + message).
- Reject unknown sections and fields.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

from conflint.observability.logging import LOG_FORMATS
from conflint.reporting.reporter import REPORT_FORMATS

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

# Settings paths that should be normalized relative to the settings file location.
PATH_LIST_FIELDS: Final[tuple[tuple[str, ...], ...]] = (("validation", "schema_files"),)


class ValidationSettings(TypedDict):
    default_schema: str
    schema_files: list[str]
    fail_on_warnings: bool


class OutputSettings(TypedDict):
    format: Literal["text", "json", "detailed"]
    color: bool


class LoggingSettings(TypedDict):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    format: Literal["text", "json"]


class ConflintSettings(TypedDict):
    validation: ValidationSettings
    output: OutputSettings
    logging: LoggingSettings


DEFAULT_SETTINGS: Final[ConflintSettings] = {
    "validation": {
        "default_schema": "application",
        "schema_files": [],
        "fail_on_warnings": False,
    },
    "output": {
        "format": "text",
        "color": True,
    },
    "logging": {
        "level": "WARNING",
        "format": "text",
    },
}


@dataclass(frozen=True, slots=True)
class SettingsValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class SettingsValidationResult:
    """Validation result with normalized settings when no issues were found."""

    settings: dict[str, Any] | None
    issues: tuple[SettingsValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.settings is not None and not self.issues


class SettingsValidationError(ValueError):
    """Raised when strict settings validation fails."""

    def __init__(self, issues: Sequence[SettingsValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid settings:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[SettingsValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(SettingsValidationIssue(path=path, message=message))

    def items(self) -> tuple[SettingsValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_settings() -> ConflintSettings:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_SETTINGS)


def merge_settings(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deterministically deep-merge ``overlay`` onto ``base``."""

    merged = _deep_copy_mapping(base)
    _merge_into(merged, overlay)
    return merged


def validate_settings(settings: Mapping[str, object] | object) -> SettingsValidationResult:
    """Validate a complete settings payload and return structured issues."""

    issues = _IssueCollector()
    root = _as_object(settings, "<root>", issues)
    if root is None:
        return SettingsValidationResult(settings=None, issues=issues.items())

    _reject_unknown_keys(root, {"validation", "output", "logging"}, "", issues)
    _require_keys(root, {"validation", "output", "logging"}, "", issues)

    normalized: dict[str, Any] = {}
    for key, validator in (
        ("validation", _validate_validation),
        ("output", _validate_output),
        ("logging", _validate_logging),
    ):
        if key not in root:
            continue
        section = _as_object(root[key], key, issues)
        if section is None:
            continue
        normalized[key] = validator(section, key, issues)

    if issues.has_issues:
        return SettingsValidationResult(settings=None, issues=issues.items())
    return SettingsValidationResult(settings=normalized, issues=())


def assert_valid_settings(settings: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate settings and raise ``SettingsValidationError`` on failure."""

    result = validate_settings(settings)
    if result.settings is None:
        raise SettingsValidationError(result.issues)
    return result.settings


def _validate_validation(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"default_schema", "schema_files", "fail_on_warnings"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "default_schema" in payload:
        parsed_schema = _as_str(payload["default_schema"], _join(path, "default_schema"), issues)
        if parsed_schema is not None:
            out["default_schema"] = parsed_schema

    if "schema_files" in payload:
        parsed_files = _as_str_list(payload["schema_files"], _join(path, "schema_files"), issues)
        if parsed_files is not None:
            out["schema_files"] = parsed_files

    if "fail_on_warnings" in payload:
        parsed_fail = _as_bool(payload["fail_on_warnings"], _join(path, "fail_on_warnings"), issues)
        if parsed_fail is not None:
            out["fail_on_warnings"] = parsed_fail

    return out


def _validate_output(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"format", "color"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "format" in payload:
        parsed_format = _as_enum(
            payload["format"], _join(path, "format"), issues, allowed_values=REPORT_FORMATS
        )
        if parsed_format is not None:
            out["format"] = parsed_format

    if "color" in payload:
        parsed_color = _as_bool(payload["color"], _join(path, "color"), issues)
        if parsed_color is not None:
            out["color"] = parsed_color

    return out


def _validate_logging(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"level", "format"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "level" in payload:
        raw_level = payload["level"]
        if isinstance(raw_level, str):
            raw_level = raw_level.strip().upper()
        parsed_level = _as_enum(
            raw_level, _join(path, "level"), issues, allowed_values=LOG_LEVELS
        )
        if parsed_level is not None:
            out["level"] = parsed_level

    if "format" in payload:
        parsed_format = _as_enum(
            payload["format"], _join(path, "format"), issues, allowed_values=LOG_FORMATS
        )
        if parsed_format is not None:
            out["format"] = parsed_format

    return out


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_str(value: object, path: str, issues: _IssueCollector) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    if not parsed:
        issues.add(path, "must not be empty")
        return None
    return parsed


def _as_str_list(value: object, path: str, issues: _IssueCollector) -> list[str] | None:
    if not isinstance(value, (list, tuple)):
        issues.add(path, f"expected list of strings, got {type(value).__name__}")
        return None
    out: list[str] = []
    clean = True
    for index, item in enumerate(value):
        parsed = _as_str(item, f"{path}[{index}]", issues)
        if parsed is None:
            clean = False
            continue
        out.append(parsed)
    return out if clean else None


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
) -> str | None:
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {parsed!r}; expected one of: {expected}")
        return None
    return parsed


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key not in allowed:
            issues.add(_join(path, key), "unknown field")


def _require_keys(
    payload: Mapping[str, object],
    required: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(required):
        if key not in payload:
            issues.add(_join(path, key), "missing required field")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in sorted(overlay):
        value = overlay[key]
        if isinstance(value, Mapping):
            existing = target.get(key)
            if isinstance(existing, dict):
                _merge_into(existing, value)
            else:
                nested: dict[str, Any] = {}
                _merge_into(nested, value)
                target[key] = nested
        else:
            target[key] = _deep_copy_value(value)


def _deep_copy_mapping(value: Mapping[str, object]) -> dict[str, Any]:
    return {key: _deep_copy_value(value[key]) for key in sorted(value)}


def _deep_copy_value(value: object) -> Any:
    if isinstance(value, Mapping):
        return {key: _deep_copy_value(item) for key, item in value.items() if isinstance(key, str)}
    if isinstance(value, (list, tuple)):
        return [_deep_copy_value(item) for item in value]
    return copy.deepcopy(value)


__all__ = [
    "ConflintSettings",
    "DEFAULT_SETTINGS",
    "LOG_LEVELS",
    "LoggingSettings",
    "OutputSettings",
    "PATH_LIST_FIELDS",
    "SettingsValidationError",
    "SettingsValidationIssue",
    "SettingsValidationResult",
    "ValidationSettings",
    "assert_valid_settings",
    "default_settings",
    "merge_settings",
    "validate_settings",
]

"""
conflint — schema registry.

File: src/conflint/schemas/registry.py
Last updated: 2026-10-18

Purpose
- Supply the named built-in schemas and parse user schema definitions.

What should be included in this file
- Declarative built-in definitions (same camelCase shape as schema files).
- Strict definition parsing with structured issues (path + message).
- Schema merging and JSON/YAML schema-file loading.

Functional requirements
- Unknown schema names fail with the list of available names.
- Invalid definitions fail with every issue found, not just the first.

Non-functional requirements
- Built-in definitions are immutable; every lookup returns fresh objects.
"""

from __future__ import annotations

import copy
import json
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, cast

import yaml

from conflint.engine.constraints import (
    RULE_TYPES,
    BooleanRule,
    FieldRule,
    NumberRule,
    StringRule,
)
from conflint.engine.schema_checker import Schema
from conflint.observability.logging import get_logger

_log = get_logger(__name__)

SCHEMA_FILE_SUFFIXES: Final[tuple[str, ...]] = (".json", ".yaml", ".yml")

_SCHEMA_FIELDS: Final[frozenset[str]] = frozenset(
    {"name", "description", "requiredKeys", "optionalKeys", "rules"}
)
_COMMON_RULE_FIELDS: Final[frozenset[str]] = frozenset({"type", "notEmpty"})
_RULE_FIELDS_BY_TYPE: Final[dict[str | None, frozenset[str]]] = {
    None: frozenset(),
    "string": frozenset({"minLength", "maxLength", "pattern", "enum"}),
    "number": frozenset({"min", "max", "enum"}),
    "boolean": frozenset({"enum"}),
    "object": frozenset(),
    "array": frozenset(),
}
_KNOWN_RULE_FIELDS: Final[frozenset[str]] = _COMMON_RULE_FIELDS.union(
    *_RULE_FIELDS_BY_TYPE.values()
)

BUILTIN_SCHEMA_DEFINITIONS: Final[dict[str, dict[str, Any]]] = {
    "application": {
        "description": "Basic application configuration",
        "requiredKeys": ["app_name", "environment", "database_url", "port", "api_key"],
        "optionalKeys": ["debug", "log_level", "cache_enabled", "description"],
        "rules": {
            "app_name": {"type": "string", "notEmpty": True},
            "environment": {
                "type": "string",
                "enum": ["development", "staging", "production"],
            },
            "database_url": {"type": "string", "notEmpty": True},
            "port": {"type": "number", "min": 1024, "max": 65535},
            "api_key": {"type": "string", "notEmpty": True},
            "debug": {"type": "boolean"},
            "log_level": {"type": "string", "enum": ["debug", "info", "warn", "error"]},
            "cache_enabled": {"type": "boolean"},
            "description": {"type": "string"},
        },
    },
    "database": {
        "description": "Database connection configuration",
        "requiredKeys": ["host", "port", "database", "user", "password"],
        "optionalKeys": ["ssl", "pool_size", "timeout"],
        "rules": {
            "host": {"type": "string", "notEmpty": True},
            "port": {"type": "number", "min": 1024, "max": 65535},
            "database": {"type": "string", "notEmpty": True},
            "user": {"type": "string", "notEmpty": True},
            "password": {"type": "string", "notEmpty": True},
            "ssl": {"type": "boolean"},
            "pool_size": {"type": "number", "min": 1, "max": 1000},
            "timeout": {"type": "number", "min": 100, "max": 300000},
        },
    },
    "auth": {
        "description": "Authentication configuration",
        "requiredKeys": ["jwt_secret", "session_timeout"],
        "optionalKeys": ["password_hash_rounds", "mfa_enabled", "oauth_provider"],
        "rules": {
            "jwt_secret": {"type": "string", "notEmpty": True, "minLength": 32},
            "session_timeout": {"type": "number", "min": 300, "max": 86400},
            "password_hash_rounds": {"type": "number", "min": 8, "max": 15},
            "mfa_enabled": {"type": "boolean"},
            "oauth_provider": {
                "type": "string",
                "enum": ["google", "github", "microsoft", "none"],
            },
        },
    },
}

BUILTIN_SCHEMA_NAMES: Final[tuple[str, ...]] = tuple(BUILTIN_SCHEMA_DEFINITIONS)

DEFAULT_SCHEMA: Final[Schema] = Schema(name="default")


@dataclass(frozen=True, slots=True)
class SchemaDefinitionIssue:
    """Single structured problem in a schema definition."""

    path: str
    message: str


class SchemaDefinitionError(ValueError):
    """Raised when a schema definition cannot be turned into a ``Schema``."""

    def __init__(self, issues: Sequence[SchemaDefinitionIssue], *, source: str = "") -> None:
        self.issues = tuple(issues)
        self.source = source
        if not self.issues:
            rendered = "unknown schema definition failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        origin = f" in {source}" if source else ""
        super().__init__(f"invalid schema definition{origin}:\n{rendered}")


class UnknownSchemaError(ValueError):
    """Raised when a schema name is not registered."""

    def __init__(self, name: str, available: Iterable[str]) -> None:
        self.name = name
        self.available = tuple(available)
        super().__init__(
            f'Unknown schema "{name}". Available schemas: {", ".join(self.available)}'
        )


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[SchemaDefinitionIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(SchemaDefinitionIssue(path=path, message=message))

    def items(self) -> tuple[SchemaDefinitionIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def create_application_schema() -> Schema:
    return schema_from_mapping(BUILTIN_SCHEMA_DEFINITIONS["application"], name="application")


def create_database_schema() -> Schema:
    return schema_from_mapping(BUILTIN_SCHEMA_DEFINITIONS["database"], name="database")


def create_auth_schema() -> Schema:
    return schema_from_mapping(BUILTIN_SCHEMA_DEFINITIONS["auth"], name="auth")


def get_schema_by_name(name: str) -> Schema | None:
    """Return a fresh built-in schema, or ``None`` for unknown names."""

    definition = BUILTIN_SCHEMA_DEFINITIONS.get(name)
    if definition is None:
        return None
    return schema_from_mapping(definition, name=name)


def merge_schemas(*schemas: Schema, name: str | None = None) -> Schema:
    """Merge schemas left to right.

    Key lists are unioned in first-seen order; a later rule for the same key
    replaces the earlier one.
    """

    required: list[str] = []
    optional: list[str] = []
    rules: dict[str, FieldRule] = {}
    for schema in schemas:
        _extend_unique(required, schema.required_keys)
        _extend_unique(optional, schema.optional_keys)
        rules.update(schema.rules)

    merged_name = name if name is not None else "+".join(schema.name for schema in schemas)
    return Schema(
        name=merged_name or "merged",
        required_keys=tuple(required),
        optional_keys=tuple(optional),
        rules=rules,
    )


def schema_from_mapping(
    payload: Mapping[str, object] | object,
    *,
    name: str | None = None,
    source: str = "",
) -> Schema:
    """Parse a camelCase schema definition into a :class:`Schema`."""

    issues = _IssueCollector()
    if not isinstance(payload, Mapping):
        issues.add("<root>", f"expected object, got {type(payload).__name__}")
        raise SchemaDefinitionError(issues.items(), source=source)

    for key in sorted(str(item) for item in payload):
        if key not in _SCHEMA_FIELDS:
            issues.add(key, "unknown field")

    resolved_name = name
    if resolved_name is None:
        raw_name = payload.get("name")
        if isinstance(raw_name, str) and raw_name.strip():
            resolved_name = raw_name.strip()
        elif raw_name is not None:
            issues.add("name", "expected non-empty string")
        else:
            issues.add("name", "missing required field")

    required = _as_key_list(payload.get("requiredKeys", []), "requiredKeys", issues)
    optional = _as_key_list(payload.get("optionalKeys", []), "optionalKeys", issues)

    rules: dict[str, FieldRule] = {}
    raw_rules = payload.get("rules", {})
    if not isinstance(raw_rules, Mapping):
        issues.add("rules", f"expected object, got {type(raw_rules).__name__}")
    else:
        for key, raw_rule in raw_rules.items():
            rule_path = f"rules.{key}"
            if not isinstance(key, str):
                issues.add("rules", f"rule key must be string, got {type(key).__name__}")
                continue
            parsed = _parse_rule(raw_rule, rule_path, issues)
            if parsed is not None:
                rules[key] = parsed

    if issues.has_issues:
        raise SchemaDefinitionError(issues.items(), source=source)

    return Schema(
        name=resolved_name or "custom",
        required_keys=required,
        optional_keys=optional,
        rules=rules,
    )


def load_schema_file(path: str | Path) -> Schema:
    """Load a schema definition from a ``.json``, ``.yaml`` or ``.yml`` file.

    The schema name defaults to the file stem when the definition has none.
    """

    resolved = Path(path).expanduser()
    suffix = resolved.suffix.lower()
    if suffix not in SCHEMA_FILE_SUFFIXES:
        raise SchemaDefinitionError(
            (
                SchemaDefinitionIssue(
                    "<file>",
                    f"unsupported schema file type {suffix or '(none)'!r}; "
                    f"expected one of: {', '.join(SCHEMA_FILE_SUFFIXES)}",
                ),
            ),
            source=str(resolved),
        )

    try:
        with resolved.open("r", encoding="utf-8") as handle:
            if suffix == ".json":
                loaded = cast("object", json.load(handle))
            else:
                loaded = cast("object", yaml.safe_load(handle))
    except FileNotFoundError as exc:
        raise SchemaDefinitionError(
            (SchemaDefinitionIssue("<file>", "schema file not found"),), source=str(resolved)
        ) from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaDefinitionError(
            (SchemaDefinitionIssue("<file>", f"unparseable schema file ({exc})"),),
            source=str(resolved),
        ) from exc
    except OSError as exc:
        raise SchemaDefinitionError(
            (SchemaDefinitionIssue("<file>", f"unable to read schema file ({exc})"),),
            source=str(resolved),
        ) from exc

    name: str | None = None
    if not (isinstance(loaded, Mapping) and "name" in loaded):
        name = resolved.stem
    schema = schema_from_mapping(loaded, name=name, source=str(resolved))
    _log.debug(
        "schema_file_loaded",
        path=str(resolved),
        schema=schema.name,
        required_keys=len(schema.required_keys),
        rules=len(schema.rules),
    )
    return schema


class SchemaRegistry:
    """Built-in schemas plus schemas registered at runtime."""

    def __init__(self, extra: Iterable[Schema] = ()) -> None:
        self._custom: dict[str, Schema] = {}
        for schema in extra:
            self.register(schema)

    def register(self, schema: Schema) -> None:
        if schema.name in self._custom:
            _log.warning("schema_replaced", schema=schema.name)
        elif schema.name in BUILTIN_SCHEMA_DEFINITIONS:
            _log.info("builtin_schema_overridden", schema=schema.name)
        self._custom[schema.name] = schema

    def load_file(self, path: str | Path) -> Schema:
        schema = load_schema_file(path)
        self.register(schema)
        return schema

    def names(self) -> tuple[str, ...]:
        extra = tuple(name for name in self._custom if name not in BUILTIN_SCHEMA_DEFINITIONS)
        return BUILTIN_SCHEMA_NAMES + extra

    def get(self, name: str) -> Schema | None:
        custom = self._custom.get(name)
        if custom is not None:
            return custom
        return get_schema_by_name(name)

    def require(self, name: str) -> Schema:
        schema = self.get(name)
        if schema is None:
            raise UnknownSchemaError(name, self.names())
        return schema

    def resolve(self, names: Sequence[str]) -> Schema:
        """Look up one or more names, merging them when several are given."""

        if not names:
            return DEFAULT_SCHEMA
        schemas = [self.require(name) for name in names]
        if len(schemas) == 1:
            return schemas[0]
        return merge_schemas(*schemas)


def builtin_schema_definition(name: str) -> dict[str, Any] | None:
    """Return a deep copy of a built-in definition mapping."""

    definition = BUILTIN_SCHEMA_DEFINITIONS.get(name)
    if definition is None:
        return None
    return copy.deepcopy(definition)


def _parse_rule(raw: object, path: str, issues: _IssueCollector) -> FieldRule | None:
    if not isinstance(raw, Mapping):
        issues.add(path, f"expected object, got {type(raw).__name__}")
        return None

    declared = raw.get("type")
    if declared is not None and declared not in RULE_TYPES:
        expected = ", ".join(sorted(RULE_TYPES))
        issues.add(f"{path}.type", f"invalid rule type {declared!r}; expected one of: {expected}")
        return None
    type_name = cast("str | None", declared)

    allowed = _COMMON_RULE_FIELDS | _RULE_FIELDS_BY_TYPE[type_name]
    clean = True
    for field_name in sorted(str(item) for item in raw):
        if field_name in allowed:
            continue
        if field_name in _KNOWN_RULE_FIELDS:
            # constraints for another type are ignored, not enforced
            _log.warning(
                "rule_field_ignored",
                rule_path=path,
                field_name=field_name,
                rule_type=type_name or "untyped",
            )
            continue
        issues.add(f"{path}.{field_name}", "unknown rule field")
        clean = False

    not_empty = raw.get("notEmpty", False)
    if not isinstance(not_empty, bool):
        issues.add(f"{path}.notEmpty", f"expected boolean, got {type(not_empty).__name__}")
        clean = False

    if type_name == "string":
        min_length = _as_length(raw.get("minLength"), f"{path}.minLength", issues)
        max_length = _as_length(raw.get("maxLength"), f"{path}.maxLength", issues)
        pattern = _as_pattern(raw.get("pattern"), f"{path}.pattern", issues)
        enum = _as_enum(raw.get("enum"), f"{path}.enum", issues, member_type=str)
        string_fields = ("minLength", "maxLength", "pattern", "enum")
        if not clean or _any_invalid(raw, string_fields, min_length, max_length, pattern, enum):
            return None
        return StringRule(
            not_empty=bool(not_empty),
            min_length=min_length,
            max_length=max_length,
            pattern=pattern,
            enum=enum,
        )

    if type_name == "number":
        minimum = _as_bound(raw.get("min"), f"{path}.min", issues)
        maximum = _as_bound(raw.get("max"), f"{path}.max", issues)
        enum = _as_enum(raw.get("enum"), f"{path}.enum", issues, member_type=(int, float))
        if not clean or _any_invalid(raw, ("min", "max", "enum"), minimum, maximum, enum):
            return None
        return NumberRule(not_empty=bool(not_empty), minimum=minimum, maximum=maximum, enum=enum)

    if type_name == "boolean":
        enum = _as_enum(raw.get("enum"), f"{path}.enum", issues, member_type=bool)
        if not clean or _any_invalid(raw, ("enum",), enum):
            return None
        return BooleanRule(not_empty=bool(not_empty), enum=enum)

    if not clean:
        return None
    return RULE_TYPES.get(type_name or "", FieldRule)(not_empty=bool(not_empty))


def _any_invalid(raw: Mapping[str, object], fields: tuple[str, ...], *parsed: object) -> bool:
    return any(raw.get(name) is not None and value is None for name, value in zip(fields, parsed))


def _as_key_list(value: object, path: str, issues: _IssueCollector) -> tuple[str, ...]:
    if not isinstance(value, list):
        issues.add(path, f"expected list of strings, got {type(value).__name__}")
        return ()
    keys: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str) or not item:
            issues.add(f"{path}[{index}]", "expected non-empty string")
            continue
        if item in keys:
            issues.add(f"{path}[{index}]", f"duplicate key {item!r}")
            continue
        keys.append(item)
    return tuple(keys)


def _as_length(value: object, path: str, issues: _IssueCollector) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(path, f"expected integer, got {type(value).__name__}")
        return None
    if value < 0:
        issues.add(path, "must be >= 0")
        return None
    return value


def _as_bound(value: object, path: str, issues: _IssueCollector) -> int | float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        issues.add(path, f"expected number, got {type(value).__name__}")
        return None
    if not math.isfinite(value):
        issues.add(path, "must be finite")
        return None
    return value


def _as_pattern(value: object, path: str, issues: _IssueCollector) -> re.Pattern[str] | None:
    if value is None:
        return None
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    try:
        return re.compile(value)
    except re.error as exc:
        issues.add(path, f"invalid regular expression ({exc})")
        return None


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    member_type: type | tuple[type, ...],
) -> tuple[Any, ...] | None:
    if value is None:
        return None
    if not isinstance(value, list) or not value:
        issues.add(path, "expected non-empty list")
        return None
    members: list[Any] = []
    for index, item in enumerate(value):
        wrong_bool = isinstance(item, bool) and member_type is not bool
        if wrong_bool or not isinstance(item, member_type):
            issues.add(f"{path}[{index}]", f"unexpected enum member type {type(item).__name__}")
            continue
        members.append(item)
    if len(members) != len(value):
        return None
    return tuple(members)


def _extend_unique(target: list[str], items: Iterable[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


__all__ = [
    "BUILTIN_SCHEMA_DEFINITIONS",
    "BUILTIN_SCHEMA_NAMES",
    "DEFAULT_SCHEMA",
    "SCHEMA_FILE_SUFFIXES",
    "SchemaDefinitionError",
    "SchemaDefinitionIssue",
    "SchemaRegistry",
    "UnknownSchemaError",
    "builtin_schema_definition",
    "create_application_schema",
    "create_auth_schema",
    "create_database_schema",
    "get_schema_by_name",
    "load_schema_file",
    "merge_schemas",
    "schema_from_mapping",
]

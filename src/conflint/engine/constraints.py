"""
conflint — field rules and the constraint evaluator.

File: src/conflint/engine/constraints.py
Last updated: 2026-10-18

Purpose
- Model per-key validation contracts as one frozen variant per declared type.
- Evaluate a single value against a single rule.

Functional requirements
- ``notEmpty`` failure and type mismatch each stop evaluation for the key.
- Type-specific constraints are independent of each other and all reported.
- Constraints irrelevant to the declared type are never evaluated.

Non-functional requirements
- Pure functions only; messages are deterministic for equal inputs.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, TypeAlias

from conflint.engine.models import JSONValue
from conflint.engine.primitives import (
    ValueType,
    classify,
    is_empty,
    matches_pattern,
    render_value,
)

EnumOptions: TypeAlias = tuple[str | int | float | bool, ...]

MSG_EMPTY = "Value cannot be empty"
MSG_PATTERN = "Value does not match required pattern"


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Rule declared without a ``type``: only ``notEmpty`` applies."""

    type_name: ClassVar[ValueType | None] = None

    not_empty: bool = False

    def constraint_violations(self, value: object) -> list[str]:
        return []

    def to_dict(self) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {}
        if self.type_name is not None:
            payload["type"] = self.type_name
        if self.not_empty:
            payload["notEmpty"] = True
        return payload


AnyRule = FieldRule


@dataclass(frozen=True, slots=True)
class StringRule(FieldRule):
    type_name: ClassVar[ValueType | None] = "string"

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | re.Pattern[str] | None = None
    enum: EnumOptions | None = None

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))

    def constraint_violations(self, value: object) -> list[str]:
        if not isinstance(value, str):
            return []
        violations: list[str] = []
        length = len(value)
        if self.min_length is not None and length < self.min_length:
            violations.append(f"String length is {length}, minimum is {self.min_length}")
        if self.max_length is not None and length > self.max_length:
            violations.append(f"String length is {length}, maximum is {self.max_length}")
        if self.pattern is not None and not matches_pattern(value, self.pattern):
            violations.append(MSG_PATTERN)
        if self.enum is not None and not enum_contains(self.enum, value):
            violations.append(_enum_message(self.enum))
        return violations

    def to_dict(self) -> dict[str, JSONValue]:
        payload = FieldRule.to_dict(self)
        if self.min_length is not None:
            payload["minLength"] = self.min_length
        if self.max_length is not None:
            payload["maxLength"] = self.max_length
        if isinstance(self.pattern, re.Pattern):
            payload["pattern"] = self.pattern.pattern
        if self.enum is not None:
            payload["enum"] = list(self.enum)
        return payload


@dataclass(frozen=True, slots=True)
class NumberRule(FieldRule):
    type_name: ClassVar[ValueType | None] = "number"

    minimum: int | float | None = None
    maximum: int | float | None = None
    enum: EnumOptions | None = None

    def __post_init__(self) -> None:
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))

    def constraint_violations(self, value: object) -> list[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return []
        violations: list[str] = []
        if self.minimum is not None and value < self.minimum:
            violations.append(
                f"Value is {render_value(value)}, minimum is {render_value(self.minimum)}"
            )
        if self.maximum is not None and value > self.maximum:
            violations.append(
                f"Value is {render_value(value)}, maximum is {render_value(self.maximum)}"
            )
        if self.enum is not None and not enum_contains(self.enum, value):
            violations.append(_enum_message(self.enum))
        return violations

    def to_dict(self) -> dict[str, JSONValue]:
        payload = FieldRule.to_dict(self)
        if self.minimum is not None:
            payload["min"] = self.minimum
        if self.maximum is not None:
            payload["max"] = self.maximum
        if self.enum is not None:
            payload["enum"] = list(self.enum)
        return payload


@dataclass(frozen=True, slots=True)
class BooleanRule(FieldRule):
    type_name: ClassVar[ValueType | None] = "boolean"

    enum: EnumOptions | None = None

    def __post_init__(self) -> None:
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))

    def constraint_violations(self, value: object) -> list[str]:
        if not isinstance(value, bool):
            return []
        if self.enum is not None and not enum_contains(self.enum, value):
            return [_enum_message(self.enum)]
        return []

    def to_dict(self) -> dict[str, JSONValue]:
        payload = FieldRule.to_dict(self)
        if self.enum is not None:
            payload["enum"] = list(self.enum)
        return payload


@dataclass(frozen=True, slots=True)
class ObjectRule(FieldRule):
    type_name: ClassVar[ValueType | None] = "object"


@dataclass(frozen=True, slots=True)
class ArrayRule(FieldRule):
    type_name: ClassVar[ValueType | None] = "array"


RULE_TYPES: dict[str, type[FieldRule]] = {
    "string": StringRule,
    "number": NumberRule,
    "boolean": BooleanRule,
    "object": ObjectRule,
    "array": ArrayRule,
}


def evaluate(value: object, rule: FieldRule) -> list[str]:
    """Validate one value against one rule and return violation messages."""

    if rule.not_empty and is_empty(value):
        return [MSG_EMPTY]

    expected = rule.type_name
    if expected is not None:
        actual = classify(value)
        if actual != expected:
            return [f"Invalid type '{actual}', expected '{expected}'"]

    return rule.constraint_violations(value)


def enum_contains(options: Sequence[object], value: object) -> bool:
    """Type-aware membership: ``True`` never matches ``1`` and vice versa."""

    value_type = classify(value)
    return any(classify(option) == value_type and option == value for option in options)


def _enum_message(options: Sequence[object]) -> str:
    rendered = ", ".join(render_value(option) for option in options)
    return f"Value must be one of: {rendered}"


__all__ = [
    "AnyRule",
    "ArrayRule",
    "BooleanRule",
    "EnumOptions",
    "FieldRule",
    "NumberRule",
    "ObjectRule",
    "RULE_TYPES",
    "StringRule",
    "enum_contains",
    "evaluate",
]

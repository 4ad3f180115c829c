"""
conflint — primitive value checks.

File: src/conflint/engine/primitives.py
Last updated: 2026-10-18

Purpose
- Leaf helpers shared by the constraint evaluator and the security rule set.

What should be included in this file
- Type classification, emptiness, pattern and numeric range tests.
- Password-strength and secret-key-name heuristics.
- JSON-style scalar rendering for finding messages.

Functional requirements
- No helper may raise for any JSON-compatible input.

Non-functional requirements
- No dependencies beyond the standard library; no module-level mutable state.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Final, Literal

ValueType = Literal["string", "number", "boolean", "array", "object", "null"]

COMMON_WEAK_PASSWORDS: Final[tuple[str, ...]] = (
    "password",
    "123456",
    "12345678",
    "qwerty",
    "abc123",
    "password123",
    "admin",
    "letmein",
    "welcome",
    "1q2w3e4r",
    "monkey",
    "dragon",
    "master",
    "sunshine",
    "princess",
    "1234567890",
)
_WEAK_PASSWORD_SET: Final[frozenset[str]] = frozenset(COMMON_WEAK_PASSWORDS)

MIN_PASSWORD_LENGTH: Final[int] = 8

SECRET_KEY_PATTERNS: Final[tuple[re.Pattern[str], ...]] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"password",
        r"secret",
        r"token",
        r"api[_-]?key",
        r"auth",
        r"apikey",
        r"private[_-]?key",
        r"aws[_-]?(secret|access)[_-]?key",
        r"sql[_-]?password",
    )
)

REASON_NOT_A_STRING: Final[str] = "Password must be a string"
REASON_TOO_SHORT: Final[str] = "Password length less than 8 characters"
REASON_COMMON: Final[str] = "Common weak password detected"

_DECIMAL_LITERAL: Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_RADIX_LITERAL: Final[re.Pattern[str]] = re.compile(r"0(?P<radix>[xXoObB])(?P<digits>[0-9a-fA-F]+)")
_INFINITY_LITERAL: Final[re.Pattern[str]] = re.compile(r"[+-]?Infinity")
_RADIX_BASES: Final[dict[str, int]] = {"x": 16, "o": 8, "b": 2}


@dataclass(frozen=True, slots=True)
class PasswordVerdict:
    """Outcome of the password-strength heuristic."""

    is_weak: bool
    reason: str | None = None


def classify(value: object) -> ValueType:
    """Return the semantic type name of a configuration value.

    ``bool`` is checked before numbers because it subclasses ``int``, arrays
    are told apart from objects, and ``None`` is its own ``"null"`` type.
    """

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return "array"
    return "object"


def is_empty(value: object) -> bool:
    """Return whether a value counts as empty for ``notEmpty`` constraints."""

    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) == 0
    return False


def matches_pattern(value: object, pattern: str | re.Pattern[str]) -> bool:
    """Search ``pattern`` in the string form of ``value``."""

    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return compiled.search(render_value(value)) is not None


def coerce_number(value: object) -> float | None:
    """Coerce numbers and numeric strings; anything else yields ``None``.

    Strings follow the numeric literal grammar of JSON-producing tools:
    decimal and exponent forms, ``0x``/``0o``/``0b`` radix prefixes and
    ``Infinity``. Digit separators and ``nan``/``inf`` spellings are not
    numbers. Integers beyond float range coerce to signed infinity.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _int_to_float(value)
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if _DECIMAL_LITERAL.fullmatch(text):
        return float(text)
    if _INFINITY_LITERAL.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    radix = _RADIX_LITERAL.fullmatch(text)
    if radix is None:
        return None
    try:
        digits = int(radix.group("digits"), _RADIX_BASES[radix.group("radix").lower()])
    except ValueError:
        return None
    return _int_to_float(digits)


def _int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def in_range(value: object, minimum: float, maximum: float) -> bool:
    """Inclusive numeric range test; non-numeric input is out of range."""

    parsed = coerce_number(value)
    if parsed is None:
        return False
    return minimum <= parsed <= maximum


def password_strength(candidate: object) -> PasswordVerdict:
    if not isinstance(candidate, str) or not candidate:
        return PasswordVerdict(is_weak=True, reason=REASON_NOT_A_STRING)
    if len(candidate) < MIN_PASSWORD_LENGTH:
        return PasswordVerdict(is_weak=True, reason=REASON_TOO_SHORT)
    if candidate.lower() in _WEAK_PASSWORD_SET:
        return PasswordVerdict(is_weak=True, reason=REASON_COMMON)
    return PasswordVerdict(is_weak=False)


def looks_like_secret_key(key_name: str) -> bool:
    """Return whether a key name suggests it holds a credential."""

    return any(pattern.search(key_name) for pattern in SECRET_KEY_PATTERNS)


def render_value(value: object) -> str:
    """Render a scalar the way it appears in JSON sources (``true``, ``3``)."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # past the interpreter's int-to-str digit limit
            return str(_int_to_float(value))
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "COMMON_WEAK_PASSWORDS",
    "MIN_PASSWORD_LENGTH",
    "PasswordVerdict",
    "SECRET_KEY_PATTERNS",
    "ValueType",
    "classify",
    "coerce_number",
    "in_range",
    "is_empty",
    "looks_like_secret_key",
    "matches_pattern",
    "password_strength",
    "render_value",
]

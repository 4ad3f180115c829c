"""
conflint engine package public API.

File: src/conflint/engine/__init__.py
Last updated: 2026-10-18

Purpose
- Export the pure rule-evaluation engine: primitives, field rules, schema
  checking, security rules and the validation orchestrator.

Non-functional requirements
- No I/O, logging or global mutable state anywhere in this package.
"""

from conflint.engine.constraints import (
    AnyRule,
    ArrayRule,
    BooleanRule,
    FieldRule,
    NumberRule,
    ObjectRule,
    RULE_TYPES,
    StringRule,
    evaluate,
)
from conflint.engine.models import Issue, Severity, ValidationResult, ValidationSummary
from conflint.engine.primitives import (
    COMMON_WEAK_PASSWORDS,
    PasswordVerdict,
    classify,
    coerce_number,
    in_range,
    is_empty,
    looks_like_secret_key,
    matches_pattern,
    password_strength,
)
from conflint.engine.schema_checker import (
    RULE_MISSING_REQUIRED_KEY,
    RULE_UNEXPECTED_KEY,
    RULE_VALIDATION_ERROR,
    Schema,
    check_schema,
)
from conflint.engine.security_rules import (
    SECURITY_RULE_NAMES,
    SECURITY_RULES,
    SecurityRule,
    apply_security_rules,
)
from conflint.engine.validator import validate

__all__ = [
    "AnyRule",
    "ArrayRule",
    "BooleanRule",
    "COMMON_WEAK_PASSWORDS",
    "FieldRule",
    "Issue",
    "NumberRule",
    "ObjectRule",
    "PasswordVerdict",
    "RULE_MISSING_REQUIRED_KEY",
    "RULE_TYPES",
    "RULE_UNEXPECTED_KEY",
    "RULE_VALIDATION_ERROR",
    "SECURITY_RULES",
    "SECURITY_RULE_NAMES",
    "Schema",
    "SecurityRule",
    "Severity",
    "StringRule",
    "ValidationResult",
    "ValidationSummary",
    "apply_security_rules",
    "check_schema",
    "classify",
    "coerce_number",
    "evaluate",
    "in_range",
    "is_empty",
    "looks_like_secret_key",
    "matches_pattern",
    "password_strength",
    "validate",
]

"""Validation orchestrator: schema issues first, then security findings."""

from __future__ import annotations

from collections.abc import Mapping

from conflint.engine.models import Issue, ValidationResult
from conflint.engine.schema_checker import Schema, check_schema
from conflint.engine.security_rules import SECURITY_RULES, SecurityRule, apply_security_rules


def validate(
    config: Mapping[str, object],
    schema: Schema,
    *,
    rules: tuple[SecurityRule, ...] = SECURITY_RULES,
) -> ValidationResult:
    """Validate ``config`` against ``schema`` and the security rule table.

    Issues are ordered schema-first, then by config iteration order and rule
    table order per key. Nothing is deduplicated.
    """

    issues: list[Issue] = check_schema(config, schema)
    for key, value in config.items():
        issues.extend(apply_security_rules(key, value, config, rules=rules))
    return ValidationResult.from_issues(issues)


__all__ = ["validate"]

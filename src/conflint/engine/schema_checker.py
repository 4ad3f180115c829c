"""Schema conformance: required keys, unexpected keys, per-key field rules."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from conflint.engine.constraints import FieldRule, evaluate
from conflint.engine.models import Issue, JSONValue, Severity

RULE_MISSING_REQUIRED_KEY: Final[str] = "missing-required-key"
RULE_UNEXPECTED_KEY: Final[str] = "unexpected-key"
RULE_VALIDATION_ERROR: Final[str] = "validation-error"


@dataclass(frozen=True, slots=True)
class Schema:
    """Named required/optional key sets plus per-key field rules."""

    name: str = "custom"
    required_keys: tuple[str, ...] = ()
    optional_keys: tuple[str, ...] = ()
    rules: Mapping[str, FieldRule] = field(default_factory=dict)

    @property
    def recognized_keys(self) -> frozenset[str]:
        """Closed key set; empty means every key is recognized."""

        return frozenset(self.required_keys) | frozenset(self.optional_keys)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "name": self.name,
            "requiredKeys": list(self.required_keys),
            "optionalKeys": list(self.optional_keys),
            "rules": {key: rule.to_dict() for key, rule in self.rules.items()},
        }


def check_schema(config: Mapping[str, object], schema: Schema) -> list[Issue]:
    """Validate a whole configuration object against ``schema``.

    Rules attached to keys absent from ``config`` never run; absence is
    reported only through ``requiredKeys``.
    """

    issues: list[Issue] = []

    for key in schema.required_keys:
        if key not in config:
            issues.append(
                Issue(
                    key=key,
                    severity=Severity.ERROR,
                    message=f"Missing required key: {key}",
                    rule=RULE_MISSING_REQUIRED_KEY,
                )
            )

    recognized = schema.recognized_keys
    for key, value in config.items():
        if recognized and key not in recognized:
            issues.append(
                Issue(
                    key=key,
                    severity=Severity.WARNING,
                    message="Unexpected key not defined in schema",
                    rule=RULE_UNEXPECTED_KEY,
                )
            )

        rule = schema.rules.get(key)
        if rule is None:
            continue
        for violation in evaluate(value, rule):
            issues.append(
                Issue(
                    key=key,
                    severity=Severity.ERROR,
                    message=violation,
                    rule=RULE_VALIDATION_ERROR,
                )
            )

    return issues


__all__ = [
    "RULE_MISSING_REQUIRED_KEY",
    "RULE_UNEXPECTED_KEY",
    "RULE_VALIDATION_ERROR",
    "Schema",
    "check_schema",
]

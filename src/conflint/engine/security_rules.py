"""
conflint — security linting rules.

File: src/conflint/engine/security_rules.py
Last updated: 2026-10-18

Purpose
- Flag security-relevant configuration smells key by key.

What should be included in this file
- One descriptor per rule: name, severity, predicate and message builder.
- A single loop applying the ordered rule table to one key/value pair.

Functional requirements
- Every rule inspects only its own key/value (plus read access to the whole
  config) and yields at most one issue.
- Rule order defines report order only.

Non-functional requirements
- Pure and deterministic; no rule may raise for JSON-compatible input.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Final, TypeAlias

from conflint.engine.models import Issue, Severity
from conflint.engine.primitives import (
    coerce_number,
    looks_like_secret_key,
    password_strength,
    render_value,
)

RulePredicate: TypeAlias = Callable[[str, object, Mapping[str, object]], bool]
RuleMessage: TypeAlias = Callable[[str, object, Mapping[str, object]], str]

PLACEHOLDER_PREFIX: Final[str] = "$"
PLACEHOLDER_SENTINELS: Final[frozenset[str]] = frozenset({"CHANGE_ME", "YOUR_KEY_HERE"})
PUBLIC_BIND_ADDRESSES: Final[frozenset[str]] = frozenset({"0.0.0.0", "::"})
PRIVILEGED_PORT_CEILING: Final[int] = 1024
ENVIRONMENT_INDICATOR_KEYS: Final[tuple[str, ...]] = ("environment", "ENV", "NODE_ENV")
PRODUCTION_ENVIRONMENTS: Final[frozenset[str]] = frozenset({"production", "prod"})


@dataclass(frozen=True, slots=True)
class SecurityRule:
    """Declarative security rule evaluated by :func:`apply_security_rules`."""

    name: str
    severity: Severity
    predicate: RulePredicate
    message: RuleMessage

    def check(self, key: str, value: object, config: Mapping[str, object]) -> Issue | None:
        if not self.predicate(key, value, config):
            return None
        return Issue(
            key=key,
            severity=self.severity,
            message=self.message(key, value, config),
            rule=self.name,
        )


def _is_weak_password(key: str, value: object, config: Mapping[str, object]) -> bool:
    if not looks_like_secret_key(key) or not isinstance(value, str):
        return False
    return password_strength(value).is_weak


def _weak_password_message(key: str, value: object, config: Mapping[str, object]) -> str:
    return f"Weak password detected: {password_strength(value).reason}"


def _is_hardcoded_secret(key: str, value: object, config: Mapping[str, object]) -> bool:
    if not isinstance(value, str) or not looks_like_secret_key(key):
        return False
    if value.startswith(PLACEHOLDER_PREFIX):
        return False
    return bool(value) and value not in PLACEHOLDER_SENTINELS


def _unsafe_port_number(key: str, value: object) -> float | None:
    if "port" not in key.lower():
        return None
    if not isinstance(value, (int, float, str)):
        return None
    return coerce_number(value)


def _is_unsafe_port(key: str, value: object, config: Mapping[str, object]) -> bool:
    port = _unsafe_port_number(key, value)
    return port is not None and 0 < port < PRIVILEGED_PORT_CEILING


def _unsafe_port_message(key: str, value: object, config: Mapping[str, object]) -> str:
    port = render_value(_unsafe_port_number(key, value))
    return (
        f"Unsafe port {port}. Ports below 1024 require elevated privileges "
        "and may cause conflicts."
    )


def _is_public_binding(key: str, value: object, config: Mapping[str, object]) -> bool:
    lowered = key.lower()
    if "host" not in lowered and "bind" not in lowered:
        return False
    return isinstance(value, str) and value in PUBLIC_BIND_ADDRESSES


def _is_insecure_protocol(key: str, value: object, config: Mapping[str, object]) -> bool:
    lowered = key.lower()
    if "url" not in lowered and "uri" not in lowered:
        return False
    if not isinstance(value, str):
        return False
    return value.startswith("http://") and "localhost" not in value


def _is_debug_in_production(key: str, value: object, config: Mapping[str, object]) -> bool:
    if key.lower() != "debug" or value is not True:
        return False
    return is_production(config)


def _is_missing_value(key: str, value: object, config: Mapping[str, object]) -> bool:
    return value is None


def _fixed(message: str) -> RuleMessage:
    def build(key: str, value: object, config: Mapping[str, object]) -> str:
        return message

    return build


def is_production(config: Mapping[str, object]) -> bool:
    """Return whether the first present environment indicator names production."""

    for indicator in ENVIRONMENT_INDICATOR_KEYS:
        if indicator not in config:
            continue
        environment = config[indicator]
        if not isinstance(environment, str):
            return False
        return environment.lower() in PRODUCTION_ENVIRONMENTS
    return False


SECURITY_RULES: Final[tuple[SecurityRule, ...]] = (
    SecurityRule(
        name="weak-password",
        severity=Severity.WARNING,
        predicate=_is_weak_password,
        message=_weak_password_message,
    ),
    SecurityRule(
        name="hardcoded-secret",
        severity=Severity.WARNING,
        predicate=_is_hardcoded_secret,
        message=_fixed("Hardcoded secret detected. Use environment variables instead."),
    ),
    SecurityRule(
        name="unsafe-port",
        severity=Severity.ERROR,
        predicate=_is_unsafe_port,
        message=_unsafe_port_message,
    ),
    SecurityRule(
        name="public-binding",
        severity=Severity.WARNING,
        predicate=_is_public_binding,
        message=_fixed("Public network binding detected. Ensure this is intentional."),
    ),
    SecurityRule(
        name="insecure-protocol",
        severity=Severity.WARNING,
        predicate=_is_insecure_protocol,
        message=_fixed("Insecure HTTP protocol used. Consider using HTTPS."),
    ),
    SecurityRule(
        name="debug-in-production",
        severity=Severity.ERROR,
        predicate=_is_debug_in_production,
        message=_fixed("Debug mode enabled in production environment."),
    ),
    SecurityRule(
        name="missing-value",
        severity=Severity.ERROR,
        predicate=_is_missing_value,
        message=_fixed("Configuration key has no value."),
    ),
)

SECURITY_RULE_NAMES: Final[tuple[str, ...]] = tuple(rule.name for rule in SECURITY_RULES)


def apply_security_rules(
    key: str,
    value: object,
    config: Mapping[str, object],
    *,
    rules: tuple[SecurityRule, ...] = SECURITY_RULES,
) -> list[Issue]:
    """Run every rule against one key/value pair in table order."""

    issues: list[Issue] = []
    for rule in rules:
        issue = rule.check(key, value, config)
        if issue is not None:
            issues.append(issue)
    return issues


__all__ = [
    "ENVIRONMENT_INDICATOR_KEYS",
    "PLACEHOLDER_SENTINELS",
    "PRODUCTION_ENVIRONMENTS",
    "SECURITY_RULES",
    "SECURITY_RULE_NAMES",
    "SecurityRule",
    "apply_security_rules",
    "is_production",
]

"""
conflint — unit tests for the security rule table

File: tests/unit/engine/test_security_rules.py
Last updated: 2026-10-18

Purpose
- Validate each security heuristic, its severity and its message, plus the
  rule-table ordering used for reporting.

What this test file should cover
- Placeholder exemptions for secrets.
- Port boundary at 1024 and string port coercion.
- Production detection through the first present environment indicator.
"""

from __future__ import annotations

import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from conflint.engine.models import Severity
from conflint.engine.security_rules import (
    SECURITY_RULE_NAMES,
    SECURITY_RULES,
    SecurityRule,
    apply_security_rules,
    is_production,
)


def _rules_for(key: str, value: object, config: dict[str, object] | None = None) -> list[str]:
    context = config if config is not None else {key: value}
    return [issue.rule for issue in apply_security_rules(key, value, context)]


def test_rule_table_order() -> None:
    assert SECURITY_RULE_NAMES == (
        "weak-password",
        "hardcoded-secret",
        "unsafe-port",
        "public-binding",
        "insecure-protocol",
        "debug-in-production",
        "missing-value",
    )
    assert all(isinstance(rule, SecurityRule) for rule in SECURITY_RULES)


def test_weak_password_and_hardcoded_secret_both_fire() -> None:
    issues = apply_security_rules("db_password", "admin", {"db_password": "admin"})

    assert [(item.rule, item.severity) for item in issues] == [
        ("weak-password", Severity.WARNING),
        ("hardcoded-secret", Severity.WARNING),
    ]
    assert issues[0].message == "Weak password detected: Password length less than 8 characters"
    assert issues[1].message == "Hardcoded secret detected. Use environment variables instead."


def test_common_password_reason() -> None:
    issues = apply_security_rules("password", "password123", {"password": "password123"})

    assert issues[0].message == "Weak password detected: Common weak password detected"


@pytest.mark.parametrize("value", ["$DB_PASSWORD", "${SECRET}", "CHANGE_ME", "YOUR_KEY_HERE"])
def test_placeholders_are_not_hardcoded_secrets(value: str) -> None:
    assert "hardcoded-secret" not in _rules_for("api_key", value)


def test_strong_secret_still_flagged_as_hardcoded() -> None:
    assert _rules_for("jwt_secret", "a-very-long-and-random-secret-value") == ["hardcoded-secret"]


def test_non_string_secret_values_are_ignored() -> None:
    assert _rules_for("token_ttl_token", 3600) == []


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (80, ["unsafe-port"]),
        (1023, ["unsafe-port"]),
        ("443", ["unsafe-port"]),
        (1024, []),
        (0, []),
        (-1, []),
        ("abc", []),
        (True, []),
    ],
)
def test_unsafe_port_boundaries(value: object, expected: list[str]) -> None:
    assert _rules_for("server_port", value) == expected


def test_unsafe_port_message() -> None:
    issues = apply_security_rules("port", "80", {"port": "80"})

    assert issues[0].severity is Severity.ERROR
    assert issues[0].message == (
        "Unsafe port 80. Ports below 1024 require elevated privileges and may cause conflicts."
    )


def test_port_beyond_float_range_is_not_unsafe() -> None:
    huge_port = json.loads("1" + "0" * 400)

    assert _rules_for("port", huge_port) == []
    assert _rules_for("port", "0x50") == ["unsafe-port"]


@pytest.mark.parametrize("key", ["host", "BIND_ADDRESS", "db_host"])
@pytest.mark.parametrize("value", ["0.0.0.0", "::"])
def test_public_binding(key: str, value: str) -> None:
    assert _rules_for(key, value) == ["public-binding"]


def test_public_binding_ignores_other_keys_and_addresses() -> None:
    assert _rules_for("listen", "0.0.0.0") == []
    assert _rules_for("host", "127.0.0.1") == []


@pytest.mark.parametrize(
    ("key", "value", "expected"),
    [
        ("api_url", "http://api.example.com", ["insecure-protocol"]),
        ("REDIRECT_URI", "http://example.com/cb", ["insecure-protocol"]),
        ("api_url", "https://api.example.com", []),
        ("api_url", "http://localhost:3000", []),
        ("homepage", "http://example.com", []),
    ],
)
def test_insecure_protocol(key: str, value: str, expected: list[str]) -> None:
    assert _rules_for(key, value) == expected


@pytest.mark.parametrize(
    ("config", "expected"),
    [
        ({"environment": "production"}, True),
        ({"ENV": "prod"}, True),
        ({"NODE_ENV": "PRODUCTION"}, True),
        ({"environment": "staging", "NODE_ENV": "production"}, False),
        ({"environment": 1}, False),
        ({}, False),
    ],
)
def test_is_production(config: dict[str, object], expected: bool) -> None:
    assert is_production(config) is expected


def test_debug_in_production_requires_literal_true() -> None:
    prod = {"environment": "production"}

    assert _rules_for("debug", True, {**prod, "debug": True}) == ["debug-in-production"]
    assert _rules_for("DEBUG", True, {**prod, "DEBUG": True}) == ["debug-in-production"]
    assert _rules_for("debug", "true", {**prod, "debug": "true"}) == []
    assert _rules_for("debug", True, {"environment": "development", "debug": True}) == []


def test_missing_value_only_for_null() -> None:
    assert _rules_for("anything", None) == ["missing-value"]
    assert _rules_for("anything", "") == []
    assert _rules_for("anything", False) == []
    assert _rules_for("anything", []) == []


def test_null_secret_is_only_missing_value() -> None:
    assert _rules_for("password", None) == ["missing-value"]


@given(
    name=st.sampled_from(["api_key", "password", "secret", "auth_token"]),
    suffix=st.text(max_size=20),
)
@settings(max_examples=50, deadline=None)
def test_dollar_prefixed_values_never_hardcoded(name: str, suffix: str) -> None:
    value = "$" + suffix
    assert "hardcoded-secret" not in _rules_for(name, value)


@given(port=st.integers(min_value=-10_000, max_value=100_000))
@settings(max_examples=100, deadline=None)
def test_unsafe_port_matches_range(port: int) -> None:
    flagged = "unsafe-port" in _rules_for("port", port)
    assert flagged is (0 < port < 1024)

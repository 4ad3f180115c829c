"""
conflint — unit tests for the validation orchestrator

File: tests/unit/engine/test_validator.py
Last updated: 2026-10-18

Purpose
- Validate end-to-end verdicts over built-in schemas: issue ordering,
  severity partitioning and validity.

What this test file should cover
- Schema issues precede security issues.
- Warnings never make a configuration invalid.
- Validation is deterministic and never mutates its input.
"""

from __future__ import annotations

import copy
import json

from hypothesis import given, settings
from hypothesis import strategies as st

from conflint.engine.constraints import NumberRule, StringRule
from conflint.engine.models import Severity
from conflint.engine.schema_checker import Schema
from conflint.engine.validator import validate
from conflint.schemas import DEFAULT_SCHEMA, get_schema_by_name


def _application_schema() -> Schema:
    schema = get_schema_by_name("application")
    assert schema is not None
    return schema


def _valid_application_config() -> dict[str, object]:
    return {
        "app_name": "billing",
        "environment": "staging",
        "database_url": "postgres://db.internal/billing",
        "port": 8080,
        "api_key": "${BILLING_API_KEY}",
    }


def test_valid_application_config_has_no_issues() -> None:
    result = validate(_valid_application_config(), _application_schema())

    assert result.is_valid
    assert result.issues == ()
    assert result.summary.total == 0


def test_production_config_with_placeholder_secret_is_clean() -> None:
    config = {
        "app_name": "X",
        "environment": "production",
        "database_url": "postgresql://h/d",
        "port": 3000,
        "api_key": "${API_KEY}",
    }

    result = validate(config, _application_schema())

    assert result.is_valid
    assert result.errors == ()
    assert result.warnings == ()


def test_production_debug_over_plain_http_on_privileged_port() -> None:
    config = {
        "port": 80,
        "debug": True,
        "environment": "production",
        "database_url": "http://x/y",
    }

    result = validate(config, DEFAULT_SCHEMA)

    assert not result.is_valid
    assert [(issue.key, issue.rule, issue.severity) for issue in result.issues] == [
        ("port", "unsafe-port", Severity.ERROR),
        ("debug", "debug-in-production", Severity.ERROR),
        ("database_url", "insecure-protocol", Severity.WARNING),
    ]


def test_port_beyond_float_range_is_reported_not_raised() -> None:
    huge_port = json.loads("1" + "0" * 400)
    config = {**_valid_application_config(), "port": huge_port}

    result = validate(config, _application_schema())

    assert not result.is_valid
    assert [(issue.key, issue.rule) for issue in result.issues] == [("port", "validation-error")]
    assert result.issues[0].message == f"Value is {huge_port}, maximum is 65535"


def test_missing_keys_and_unsafe_port_fail() -> None:
    config = {"app_name": "billing", "port": 80}

    result = validate(config, _application_schema())

    assert not result.is_valid
    assert [(item.key, item.rule) for item in result.issues] == [
        ("environment", "missing-required-key"),
        ("database_url", "missing-required-key"),
        ("api_key", "missing-required-key"),
        ("port", "validation-error"),
        ("port", "unsafe-port"),
    ]
    assert result.issues[3].message == "Value is 80, minimum is 1024"
    assert result.summary.error_count == 5
    assert result.summary.warning_count == 0


def test_warnings_alone_keep_config_valid() -> None:
    config = {**_valid_application_config(), "api_key": "sk_live_abcdefgh1234", "extra": 1}

    result = validate(config, _application_schema())

    assert result.is_valid
    assert [(item.key, item.rule) for item in result.warnings] == [
        ("extra", "unexpected-key"),
        ("api_key", "hardcoded-secret"),
    ]
    assert result.errors == ()


def test_debug_in_production() -> None:
    config = {**_valid_application_config(), "environment": "production", "debug": True}

    result = validate(config, _application_schema())

    assert not result.is_valid
    assert [(item.key, item.rule, item.severity) for item in result.issues] == [
        ("debug", "debug-in-production", Severity.ERROR)
    ]


def test_type_mismatch_reports_single_error_per_key() -> None:
    config = {**_valid_application_config(), "port": "8080"}

    result = validate(config, _application_schema())

    assert [(item.key, item.message) for item in result.errors] == [
        ("port", "Invalid type 'string', expected 'number'")
    ]


def test_env_style_config_against_default_schema() -> None:
    config = {"DB_HOST": "0.0.0.0", "DB_PASSWORD": "secret", "API_URL": "http://api.example.com"}

    result = validate(config, DEFAULT_SCHEMA)

    assert result.is_valid
    assert [(item.key, item.rule) for item in result.issues] == [
        ("DB_HOST", "public-binding"),
        ("DB_PASSWORD", "weak-password"),
        ("DB_PASSWORD", "hardcoded-secret"),
        ("API_URL", "insecure-protocol"),
    ]


def test_to_dict_shape() -> None:
    result = validate({"port": 80}, DEFAULT_SCHEMA)

    payload = result.to_dict()

    assert set(payload) == {"isValid", "issues", "errors", "warnings", "summary"}
    assert payload["isValid"] is False
    assert payload["summary"] == {"total": 1, "errorCount": 1, "warningCount": 0}
    assert payload["issues"] == [
        {
            "key": "port",
            "severity": "ERROR",
            "message": (
                "Unsafe port 80. Ports below 1024 require elevated privileges "
                "and may cause conflicts."
            ),
            "rule": "unsafe-port",
        }
    ]


_KEYS = st.sampled_from(
    ["host", "port", "password", "api_url", "debug", "environment", "name", "bind"]
)
_VALUES = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-5, max_value=70_000)
    | st.text(max_size=12)
    | st.sampled_from(["0.0.0.0", "http://x.example", "production", "$SECRET", "admin"])
)
_CONFIGS = st.dictionaries(_KEYS, _VALUES, max_size=8)
_SCHEMA = Schema(
    name="property",
    required_keys=("host", "port"),
    optional_keys=("name",),
    rules={
        "host": StringRule(not_empty=True),
        "port": NumberRule(minimum=1024, maximum=65535),
        "name": StringRule(min_length=2, pattern=r"^[a-z]+$"),
    },
)


@given(config=_CONFIGS)
@settings(max_examples=150, deadline=None)
def test_validation_is_deterministic_and_pure(config: dict[str, object]) -> None:
    snapshot = copy.deepcopy(config)

    first = validate(config, _SCHEMA)
    second = validate(config, _SCHEMA)

    assert first == second
    assert config == snapshot


@given(config=_CONFIGS)
@settings(max_examples=150, deadline=None)
def test_validity_and_partition_invariants(config: dict[str, object]) -> None:
    result = validate(config, _SCHEMA)

    assert result.is_valid is (result.summary.error_count == 0)
    assert result.errors == tuple(i for i in result.issues if i.severity is Severity.ERROR)
    assert result.warnings == tuple(i for i in result.issues if i.severity is Severity.WARNING)
    assert result.summary.total == len(result.errors) + len(result.warnings)


@given(config=_CONFIGS)
@settings(max_examples=150, deadline=None)
def test_every_missing_required_key_is_reported(config: dict[str, object]) -> None:
    result = validate(config, _SCHEMA)

    reported = {item.key for item in result.issues if item.rule == "missing-required-key"}
    assert reported == {key for key in _SCHEMA.required_keys if key not in config}


@given(value=_VALUES)
@settings(max_examples=100, deadline=None)
def test_type_mismatch_yields_exactly_one_violation(value: object) -> None:
    result = validate({"host": "h", "port": value}, _SCHEMA)

    port_errors = [item for item in result.issues if item.rule == "validation-error"]
    if value is not None and not isinstance(value, bool) and isinstance(value, int):
        assert all(not item.message.startswith("Invalid type") for item in port_errors)
    else:
        assert [item.message for item in port_errors] == [
            f"Invalid type '{_type_name(value)}', expected 'number'"
        ]


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    return "string"

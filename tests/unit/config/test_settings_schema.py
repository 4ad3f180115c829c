"""
conflint — unit tests for the tool settings schema

File: tests/unit/config/test_settings_schema.py
Last updated: 2026-10-18

Purpose
- Validate structured issues, defaults isolation and deterministic merging.
"""

from __future__ import annotations

import pytest

from conflint.config import (
    DEFAULT_SETTINGS,
    SettingsValidationError,
    assert_valid_settings,
    default_settings,
    merge_settings,
    validate_settings,
)


def test_defaults_are_valid() -> None:
    result = validate_settings(default_settings())

    assert result.is_valid
    assert result.settings == DEFAULT_SETTINGS


def test_default_settings_returns_isolated_copy() -> None:
    settings = default_settings()
    settings["validation"]["schema_files"].append("tampered.yaml")

    assert DEFAULT_SETTINGS["validation"]["schema_files"] == []


def test_root_must_be_object() -> None:
    result = validate_settings(["not", "a", "mapping"])

    assert not result.is_valid
    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("<root>", "expected object, got list")
    ]


def test_missing_sections_and_wrong_types() -> None:
    payload = {
        "validation": {
            "default_schema": "  ",
            "schema_files": ["ok.yaml", 3],
            "fail_on_warnings": "no",
        },
        "output": "json",
    }

    result = validate_settings(payload)

    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("logging", "missing required field"),
        ("validation.default_schema", "must not be empty"),
        ("validation.schema_files[1]", "expected string, got int"),
        ("validation.fail_on_warnings", "expected boolean, got str"),
        ("output", "expected object, got str"),
    ]


def test_assert_valid_settings_renders_issue_list() -> None:
    payload = merge_settings(default_settings(), {"output": {"format": "yaml"}})

    with pytest.raises(SettingsValidationError) as excinfo:
        assert_valid_settings(payload)

    assert str(excinfo.value) == (
        "invalid settings:\n"
        "- output.format: invalid value 'yaml'; expected one of: detailed, json, text"
    )


def test_merge_settings_is_deep_and_non_mutating() -> None:
    base = default_settings()
    merged = merge_settings(base, {"logging": {"level": "DEBUG"}})

    assert merged["logging"] == {"level": "DEBUG", "format": "text"}
    assert base["logging"]["level"] == "WARNING"

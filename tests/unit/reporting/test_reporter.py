"""
conflint — unit tests for validation reports

File: tests/unit/reporting/test_reporter.py
Last updated: 2026-10-18

Purpose
- Lock down the exact text, detailed and JSON report layouts.
"""

from __future__ import annotations

import json

import pytest

from conflint.engine.models import Issue, Severity, ValidationResult
from conflint.reporting import (
    format_issue,
    format_summary,
    render_report,
    report_detailed,
    report_validation,
    report_validation_as_json,
    report_validation_with_file,
)

_MISSING = Issue("api_key", Severity.ERROR, "Missing required key: api_key", "missing-required-key")
_PORT = Issue(
    "port",
    Severity.ERROR,
    "Unsafe port 80. Ports below 1024 require elevated privileges and may cause conflicts.",
    "unsafe-port",
)
_EXTRA = Issue("extra", Severity.WARNING, "Unexpected key not defined in schema", "unexpected-key")
_EXTRA_2 = Issue("other", Severity.WARNING, "Unexpected key not defined in schema", "unexpected-key")


def _result(*issues: Issue) -> ValidationResult:
    return ValidationResult.from_issues(issues)


def test_format_issue() -> None:
    assert format_issue(_MISSING) == 'ERROR: Missing required key: api_key (key: "api_key")'
    assert format_issue(_EXTRA) == (
        'WARNING: Unexpected key not defined in schema (key: "extra")'
    )


@pytest.mark.parametrize(
    ("errors", "warnings", "expected"),
    [
        (0, 0, "No issues found"),
        (1, 0, "1 error"),
        (2, 0, "2 errors"),
        (0, 1, "1 warning"),
        (3, 2, "3 errors, 2 warnings"),
        (1, 1, "1 error, 1 warning"),
    ],
)
def test_format_summary(errors: int, warnings: int, expected: str) -> None:
    assert format_summary(errors, warnings) == expected


def test_report_validation_passed_without_issues() -> None:
    assert report_validation(_result()) == "Configuration validation passed.\n"


def test_report_validation_errors_then_warnings() -> None:
    report = report_validation(_result(_MISSING, _EXTRA, _PORT))

    assert report.split("\n") == [
        "Configuration validation failed:",
        "",
        'ERROR: Missing required key: api_key (key: "api_key")',
        format_issue(_PORT),
        "",
        'WARNING: Unexpected key not defined in schema (key: "extra")',
        "",
        "Summary: 2 errors, 1 warning",
    ]


def test_report_validation_warnings_only_is_passed() -> None:
    report = report_validation(_result(_EXTRA))

    assert report.split("\n") == [
        "Configuration validation passed.",
        "",
        format_issue(_EXTRA),
        "",
        "Summary: 1 warning",
    ]


def test_report_validation_with_file() -> None:
    report = report_validation_with_file(_result(), "config/app.json")

    assert report == "Validating: config/app.json\n\nConfiguration validation passed.\n"


def test_report_as_json_is_indented_result_dict() -> None:
    result = _result(_PORT)

    rendered = report_validation_as_json(result)

    assert json.loads(rendered) == result.to_dict()
    assert rendered.startswith('{\n  "isValid": false,')


def test_report_detailed_groups_by_rule_in_first_seen_order() -> None:
    report = report_detailed(_result(_EXTRA, _MISSING, _EXTRA_2))

    assert report.split("\n") == [
        "=== DETAILED VALIDATION REPORT ===",
        "",
        "Status: FAILED",
        "Total Issues: 3",
        "Errors: 1",
        "Warnings: 2",
        "",
        "--- Issues by Type ---",
        "",
        "unexpected-key:",
        "  - [WARNING] extra: Unexpected key not defined in schema",
        "  - [WARNING] other: Unexpected key not defined in schema",
        "",
        "missing-required-key:",
        "  - [ERROR] api_key: Missing required key: api_key",
        "",
    ]


def test_report_detailed_without_issues() -> None:
    report = report_detailed(_result())

    assert report.endswith(
        "Status: PASSED\nTotal Issues: 0\nErrors: 0\nWarnings: 0\n\nNo validation issues found."
    )


def test_render_report_dispatch() -> None:
    result = _result(_EXTRA)

    assert render_report(result, "text") == report_validation(result)
    assert render_report(result, "text", path="x.json") == report_validation_with_file(
        result, "x.json"
    )
    assert render_report(result, "detailed") == report_detailed(result)
    assert render_report(result, "json") == report_validation_as_json(result)
    with pytest.raises(ValueError, match="unsupported report format 'xml'"):
        render_report(result, "xml")

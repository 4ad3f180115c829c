"""Plain-text, detailed and JSON renderings of a ``ValidationResult``."""

from __future__ import annotations

import json
from typing import Final

from conflint.engine.models import Issue, Severity, ValidationResult

REPORT_FORMATS: Final[tuple[str, ...]] = ("text", "json", "detailed")

DETAILED_REPORT_BANNER: Final[str] = "=== DETAILED VALIDATION REPORT ==="


def format_issue(issue: Issue) -> str:
    label = "ERROR:" if issue.severity is Severity.ERROR else "WARNING:"
    return f'{label} {issue.message} (key: "{issue.key}")'


def format_summary(error_count: int, warning_count: int) -> str:
    parts: list[str] = []
    if error_count > 0:
        parts.append(f"{error_count} {_plural('error', error_count)}")
    if warning_count > 0:
        parts.append(f"{warning_count} {_plural('warning', warning_count)}")
    return ", ".join(parts) if parts else "No issues found"


def report_validation(result: ValidationResult) -> str:
    """Verdict header, errors, then warnings, then a one-line summary."""

    if result.is_valid:
        lines = ["Configuration validation passed.\n"]
    else:
        lines = ["Configuration validation failed:\n"]

    lines.extend(format_issue(issue) for issue in result.errors)
    if result.errors and result.warnings:
        lines.append("")
    lines.extend(format_issue(issue) for issue in result.warnings)

    if result.issues:
        summary = result.summary
        lines.append("")
        lines.append(f"Summary: {format_summary(summary.error_count, summary.warning_count)}")

    return "\n".join(lines)


def report_validation_with_file(result: ValidationResult, path: str) -> str:
    return "\n".join([f"Validating: {path}\n", report_validation(result)])


def report_validation_as_json(result: ValidationResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def report_detailed(result: ValidationResult) -> str:
    """Status block followed by issues grouped by rule id in first-seen order."""

    summary = result.summary
    lines = [
        f"{DETAILED_REPORT_BANNER}\n",
        f"Status: {'PASSED' if result.is_valid else 'FAILED'}",
        f"Total Issues: {summary.total}",
        f"Errors: {summary.error_count}",
        f"Warnings: {summary.warning_count}\n",
    ]

    if not result.issues:
        lines.append("No validation issues found.")
        return "\n".join(lines)

    lines.append("--- Issues by Type ---\n")
    grouped: dict[str, list[Issue]] = {}
    for issue in result.issues:
        grouped.setdefault(issue.rule, []).append(issue)

    for rule, issues in grouped.items():
        lines.append(f"{rule}:")
        for issue in issues:
            lines.append(f"  - [{issue.severity.value}] {issue.key}: {issue.message}")
        lines.append("")

    return "\n".join(lines)


def render_report(result: ValidationResult, report_format: str, *, path: str | None = None) -> str:
    """Dispatch on ``report_format`` (one of :data:`REPORT_FORMATS`)."""

    if report_format == "json":
        return report_validation_as_json(result)
    if report_format == "detailed":
        return report_detailed(result)
    if report_format == "text":
        if path is None:
            return report_validation(result)
        return report_validation_with_file(result, path)
    raise ValueError(
        f"unsupported report format {report_format!r}; expected one of: {', '.join(REPORT_FORMATS)}"
    )


def _plural(noun: str, count: int) -> str:
    return noun if count == 1 else f"{noun}s"


__all__ = [
    "DETAILED_REPORT_BANNER",
    "REPORT_FORMATS",
    "format_issue",
    "format_summary",
    "render_report",
    "report_detailed",
    "report_validation",
    "report_validation_as_json",
    "report_validation_with_file",
]

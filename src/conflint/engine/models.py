"""Issue and validation-result models shared by the engine and reporters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


class Severity(StrEnum):
    """Finding severities; only ``ERROR`` affects validity."""

    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass(frozen=True, slots=True)
class Issue:
    """One finding emitted by exactly one schema or security check."""

    key: str
    severity: Severity
    message: str
    rule: str

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "key": self.key,
            "severity": self.severity.value,
            "message": self.message,
            "rule": self.rule,
        }


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    total: int
    error_count: int
    warning_count: int

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "total": self.total,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Validation verdict derived entirely from the ordered issue list."""

    issues: tuple[Issue, ...]
    errors: tuple[Issue, ...]
    warnings: tuple[Issue, ...]
    summary: ValidationSummary

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> ValidationResult:
        ordered = tuple(issues)
        errors = tuple(item for item in ordered if item.severity is Severity.ERROR)
        warnings = tuple(item for item in ordered if item.severity is Severity.WARNING)
        return cls(
            issues=ordered,
            errors=errors,
            warnings=warnings,
            summary=ValidationSummary(
                total=len(ordered),
                error_count=len(errors),
                warning_count=len(warnings),
            ),
        )

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, JSONValue]:
        """Stable-key export consumed by JSON reports."""

        return {
            "isValid": self.is_valid,
            "issues": [item.to_dict() for item in self.issues],
            "errors": [item.to_dict() for item in self.errors],
            "warnings": [item.to_dict() for item in self.warnings],
            "summary": self.summary.to_dict(),
        }


__all__ = [
    "Issue",
    "JSONScalar",
    "JSONValue",
    "Severity",
    "ValidationResult",
    "ValidationSummary",
]

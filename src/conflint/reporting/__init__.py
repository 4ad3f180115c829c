"""Human and machine readable validation reports."""

from conflint.reporting.reporter import (
    DETAILED_REPORT_BANNER,
    REPORT_FORMATS,
    format_issue,
    format_summary,
    render_report,
    report_detailed,
    report_validation,
    report_validation_as_json,
    report_validation_with_file,
)

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

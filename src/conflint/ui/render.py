"""Output rendering for the conflint CLI.

File: src/conflint/ui/render.py
Last updated: 2026-10-18

Purpose
- Provide a thin rendering layer for CLI output on top of ``rich``.
- Respect NO_COLOR environment variable and --no-color CLI flag.

What should be included in this file
- CLIRenderer class with methods for common output patterns.
- Severity-aware styling for report lines.
- Factory function to create a renderer with appropriate settings.

Functional requirements
- Text is printed verbatim: no markup, emoji or highlighting interpretation.
- Output to a non-terminal stream carries no escape sequences.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Final, TextIO

from rich.console import Console
from rich.style import Style
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Sequence

_LINE_STYLES: Final[tuple[tuple[str, Style], ...]] = (
    ("ERROR:", Style(color="red", bold=True)),
    ("WARNING:", Style(color="yellow")),
    ("Configuration validation failed", Style(color="red", bold=True)),
    ("Configuration validation passed", Style(color="green", bold=True)),
    ("Status: FAILED", Style(color="red", bold=True)),
    ("Status: PASSED", Style(color="green", bold=True)),
    ("Summary:", Style(bold=True)),
    ("===", Style(bold=True)),
)
_HEADING_STYLE: Final[Style] = Style(bold=True)


def _color_allowed(no_color_flag: bool) -> bool:
    """Check whether color output should be attempted."""

    if no_color_flag:
        return False
    return not os.environ.get("NO_COLOR", "")


class CLIRenderer:
    """Thin CLI output renderer.

    Lines are written through a ``rich`` console bound to the current
    ``sys.stdout`` at print time, so captured streams see plain text.
    """

    def __init__(
        self,
        *,
        no_color: bool = False,
        verbose: bool = False,
        file: TextIO | None = None,
    ) -> None:
        self.verbose = verbose
        self._color = _color_allowed(no_color)
        self._file = file

    def _console(self) -> Console:
        return Console(
            file=self._file if self._file is not None else sys.stdout,
            no_color=not self._color,
            markup=False,
            emoji=False,
            highlight=False,
            soft_wrap=True,
        )

    def _print(self, line: str, style: Style | None = None) -> None:
        self._console().print(Text(line, style=style or ""), soft_wrap=True)

    def heading(self, text: str) -> None:
        """Print a heading line."""

        self._print(text, _HEADING_STYLE)

    def kv(self, key: str, value: object) -> None:
        """Print a key: value pair."""

        self._print(f"{key}: {value}")

    def text(self, line: str) -> None:
        """Print a plain text line."""

        self._print(line)

    def blank(self) -> None:
        self._print("")

    def section(self, title: str) -> None:
        """Print a section header with a preceding blank line."""

        self.blank()
        self._print(title, _HEADING_STYLE)

    def items(self, entries: Sequence[str], *, prefix: str = "- ") -> None:
        """Print a bulleted list."""

        for entry in entries:
            self._print(f"  {prefix}{entry}")

    def report(self, body: str) -> None:
        """Print a multi-line report, styling verdict and severity lines."""

        for line in body.split("\n"):
            self._print(line, _style_for_line(line))


def _style_for_line(line: str) -> Style | None:
    stripped = line.lstrip()
    for prefix, style in _LINE_STYLES:
        if stripped.startswith(prefix):
            return style
    if stripped.startswith("- [ERROR]"):
        return _LINE_STYLES[0][1]
    if stripped.startswith("- [WARNING]"):
        return _LINE_STYLES[1][1]
    return None


def create_renderer(*, no_color: bool = False, verbose: bool = False) -> CLIRenderer:
    """Create a CLI renderer with the given settings."""

    return CLIRenderer(no_color=no_color, verbose=verbose)


__all__ = ["CLIRenderer", "create_renderer"]

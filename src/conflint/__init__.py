"""
conflint — configuration validator and security linter.

File: src/conflint/__init__.py
Last updated: 2026-10-18

Purpose
- Package root. Defines package-level metadata and import boundaries.

What should be included in this file
- Version export and minimal public API surface (keep small).
- Import boundary rules: avoid importing the CLI or settings layers here.

Functional requirements
- Must not load settings or configure logging handlers at import time.

Key interfaces
- ``conflint.engine.validate`` for programmatic validation.
- ``conflint.schemas.get_schema_by_name`` for built-in schemas.
- ``conflint.sources.parse_config_file`` for reading configuration files.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]

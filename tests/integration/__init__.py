"""
conflint — integration test package

File: tests/integration/__init__.py
Last updated: 2026-10-18

Purpose
- Test package marker for the CLI subprocess tests.

Functional requirements
- Must not import conflint at import time; tests drive it through `python -m conflint`.
"""

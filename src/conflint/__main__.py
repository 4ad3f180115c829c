"""Module entrypoint for ``python -m conflint``."""

from __future__ import annotations

from conflint.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())

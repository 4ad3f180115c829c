"""
conflint — unit tests for configuration source loading

File: tests/unit/sources/test_source_loader.py
Last updated: 2026-10-18

Purpose
- Validate file-type detection and the JSON and dotenv readers.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from conflint.sources import (
    SourceLoadError,
    get_file_type,
    parse_config_file,
    parse_env_text,
    parse_json_file,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("config.json", "json"),
        ("CONFIG.JSON", "json"),
        (".env", "env"),
        ("production.env", "env"),
        (".env.local", "env"),
        ("nested/dir/.env", "env"),
    ],
)
def test_get_file_type(name: str, expected: str) -> None:
    assert get_file_type(name) == expected


@pytest.mark.parametrize("name", ["config.yaml", "settings.toml", "envfile", "README"])
def test_get_file_type_rejects_other_formats(name: str) -> None:
    with pytest.raises(SourceLoadError) as excinfo:
        get_file_type(name)

    assert str(excinfo.value) == (
        f"Unsupported file format: {name}. Supported formats: .json, .env"
    )


def test_parse_json_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", '{"port": 8080, "debug": false, "tags": ["a"]}')

    assert parse_json_file(path) == {"port": 8080, "debug": False, "tags": ["a"]}


def test_parse_json_file_errors(tmp_path: Path) -> None:
    missing = tmp_path / "missing.json"
    with pytest.raises(SourceLoadError, match="^File not found: "):
        parse_json_file(missing)
    with pytest.raises(SourceLoadError, match="^Invalid JSON format: "):
        parse_json_file(_write(tmp_path / "broken.json", '{"port": '))
    with pytest.raises(SourceLoadError, match="top-level value must be an object, got array"):
        parse_json_file(_write(tmp_path / "list.json", "[1, 2]"))
    with pytest.raises(SourceLoadError, match="^Invalid JSON format: "):
        parse_json_file(_write(tmp_path / "nan.json", '{"ratio": NaN}'))


def test_parse_env_text_rules() -> None:
    content = "\n".join(
        [
            "# comment",
            "",
            "DB_HOST = localhost ",
            "DB_URL=postgres://u:p@h/db?sslmode=require",
            'QUOTED="hello world"',
            "SINGLE='x'",
            "MISMATCHED=\"x'",
            "BARE_KEY",
            "=orphan",
            "EMPTY=",
            "DB_HOST=override",
        ]
    )

    assert parse_env_text(content) == {
        "DB_HOST": "override",
        "DB_URL": "postgres://u:p@h/db?sslmode=require",
        "QUOTED": "hello world",
        "SINGLE": "x",
        "MISMATCHED": "\"x'",
        "BARE_KEY": "",
        "EMPTY": "",
    }


def test_parse_config_file_dispatches_on_name(tmp_path: Path) -> None:
    env_path = _write(tmp_path / ".env", "PORT=80\n")
    json_path = _write(tmp_path / "app.json", '{"PORT": 80}')

    env_source = parse_config_file(env_path)
    json_source = parse_config_file(json_path)

    assert env_source.format == "env"
    assert env_source.data == {"PORT": "80"}
    assert env_source.path == env_path
    assert json_source.format == "json"
    assert json_source.data == {"PORT": 80}


def test_parse_config_file_missing_env(tmp_path: Path) -> None:
    with pytest.raises(SourceLoadError, match="^File not found: "):
        parse_config_file(tmp_path / ".env")

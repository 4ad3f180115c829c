"""Configuration source readers (JSON and dotenv)."""

from conflint.sources.loader import (
    SUPPORTED_FORMATS_HINT,
    LoadedSource,
    SourceFormat,
    SourceLoadError,
    get_file_type,
    parse_config_file,
    parse_env_file,
    parse_env_text,
    parse_json_file,
)

__all__ = [
    "LoadedSource",
    "SUPPORTED_FORMATS_HINT",
    "SourceFormat",
    "SourceLoadError",
    "get_file_type",
    "parse_config_file",
    "parse_env_file",
    "parse_env_text",
    "parse_json_file",
]

"""Tool settings: schema, defaults and layered loading."""

from conflint.config.loader import (
    DEFAULT_SETTINGS_FILE,
    ENV_PREFIX,
    SettingsLoadError,
    dump_effective_settings,
    env_binding_names,
    load_settings,
    normalize_paths,
)
from conflint.config.schema import (
    DEFAULT_SETTINGS,
    ConflintSettings,
    SettingsValidationError,
    SettingsValidationIssue,
    SettingsValidationResult,
    assert_valid_settings,
    default_settings,
    merge_settings,
    validate_settings,
)

__all__ = [
    "ConflintSettings",
    "DEFAULT_SETTINGS",
    "DEFAULT_SETTINGS_FILE",
    "ENV_PREFIX",
    "SettingsLoadError",
    "SettingsValidationError",
    "SettingsValidationIssue",
    "SettingsValidationResult",
    "assert_valid_settings",
    "default_settings",
    "dump_effective_settings",
    "env_binding_names",
    "load_settings",
    "merge_settings",
    "normalize_paths",
    "validate_settings",
]

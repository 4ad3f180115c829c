"""Command-line interface router for conflint."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from conflint.config import (
    DEFAULT_SETTINGS_FILE,
    SettingsLoadError,
    SettingsValidationError,
    dump_effective_settings,
    env_binding_names,
    load_settings,
)
from conflint.config.schema import LOG_LEVELS
from conflint.engine import ValidationResult, validate
from conflint.engine.schema_checker import Schema
from conflint.observability.logging import (
    LoggingConfig,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from conflint.reporting import render_report
from conflint.schemas import SchemaDefinitionError, SchemaRegistry, UnknownSchemaError
from conflint.sources import SourceLoadError, parse_config_file
from conflint.ui.render import CLIRenderer, create_renderer

EXIT_SUCCESS: Final[int] = 0
EXIT_VALIDATION_FAILED: Final[int] = 1
EXIT_USAGE_ERROR: Final[int] = 2

_log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = EXIT_USAGE_ERROR

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="conflint",
        description=(
            "conflint — configuration validator and security linter.\n\n"
            "Common workflows:\n"
            "  conflint validate config.json            Check against the default schema\n"
            "  conflint validate .env --schema database  Check against a built-in schema\n"
            "  conflint schemas                          List available schemas\n"
            "  conflint config                           Show effective tool settings\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help=f"Path to conflint TOML settings (default: ./{DEFAULT_SETTINGS_FILE} if present).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show detailed output.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Diagnostic log level written to stderr (default from settings: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate ------------------------------------------------------------
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Validate a configuration file",
        description=(
            "Check a .json or .env configuration file against one or more schemas\n"
            "and the built-in security rules.\n\n"
            "Examples:\n"
            "  conflint validate config.json\n"
            "  conflint validate .env --schema database --schema auth\n"
            "  conflint validate config.json --schema-file team.yaml --schema team\n"
            "  conflint validate config.json --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    validate_parser.add_argument("path", help="Configuration file (.json or .env)")
    validate_parser.add_argument(
        "--schema",
        "-s",
        dest="schemas",
        action="append",
        default=None,
        metavar="NAME",
        help="Schema name; repeat to merge several schemas (default from settings).",
    )
    _add_schema_file_argument(validate_parser)
    output_group = validate_parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--json",
        dest="output_format",
        action="store_const",
        const="json",
        default=None,
        help="Emit the validation result as JSON",
    )
    output_group.add_argument(
        "--detailed",
        dest="output_format",
        action="store_const",
        const="detailed",
        help="Emit a detailed report grouped by rule",
    )
    validate_parser.add_argument(
        "--fail-on-warnings",
        action="store_true",
        default=None,
        help="Exit with status 1 when warnings are reported",
    )
    validate_parser.set_defaults(handler=_cmd_validate)

    # schemas -------------------------------------------------------------
    schemas_parser = subparsers.add_parser(
        "schemas",
        parents=[common],
        help="List available schemas",
        description=(
            "List built-in schemas and schemas loaded from schema files.\n\n"
            "Examples:\n"
            "  conflint schemas\n"
            "  conflint schemas --verbose\n"
            "  conflint schemas --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_schema_file_argument(schemas_parser)
    schemas_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    schemas_parser.set_defaults(handler=_cmd_schemas)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Show effective tool settings",
        description=(
            "Display effective settings after defaults, settings file, CONFLINT_*\n"
            "environment variables and command-line overrides are applied.\n\n"
            "Examples:\n"
            "  conflint config\n"
            "  conflint config --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    config_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def _add_schema_file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--schema-file",
        dest="schema_files",
        action="append",
        default=None,
        metavar="PATH",
        help="Load schema definitions from a .json/.yaml file; repeatable.",
    )


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        settings = _load_effective_settings(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code

    logging_settings = settings["logging"]
    setup_logging(
        LoggingConfig(level=logging_settings["level"], log_format=logging_settings["format"])
    )
    try:
        result = handler(namespace, settings)
    except CLIError as exc:
        _log.debug("command_failed", command=namespace.command, exit_code=exc.exit_code)
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    finally:
        shutdown_logging()
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_validate(args: argparse.Namespace, settings: Mapping[str, Any]) -> int:
    validation_settings = settings["validation"]
    registry = _build_registry(args, settings)
    names = list(args.schemas or [validation_settings["default_schema"]])
    schema = _resolve_schema(registry, names)

    try:
        source = parse_config_file(args.path)
    except SourceLoadError as exc:
        raise CLIError(str(exc), exit_code=EXIT_USAGE_ERROR) from exc

    result = validate(source.data, schema)
    _log.info(
        "validation_completed",
        source=str(source.path),
        source_format=source.format,
        schema=schema.name,
        valid=result.is_valid,
        errors=result.summary.error_count,
        warnings=result.summary.warning_count,
    )

    report_format = settings["output"]["format"]
    if report_format == "json":
        print(render_report(result, "json"))
    else:
        renderer = _get_renderer(args, settings)
        if renderer.verbose:
            renderer.kv("Schema", schema.name)
            renderer.kv("Format", source.format)
        renderer.report(render_report(result, report_format, path=args.path))

    return _exit_code_for(result, fail_on_warnings=bool(validation_settings["fail_on_warnings"]))


def _cmd_schemas(args: argparse.Namespace, settings: Mapping[str, Any]) -> int:
    registry = _build_registry(args, settings)
    schemas = [registry.require(name) for name in registry.names()]

    if getattr(args, "json", False):
        _emit_json({"command": "schemas", "schemas": [schema.to_dict() for schema in schemas]})
        return EXIT_SUCCESS

    renderer = _get_renderer(args, settings)
    renderer.heading("Available schemas:")
    for schema in schemas:
        renderer.text(
            f"- {schema.name}: {len(schema.required_keys)} required, "
            f"{len(schema.optional_keys)} optional"
        )
        if renderer.verbose:
            _render_schema_keys(renderer, schema)
    renderer.section(f"Default schema: {settings['validation']['default_schema']}")
    return EXIT_SUCCESS


def _cmd_config(args: argparse.Namespace, settings: Mapping[str, Any]) -> int:
    settings_path = _settings_path(args)
    payload: dict[str, object] = {
        "command": "config",
        "settings_file": settings_path.as_posix() if settings_path.exists() else None,
        "settings": dict(settings),
    }

    if getattr(args, "json", False):
        _emit_json(payload)
        return EXIT_SUCCESS

    renderer = _get_renderer(args, settings)
    renderer.kv("Settings file", payload["settings_file"] or "(defaults)")
    renderer.text(dump_effective_settings(settings, indent=2))
    if renderer.verbose:
        renderer.section("Environment overrides:")
        renderer.items(list(env_binding_names(settings)))
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _get_renderer(args: argparse.Namespace, settings: Mapping[str, Any]) -> CLIRenderer:
    no_color = bool(getattr(args, "no_color", False)) or not settings["output"]["color"]
    verbose = bool(getattr(args, "verbose", False))
    return create_renderer(no_color=no_color, verbose=verbose)


def _render_schema_keys(renderer: CLIRenderer, schema: Schema) -> None:
    entries: list[str] = []
    for key in (*schema.required_keys, *schema.optional_keys):
        kind = "required" if key in schema.required_keys else "optional"
        rule = schema.rules.get(key)
        declared = rule.type_name if rule is not None and rule.type_name else "any"
        entries.append(f"{key} ({kind}, {declared})")
    renderer.items(entries, prefix="  ")


# ---------------------------------------------------------------------------
# Settings and schema helpers
# ---------------------------------------------------------------------------


def _settings_path(args: argparse.Namespace) -> Path:
    raw = getattr(args, "config_path", None)
    if isinstance(raw, str) and raw.strip():
        return Path(raw).expanduser().resolve()
    return (Path.cwd() / DEFAULT_SETTINGS_FILE).resolve()


def _load_effective_settings(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, object] = {
        "logging.level": getattr(args, "log_level", None),
        "output.format": getattr(args, "output_format", None),
        "validation.fail_on_warnings": getattr(args, "fail_on_warnings", None),
    }
    if getattr(args, "no_color", False):
        overrides["output.color"] = False

    try:
        return load_settings(getattr(args, "config_path", None), cli_overrides=overrides)
    except (SettingsLoadError, SettingsValidationError) as exc:
        raise CLIError(str(exc), exit_code=EXIT_USAGE_ERROR) from exc


def _build_registry(args: argparse.Namespace, settings: Mapping[str, Any]) -> SchemaRegistry:
    registry = SchemaRegistry()
    paths = [*settings["validation"]["schema_files"], *(getattr(args, "schema_files", None) or [])]
    for path in paths:
        try:
            registry.load_file(path)
        except SchemaDefinitionError as exc:
            raise CLIError(str(exc), exit_code=EXIT_USAGE_ERROR) from exc
    return registry


def _resolve_schema(registry: SchemaRegistry, names: Sequence[str]) -> Schema:
    try:
        return registry.resolve(names)
    except UnknownSchemaError as exc:
        raise CLIError(str(exc), exit_code=EXIT_USAGE_ERROR) from exc


def _exit_code_for(result: ValidationResult, *, fail_on_warnings: bool) -> int:
    if not result.is_valid:
        return EXIT_VALIDATION_FAILED
    if fail_on_warnings and result.warnings:
        return EXIT_VALIDATION_FAILED
    return EXIT_SUCCESS


__all__ = ["CLIError", "build_parser", "run_cli"]

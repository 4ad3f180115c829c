"""Schema registry: built-in schemas, schema files and merging."""

from conflint.schemas.registry import (
    BUILTIN_SCHEMA_DEFINITIONS,
    BUILTIN_SCHEMA_NAMES,
    DEFAULT_SCHEMA,
    SCHEMA_FILE_SUFFIXES,
    SchemaDefinitionError,
    SchemaDefinitionIssue,
    SchemaRegistry,
    UnknownSchemaError,
    builtin_schema_definition,
    create_application_schema,
    create_auth_schema,
    create_database_schema,
    get_schema_by_name,
    load_schema_file,
    merge_schemas,
    schema_from_mapping,
)

__all__ = [
    "BUILTIN_SCHEMA_DEFINITIONS",
    "BUILTIN_SCHEMA_NAMES",
    "DEFAULT_SCHEMA",
    "SCHEMA_FILE_SUFFIXES",
    "SchemaDefinitionError",
    "SchemaDefinitionIssue",
    "SchemaRegistry",
    "UnknownSchemaError",
    "builtin_schema_definition",
    "create_application_schema",
    "create_auth_schema",
    "create_database_schema",
    "get_schema_by_name",
    "load_schema_file",
    "merge_schemas",
    "schema_from_mapping",
]

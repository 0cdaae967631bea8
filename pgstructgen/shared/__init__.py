"""Shared utilities for pgstructgen."""

from .config import (
    DEFAULT_EXCLUDED_TABLES,
    DEFAULT_SCHEMA,
    MIGRATIONS_TABLE,
    GeneratorOptions,
    load_config,
    load_yaml_mapping,
)
from .naming import (
    INPUT_SUFFIX,
    NON_RAW_KEYWORDS,
    RUST_KEYWORDS,
    input_struct_name,
    is_valid_field_name,
    is_valid_struct_name,
    row_struct_name,
    sanitize_field_name,
    to_pascal_case,
)
from .output import status
from .errors import (
    MalformedInputError,
    SchemaError,
    SchemaSourceError,
    SchemaValidationError,
    UnknownTypeError,
)

__all__ = [
    # Configuration
    "DEFAULT_EXCLUDED_TABLES",
    "DEFAULT_SCHEMA",
    "MIGRATIONS_TABLE",
    "GeneratorOptions",
    "load_config",
    "load_yaml_mapping",
    # Naming utilities
    "INPUT_SUFFIX",
    "NON_RAW_KEYWORDS",
    "RUST_KEYWORDS",
    "input_struct_name",
    "is_valid_field_name",
    "is_valid_struct_name",
    "row_struct_name",
    "sanitize_field_name",
    "to_pascal_case",
    # Progress output
    "status",
    # Errors
    "MalformedInputError",
    "SchemaError",
    "SchemaSourceError",
    "SchemaValidationError",
    "UnknownTypeError",
]

"""Struct Code Generator - Generates Rust structs from PostgreSQL column metadata."""

from .main import (
    Field,
    FieldType,
    GeneratorContext,
    RecordType,
    TableGroup,
    build_input_record,
    build_record,
    build_records,
    generate,
    group_columns,
    render,
    rust_type_for,
    should_emit,
    PG_RUST_TYPES,
)

__all__ = [
    "Field",
    "FieldType",
    "GeneratorContext",
    "RecordType",
    "TableGroup",
    "build_input_record",
    "build_record",
    "build_records",
    "generate",
    "group_columns",
    "render",
    "rust_type_for",
    "should_emit",
    "PG_RUST_TYPES",
]

"""Custom exceptions for pgstructgen."""

from __future__ import annotations


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        full_message = f"{message}" if not source else f"[{source}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when a snapshot or config file fails validation."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, source)


class UnknownTypeError(SchemaError):
    """Raised when a column's native type has no Rust mapping."""

    def __init__(
        self,
        type_name: str,
        context: str,
        source: str | None = None,
    ) -> None:
        self.type_name = type_name
        super().__init__(f"No type mapping for '{type_name}' ({context})", source)


class MalformedInputError(SchemaError):
    """Raised when column metadata breaks the sorted-input contract."""

    def __init__(
        self,
        message: str,
        table_name: str,
        source: str | None = None,
    ) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}': {message}", source)


class SchemaSourceError(SchemaError):
    """Raised when column metadata cannot be fetched from the database."""

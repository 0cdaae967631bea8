"""Schema introspection - reads PostgreSQL column metadata."""

from .main import (
    COLUMNS_QUERY,
    ColumnMetadata,
    Snapshot,
    dump_snapshot,
    fetch_columns,
    load_snapshot,
    resolve_dsn,
)

__all__ = [
    "COLUMNS_QUERY",
    "ColumnMetadata",
    "Snapshot",
    "dump_snapshot",
    "fetch_columns",
    "load_snapshot",
    "resolve_dsn",
]

"""
Schema introspection - reads column metadata from a PostgreSQL database.

Rows come from ``information_schema.columns`` for a single schema, sorted by
table name and ordinal position. They can also be written to and read back
from a YAML snapshot so that generation can run without a live database.
"""

from __future__ import annotations

import argparse
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Final, Sequence

import psycopg
import yaml
from psycopg.rows import class_row

from ..shared import (
    DEFAULT_SCHEMA,
    SchemaError,
    SchemaSourceError,
    SchemaValidationError,
    load_yaml_mapping,
    status,
)

DATABASE_URL_ENV: Final[str] = "DATABASE_URL"

COLUMNS_QUERY: Final[str] = (
    "SELECT table_name, column_name, udt_name, "
    "is_nullable = 'YES' AS is_nullable, ordinal_position "
    "FROM information_schema.columns "
    "WHERE table_schema = %s "
    "ORDER BY table_name, ordinal_position"
)

_NULLABLE_STRINGS: Final[dict[str, bool]] = {"YES": True, "NO": False}


@dataclass(frozen=True, slots=True)
class ColumnMetadata:
    """One column of one table, as reported by the database."""

    table_name: str
    column_name: str
    udt_name: str
    is_nullable: bool
    ordinal_position: int


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Column metadata read back from a snapshot file."""

    schema: str | None
    columns: list[ColumnMetadata]


def fetch_columns(
    dsn: str,
    schema: str = DEFAULT_SCHEMA,
    *,
    connect_timeout: int = 10,
    verbose: bool = True,
) -> list[ColumnMetadata]:
    """Fetch column metadata for every table in ``schema``.

    Args:
        dsn: libpq connection string or URL.
        schema: Schema to introspect.
        connect_timeout: Seconds to wait for the connection.
        verbose: Whether to print progress to stderr.

    Returns:
        Rows sorted by table name, then ordinal position.

    Raises:
        SchemaSourceError: If the database cannot be reached or queried.
    """
    status("connecting to db", verbose)
    try:
        with psycopg.connect(dsn, connect_timeout=connect_timeout) as conn:
            conn.execute("SELECT 1")
            status("db connected", verbose)

            with conn.cursor(row_factory=class_row(ColumnMetadata)) as cur:
                cur.execute(COLUMNS_QUERY, (schema,))
                columns = cur.fetchall()
    except psycopg.Error as e:
        raise SchemaSourceError(f"Failed to fetch column metadata: {e}", "database") from e

    status(f"Fetched {len(columns)} column(s) from schema '{schema}'", verbose)
    return columns


def _parse_nullable(value: Any, source: str, row: int) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.upper() in _NULLABLE_STRINGS:
        return _NULLABLE_STRINGS[value.upper()]
    raise SchemaValidationError(
        f"row {row} must be a boolean or YES/NO", source, field="is_nullable"
    )


def _parse_column(raw: Any, source: str, row: int) -> ColumnMetadata:
    """Validate one snapshot row."""
    if not isinstance(raw, dict):
        raise SchemaValidationError(f"row {row} must be a mapping", source)

    for key in ("table_name", "column_name", "udt_name"):
        value = raw.get(key)
        if not isinstance(value, str) or not value:
            raise SchemaValidationError(
                f"row {row} is missing a string value", source, field=key
            )

    position = raw.get("ordinal_position")
    # bool is a subclass of int
    if not isinstance(position, int) or isinstance(position, bool):
        raise SchemaValidationError(
            f"row {row} must be an integer", source, field="ordinal_position"
        )

    return ColumnMetadata(
        table_name=raw["table_name"],
        column_name=raw["column_name"],
        udt_name=raw["udt_name"],
        is_nullable=_parse_nullable(raw.get("is_nullable"), source, row),
        ordinal_position=position,
    )


def load_snapshot(path: Path) -> Snapshot:
    """Load column metadata from a YAML snapshot file.

    Rows are returned in file order; sorting is checked later when the
    columns are grouped per table. ``schema`` is None when the file does
    not record one.

    Raises:
        SchemaError: If the file cannot be read or parsed.
        SchemaValidationError: If a row is malformed.
    """
    source = str(path)
    data = load_yaml_mapping(path)

    raw_columns = data.get("columns")
    if not isinstance(raw_columns, list):
        raise SchemaValidationError("snapshot must provide a 'columns' list", source)

    schema = data.get("schema")
    if schema is not None and (not isinstance(schema, str) or not schema):
        raise SchemaValidationError("must be a non-empty string", source, field="schema")

    return Snapshot(
        schema=schema,
        columns=[
            _parse_column(raw, source, row)
            for row, raw in enumerate(raw_columns, start=1)
        ],
    )


def dump_snapshot(
    columns: Sequence[ColumnMetadata],
    path: Path,
    schema: str = DEFAULT_SCHEMA,
) -> None:
    """Write column metadata to a YAML snapshot file."""
    document = {
        "schema": schema,
        "columns": [asdict(column) for column in columns],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(document, sort_keys=False, default_flow_style=False),
        encoding="utf-8",
    )


def resolve_dsn(explicit: str | None) -> str:
    """Pick the connection string from the flag or the environment."""
    dsn = explicit or os.environ.get(DATABASE_URL_ENV)
    if not dsn:
        raise SchemaSourceError(
            f"No database given; set {DATABASE_URL_ENV} or pass --database-url"
        )
    return dsn


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for writing a snapshot."""
    parser = argparse.ArgumentParser(
        prog="pgstructgen snapshot",
        description="Write the column metadata of a PostgreSQL schema to a YAML file",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Snapshot file to write",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help=f"Connection URL (defaults to ${DATABASE_URL_ENV})",
    )
    parser.add_argument(
        "--schema",
        default=DEFAULT_SCHEMA,
        help="Schema to introspect",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print progress to stderr",
    )

    args = parser.parse_args(argv)

    try:
        dsn = resolve_dsn(args.database_url)
        columns = fetch_columns(dsn, args.schema, verbose=not args.quiet)
        dump_snapshot(columns, args.output, args.schema)
    except SchemaError as e:
        raise SystemExit(f"Error: {e}") from e

    status(f"Wrote {len(columns)} column(s) to {args.output}", not args.quiet)


if __name__ == "__main__":
    main()

"""
Struct Code Generator - Generates Rust structs from PostgreSQL column metadata.

Columns are grouped per table, filtered, mapped to Rust types and rendered
as one ``pub struct`` per table in the order the tables were received.
Any unknown column type aborts the run before anything is rendered.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Iterable, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..introspect.main import (
    ColumnMetadata,
    fetch_columns,
    load_snapshot,
    resolve_dsn,
)
from ..shared import (
    DEFAULT_EXCLUDED_TABLES,
    GeneratorOptions,
    MalformedInputError,
    SchemaError,
    UnknownTypeError,
    input_struct_name,
    is_valid_field_name,
    is_valid_struct_name,
    load_config,
    row_struct_name,
    sanitize_field_name,
    status,
)

# Type mappings from PostgreSQL udt names to Rust types
PG_RUST_TYPES: Final[dict[str, str]] = {
    "int8": "i64",
    "int4": "i32",
    "int2": "i16",
    "text": "String",
    "varchar": "String",
    "jsonb": "sqlx::types::Json<serde_json::Value>",
    "timestamptz": "chrono::DateTime<chrono::Utc>",
    "date": "chrono::NaiveDate",
    "float4": "f32",
    "float8": "f64",
    "uuid": "uuid::Uuid",
    "boolean": "bool",
    "bytea": "Vec<u8>",
}

# Column left out of the insert-payload structs
INPUT_SKIPPED_COLUMN: Final[str] = "id"

# Template configuration
TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"


@dataclass(frozen=True, slots=True)
class TableGroup:
    """The columns of one table, in ordinal order."""

    table_name: str
    columns: tuple[ColumnMetadata, ...]


@dataclass(frozen=True, slots=True)
class FieldType:
    """A mapped Rust type plus whether it is wrapped in ``Option``."""

    base_type: str
    optional: bool

    @property
    def rust_type(self) -> str:
        return f"Option<{self.base_type}>" if self.optional else self.base_type


@dataclass(frozen=True, slots=True)
class Field:
    """A struct field; ``name`` is the column name, unescaped."""

    name: str
    field_type: FieldType


@dataclass(frozen=True, slots=True)
class RecordType:
    """A named struct generated for one table."""

    name: str
    table_name: str
    fields: tuple[Field, ...]


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources."""

    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self.template_env.filters["rust_ident"] = sanitize_field_name
        self._structs_template = self.template_env.get_template("structs.rs.j2")

    @property
    def structs_template(self):
        return self._structs_template


def rust_type_for(
    udt_name: str,
    overrides: Mapping[str, str] | None = None,
    context: str | None = None,
) -> str:
    """Resolve the Rust type for a PostgreSQL udt name.

    Args:
        udt_name: Native type name, e.g. ``int4``.
        overrides: Explicit mappings consulted before the defaults.
        context: Where the type was found, for error messages.

    Returns:
        The Rust type string.

    Raises:
        UnknownTypeError: If no mapping exists.
    """
    if overrides and udt_name in overrides:
        return overrides[udt_name]

    mapped = PG_RUST_TYPES.get(udt_name)
    if mapped is None:
        raise UnknownTypeError(udt_name, context or "column type")

    return mapped


def should_emit(
    table_name: str,
    excluded: Iterable[str] = DEFAULT_EXCLUDED_TABLES,
) -> bool:
    """Return whether a struct should be generated for ``table_name``."""
    return table_name not in DEFAULT_EXCLUDED_TABLES and table_name not in excluded


def group_columns(columns: Iterable[ColumnMetadata]) -> list[TableGroup]:
    """Group pre-sorted column rows by table, keeping first-seen order.

    Raises:
        MalformedInputError: If a table's rows are not contiguous, or its
            ordinal positions are not positive and strictly increasing.
    """
    groups: list[TableGroup] = []
    seen: set[str] = set()
    current_table: str | None = None
    current: list[ColumnMetadata] = []

    def close() -> None:
        if current_table is not None:
            groups.append(TableGroup(current_table, tuple(current)))

    for column in columns:
        if column.table_name != current_table:
            if column.table_name in seen:
                raise MalformedInputError(
                    "columns are not contiguous; input must be sorted by table name",
                    column.table_name,
                )
            close()
            current_table = column.table_name
            current = []
            seen.add(current_table)

        if column.ordinal_position < 1:
            raise MalformedInputError(
                f"column '{column.column_name}' has ordinal position "
                f"{column.ordinal_position}",
                column.table_name,
            )
        if current and column.ordinal_position <= current[-1].ordinal_position:
            raise MalformedInputError(
                f"column '{column.column_name}' at ordinal position "
                f"{column.ordinal_position} follows position "
                f"{current[-1].ordinal_position}",
                column.table_name,
            )
        current.append(column)

    close()
    return groups


def _struct_name(name: str, table_name: str) -> str:
    if not is_valid_struct_name(name):
        raise MalformedInputError(
            f"struct name '{name}' derived from the table name is not a valid "
            "Rust identifier",
            table_name,
        )
    return name


def _build_field(column: ColumnMetadata, overrides: Mapping[str, str] | None) -> Field:
    if not is_valid_field_name(column.column_name):
        raise MalformedInputError(
            f"column name '{column.column_name}' is not a valid Rust field name",
            column.table_name,
        )

    base_type = rust_type_for(
        column.udt_name,
        overrides,
        f"column '{column.table_name}.{column.column_name}'",
    )
    return Field(
        name=column.column_name,
        field_type=FieldType(base_type=base_type, optional=column.is_nullable),
    )


def build_record(
    group: TableGroup,
    overrides: Mapping[str, str] | None = None,
) -> RecordType:
    """Build the row struct for one table."""
    if not group.columns:
        raise MalformedInputError("table has no columns", group.table_name)

    name = _struct_name(row_struct_name(group.table_name), group.table_name)
    return RecordType(
        name=name,
        table_name=group.table_name,
        fields=tuple(_build_field(column, overrides) for column in group.columns),
    )


def build_input_record(
    group: TableGroup,
    overrides: Mapping[str, str] | None = None,
) -> RecordType:
    """Build the insert-payload struct for one table, without its ``id``."""
    return RecordType(
        name=_struct_name(input_struct_name(group.table_name), group.table_name),
        table_name=group.table_name,
        fields=tuple(
            _build_field(column, overrides)
            for column in group.columns
            if column.column_name != INPUT_SKIPPED_COLUMN
        ),
    )


def build_records(
    columns: Iterable[ColumnMetadata],
    options: GeneratorOptions | None = None,
    *,
    verbose: bool = False,
) -> list[RecordType]:
    """Turn column rows into struct definitions, failing on the first error."""
    options = options or GeneratorOptions()
    records: list[RecordType] = []
    owners: dict[str, str] = {}

    def add(record: RecordType) -> None:
        owner = owners.setdefault(record.name, record.table_name)
        if owner != record.table_name:
            raise MalformedInputError(
                f"struct name '{record.name}' is already used by table '{owner}'",
                record.table_name,
            )
        records.append(record)

    for group in group_columns(columns):
        if not should_emit(group.table_name, options.exclude_tables):
            status(f"Skipping: {group.table_name}", verbose)
            continue

        status(f"Working on: {group.table_name}", verbose)
        add(build_record(group, options.type_overrides))
        if options.input_structs:
            add(build_input_record(group, options.type_overrides))

    return records


def render(
    records: Sequence[RecordType],
    ctx: GeneratorContext,
    options: GeneratorOptions | None = None,
) -> str:
    """Render struct definitions as Rust source."""
    options = options or GeneratorOptions()
    return ctx.structs_template.render(
        records=records,
        derives=options.derives,
        header=options.header,
        schema=options.schema,
    )


def generate(
    columns: Iterable[ColumnMetadata],
    options: GeneratorOptions | None = None,
    *,
    verbose: bool = False,
) -> str:
    """Generate Rust source for every emitted table.

    Args:
        columns: Column rows sorted by table name, then ordinal position.
        options: Generator settings; defaults apply when omitted.
        verbose: Whether to print progress to stderr.

    Returns:
        The rendered Rust source.

    Raises:
        UnknownTypeError: If any column has an unmapped type.
        MalformedInputError: If the rows break the sort contract.
    """
    records = build_records(columns, options, verbose=verbose)
    return render(records, GeneratorContext(), options)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pgstructgen generate",
        description="Generate Rust structs from a PostgreSQL schema",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Connection URL (defaults to $DATABASE_URL)",
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Read column metadata from a YAML snapshot instead of a database",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with generator options",
    )
    parser.add_argument(
        "--schema",
        default=None,
        help="Schema to introspect (default: public)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="TABLE",
        help="Skip a table (repeatable)",
    )
    parser.add_argument(
        "--derive",
        action="append",
        default=[],
        metavar="TRAIT",
        help="Add a trait to each struct's #[derive] list (repeatable)",
    )
    parser.add_argument(
        "--input-structs",
        action="store_true",
        help="Also emit <Table>Input structs without the id column",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write to a file instead of stdout",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print progress to stderr",
    )

    args = parser.parse_args(argv)
    verbose = not args.quiet

    try:
        snapshot = load_snapshot(args.snapshot) if args.snapshot is not None else None

        # Precedence for the schema: --schema, config file, snapshot, default
        defaults = GeneratorOptions()
        if snapshot is not None and snapshot.schema:
            defaults = GeneratorOptions(schema=snapshot.schema)

        options = load_config(args.config, defaults) if args.config else defaults
        options = options.with_cli_overrides(
            schema=args.schema,
            exclude=args.exclude,
            derives=args.derive,
            input_structs=args.input_structs,
        )

        if snapshot is not None:
            columns = snapshot.columns
        else:
            dsn = resolve_dsn(args.database_url)
            columns = fetch_columns(dsn, options.schema, verbose=verbose)

        source = generate(columns, options, verbose=verbose)
    except (SchemaError, FileNotFoundError) as e:
        raise SystemExit(f"Error: {e}") from e

    if args.output is None:
        print(source, end="")
        return

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(source, encoding="utf-8")
    status(f"Wrote {args.output}", verbose)


if __name__ == "__main__":
    main()

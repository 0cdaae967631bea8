"""Generator configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Final, Sequence

import yaml

from .errors import SchemaError, SchemaValidationError

DEFAULT_SCHEMA: Final[str] = "public"
MIGRATIONS_TABLE: Final[str] = "_sqlx_migrations"
DEFAULT_EXCLUDED_TABLES: Final[frozenset[str]] = frozenset({MIGRATIONS_TABLE})
DEFAULT_HEADER: Final[str] = "Generated by pgstructgen. Do not edit by hand."

_KNOWN_KEYS: Final[frozenset[str]] = frozenset({
    "schema",
    "exclude_tables",
    "type_overrides",
    "derives",
    "input_structs",
    "header",
})


@dataclass(frozen=True)
class GeneratorOptions:
    """Resolved settings for one generation run."""

    schema: str = DEFAULT_SCHEMA
    exclude_tables: frozenset[str] = DEFAULT_EXCLUDED_TABLES
    type_overrides: dict[str, str] = field(default_factory=dict)
    derives: tuple[str, ...] = ()
    input_structs: bool = False
    header: str | None = DEFAULT_HEADER

    def with_cli_overrides(
        self,
        *,
        schema: str | None = None,
        exclude: Sequence[str] = (),
        derives: Sequence[str] = (),
        input_structs: bool = False,
    ) -> GeneratorOptions:
        """Layer command line flags on top of these options."""
        return replace(
            self,
            schema=schema or self.schema,
            exclude_tables=self.exclude_tables | frozenset(exclude),
            derives=self.derives + tuple(d for d in derives if d not in self.derives),
            input_structs=self.input_structs or input_structs,
        )


def _string_list(value: Any, key: str, source: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SchemaValidationError("must be a list of strings", source, field=key)
    return value


def load_yaml_mapping(path: Path) -> dict[str, Any]:
    """Load a YAML file whose root must be a mapping.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read file: {e}", str(path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML: {e}", str(path)) from e

    if not isinstance(data, dict):
        raise SchemaError("File root must be a mapping", str(path))

    return data


def load_config(
    path: Path,
    defaults: GeneratorOptions | None = None,
) -> GeneratorOptions:
    """Load generator options from a YAML config file.

    Args:
        path: Path to the config file.
        defaults: Options supplying the values of missing keys.

    Returns:
        The options, with defaults filled in for missing keys.

    Raises:
        SchemaError: If the file cannot be read or parsed.
        SchemaValidationError: If a key is unknown or has the wrong type.
    """
    source = str(path)
    data = load_yaml_mapping(path)

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise SchemaValidationError("unknown config key", source, field=unknown[0])

    options = defaults or GeneratorOptions()

    schema = data.get("schema", options.schema)
    if not isinstance(schema, str) or not schema:
        raise SchemaValidationError("must be a non-empty string", source, field="schema")

    exclude = _string_list(data.get("exclude_tables", []), "exclude_tables", source)
    derives = _string_list(data.get("derives", list(options.derives)), "derives", source)

    overrides = data.get("type_overrides", dict(options.type_overrides))
    if not isinstance(overrides, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in overrides.items()
    ):
        raise SchemaValidationError(
            "must map native type names to Rust types", source, field="type_overrides"
        )

    input_structs = data.get("input_structs", options.input_structs)
    if not isinstance(input_structs, bool):
        raise SchemaValidationError("must be true or false", source, field="input_structs")

    header = data.get("header", options.header)
    if header is not None and not isinstance(header, str):
        raise SchemaValidationError("must be a string or null", source, field="header")

    return GeneratorOptions(
        schema=schema,
        exclude_tables=options.exclude_tables | frozenset(exclude),
        type_overrides=dict(overrides),
        derives=tuple(derives),
        input_structs=input_structs,
        header=header,
    )

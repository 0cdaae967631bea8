"""Naming utilities for code generation."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final

RUST_KEYWORDS: frozenset[str] = frozenset({
    "as",
    "async",
    "await",
    "break",
    "const",
    "continue",
    "crate",
    "dyn",
    "else",
    "enum",
    "extern",
    "false",
    "fn",
    "for",
    "if",
    "impl",
    "in",
    "let",
    "loop",
    "match",
    "mod",
    "move",
    "mut",
    "pub",
    "ref",
    "return",
    "self",
    "Self",
    "static",
    "struct",
    "super",
    "trait",
    "true",
    "type",
    "union",
    "unsafe",
    "use",
    "where",
    "while",
    # Reserved for future use
    "abstract",
    "become",
    "box",
    "do",
    "final",
    "gen",
    "macro",
    "override",
    "priv",
    "try",
    "typeof",
    "unsized",
    "virtual",
    "yield",
})

# Keywords that cannot be written as raw identifiers
NON_RAW_KEYWORDS: frozenset[str] = frozenset({"crate", "self", "Self", "super"})

INPUT_SUFFIX: Final[str] = "Input"


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Uses caching for repeated calls with the same input.

    Examples:
        >>> to_pascal_case("customer_orders")
        'CustomerOrders'
        >>> to_pascal_case("customer-orders")
        'CustomerOrders'
        >>> to_pascal_case("CustomerOrders")
        'CustomerOrders'
    """
    # Inner capitals are kept as-is
    parts = [part for part in re.split(r"[\W_]+", value) if part]
    return "".join(part[0].upper() + part[1:] for part in parts)


def row_struct_name(table_name: str) -> str:
    """Name of the struct describing a full row of ``table_name``."""
    return to_pascal_case(table_name)


def input_struct_name(table_name: str) -> str:
    """Name of the insert-payload companion struct for ``table_name``."""
    return f"{to_pascal_case(table_name)}{INPUT_SUFFIX}"


def is_valid_struct_name(value: str) -> bool:
    """Return whether ``value`` can name a Rust struct as written."""
    return value.isidentifier() and value not in RUST_KEYWORDS


def is_valid_field_name(value: str) -> bool:
    """Return whether ``value`` can name a Rust field, raw form allowed."""
    return (
        value.isidentifier()
        and value != "_"
        and value not in NON_RAW_KEYWORDS
    )


@lru_cache(maxsize=1024)
def sanitize_field_name(value: str) -> str:
    """Render a column name as a Rust field name.

    Keywords become raw identifiers; the name is otherwise unchanged.
    Callers check ``is_valid_field_name`` first.
    """
    if value in RUST_KEYWORDS:
        return f"r#{value}"
    return value

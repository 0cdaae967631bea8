#!/usr/bin/env python3
"""
Command line interface for pgstructgen.

Usage:
    python -m pgstructgen <command> [options]

Commands:
    generate    Print Rust structs for every table in a schema
    snapshot    Save a schema's column metadata to a YAML file

Examples:
    DATABASE_URL=postgres://localhost/app python -m pgstructgen generate > src/models.rs
    python -m pgstructgen generate --snapshot schema.yaml --derive Debug --derive sqlx::FromRow
    python -m pgstructgen snapshot -o schema.yaml
"""

from __future__ import annotations

import sys


def cmd_generate(args: list[str]) -> int:
    """Generate Rust structs."""
    from pgstructgen.struct_codegen import main as struct_codegen
    try:
        struct_codegen.main(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, str):
            print(e.code, file=sys.stderr)
        return e.code if isinstance(e.code, int) else 1


def cmd_snapshot(args: list[str]) -> int:
    """Write a column metadata snapshot."""
    from pgstructgen.introspect import main as introspect
    try:
        introspect.main(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, str):
            print(e.code, file=sys.stderr)
        return e.code if isinstance(e.code, int) else 1


COMMANDS = {
    "generate": (cmd_generate, "Print Rust structs for every table in a schema"),
    "snapshot": (cmd_snapshot, "Save a schema's column metadata to a YAML file"),
}


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = argv[0]
    args = argv[1:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())

"""Progress reporting for the command line tools."""

from __future__ import annotations

import sys


def status(message: str, verbose: bool = True) -> None:
    """Print a progress line to stderr, keeping stdout for generated code."""
    if verbose:
        print(message, file=sys.stderr)

"""
Executable module for legacyfit.

Running:
    python -m legacyfit

is equivalent to:
    legacyfit

This module simply forwards execution to the CLI entrypoint defined in
`legacyfit.cli`.
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entrypoint when executing `python -m legacyfit`.

    Returns:
        Exit code returned by the CLI.
    """
    # Import lazily so dependencies are only loaded during CLI use
    from legacyfit.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())

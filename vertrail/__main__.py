"""
Executable module for vertrail.

Running:
    python -m vertrail

is equivalent to:
    vertrail

This module forwards execution to the CLI entrypoint defined in
`vertrail.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> int:
    """Report a broken installation on standard error and return 1."""
    sys.stderr.write("vertrail could not start: a dependency failed to import.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from vertrail.__version__ import __version__

        sys.stderr.write(f"vertrail version: {__version__}\n")
    except ImportError:
        sys.stderr.write("vertrail version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")
    return 1


def main() -> int:
    """
    Main entrypoint when executing `python -m vertrail`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from vertrail.cli import main as cli_main
    except ImportError as exc:
        return _print_startup_error(exc)

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())

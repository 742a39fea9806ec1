"""
Executable module for requirekit.

Running ``python -m requirekit`` is equivalent to running ``requirekit``.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Describe a failed CLI import on stderr."""
    sys.stderr.write("requirekit CLI could not be loaded.\n\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from requirekit.__version__ import __version__

        sys.stderr.write(f"requirekit version: {__version__}\n")
    except ImportError:
        sys.stderr.write("requirekit version: <unknown>\n")
    sys.stderr.write(f"\nImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing ``python -m requirekit``.

    Returns:
        Exit code returned by the CLI, or 1 when it cannot be imported.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from requirekit.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())

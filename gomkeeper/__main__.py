"""
Executable module for gomkeeper.

Running:
    python -m gomkeeper

is equivalent to:
    gomkeeper
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be loaded."""
    try:
        from gomkeeper.__version__ import __version__
    except ImportError:
        __version__ = "<unknown>"

    sys.stderr.write(f"gomkeeper version: {__version__}\n")
    sys.stderr.write(f"Python version: {sys.version}\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """Run the CLI and return its exit code."""
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from gomkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())

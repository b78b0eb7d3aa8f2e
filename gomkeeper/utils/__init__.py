"""
Utility helpers for gomkeeper.

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

from gomkeeper.utils.filesystem import (
    ensure_absent,
    remove_tree_quietly,
    safe_read_file,
    write_new_file,
)
from gomkeeper.utils.logger import (
    get_logger,
    is_logging_configured,
    setup_logging,
)
from gomkeeper.utils.console import (
    get_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reset_console,
)

__all__ = [
    # Console
    "get_console",
    "print_error",
    "print_success",
    "print_table",
    "print_warning",
    "reset_console",
    # Logging
    "get_logger",
    "setup_logging",
    "is_logging_configured",
    # Filesystem
    "ensure_absent",
    "remove_tree_quietly",
    "safe_read_file",
    "write_new_file",
]

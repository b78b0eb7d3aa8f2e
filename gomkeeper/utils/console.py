"""
Console output utilities for gomkeeper using Rich.

User-facing status lines and tables go through this module; diagnostics go
through :mod:`gomkeeper.utils.logger`.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Optional, Sequence

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

GOMKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
    }
)

_console: Optional[Console] = None


def _should_use_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def get_console() -> Console:
    """Return the shared Rich console, creating it on first use."""
    global _console

    if _console is None:
        use_color = _should_use_color()
        _console = Console(
            theme=GOMKEEPER_THEME,
            no_color=not use_color,
            highlight=False,
        )
    return _console


def reset_console() -> None:
    """Drop the shared console so the next call re-reads NO_COLOR."""
    global _console
    _console = None


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    get_console().print(f"{prefix} {message}", style="success", markup=False)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    get_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    get_console().print(f"{prefix} {message}", style="warning", markup=False)


def print_table(
    rows: List[Dict[str, Any]],
    *,
    headers: Sequence[str],
    title: Optional[str] = None,
    caption: Optional[str] = None,
) -> None:
    """Render rows as a Rich table, one column per header.

    Missing values render as empty cells. Nothing is printed for an empty
    row list.
    """
    if not rows:
        return

    table = Table(title=title, caption=caption, header_style="bold")
    for header in headers:
        table.add_column(header, overflow="fold")

    for row in rows:
        table.add_row(*(str(row.get(h, "") or "") for h in headers))

    get_console().print(table)

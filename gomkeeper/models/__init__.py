"""
Data model exports for gomkeeper.

Example:
    >>> from gomkeeper.models import Dependency
"""

from __future__ import annotations

from gomkeeper.models.dependency import (
    COMMIT_OPTION,
    GOOS_OPTION,
    GROUP_OPTION,
    Dependency,
    Symbol,
    render_lock,
    render_manifest,
)

__all__ = [
    "COMMIT_OPTION",
    "GOOS_OPTION",
    "GROUP_OPTION",
    "Dependency",
    "Symbol",
    "render_lock",
    "render_manifest",
]

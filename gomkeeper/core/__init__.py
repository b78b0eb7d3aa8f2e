"""
Core functionality exports for gomkeeper.

    from gomkeeper.core import ImportScanner, LockGenerator
"""

from __future__ import annotations

from gomkeeper.core.build_tags import BuildConstraint, BuildTags
from gomkeeper.core.filters import BuildContext
from gomkeeper.core.gomfile import GomfileParser, parse_gomfile
from gomkeeper.core.go_source import GoPackage, PackageResolver, parse_imports
from gomkeeper.core.scanner import ImportKind, ImportScanner, classify_import
from gomkeeper.core.templates import write_travis_yml
from gomkeeper.core.vcs import VCS_BACKENDS, VCSBackend, VCSRoot, locate_vcs_root
from gomkeeper.core.lock import (
    LockGenerator,
    LockResult,
    generate_gomfile,
    sanitize,
    strip_metadata,
)

__all__ = [
    "BuildConstraint",
    "BuildTags",
    "BuildContext",
    "GomfileParser",
    "parse_gomfile",
    "GoPackage",
    "PackageResolver",
    "parse_imports",
    "ImportKind",
    "ImportScanner",
    "classify_import",
    "write_travis_yml",
    "VCS_BACKENDS",
    "VCSBackend",
    "VCSRoot",
    "locate_vcs_root",
    "LockGenerator",
    "LockResult",
    "generate_gomfile",
    "sanitize",
    "strip_metadata",
]

"""Import graph scanner.

Walks the import graph of a Go source tree and collects every external
(third-party) import path it reaches. At each package visited, every
declared import is classified:

* **standard**: no ``.`` anywhere in the path; ignored, never explored.
* **external**: recorded, and then explored for its own imports.
* **local**: ``./x`` style import inside the same tree; explored only.

Recording and exploring are separate steps so each can be observed on its
own. Every distinct import string is recorded on its own, so
``host/org/repo`` and ``host/org/repo/sub`` are two entries even though
they share a repository.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import List, Optional, Set, Union

from gomkeeper.utils import get_logger
from gomkeeper.core.go_source import PackageResolver, is_local_import

logger = get_logger("core.scanner")


class ImportKind(enum.Enum):
    STANDARD = "standard"
    LOCAL = "local"
    EXTERNAL = "external"


def is_standard_import(path: str) -> bool:
    """Standard-library heuristic: the path has no ``.`` in it.

    This is the Go toolchain's own rule of thumb and is kept as is, even
    though it misclassifies dot-less private module paths.
    """
    return "." not in path


def classify_import(path: str) -> ImportKind:
    if is_standard_import(path):
        return ImportKind.STANDARD
    if is_local_import(path):
        return ImportKind.LOCAL
    return ImportKind.EXTERNAL


class ImportScanner:
    """Collects the transitive external imports of a Go package.

    Each package is resolved and walked at most once per :meth:`scan` call,
    so diamond dependencies cost a single visit and import cycles
    terminate.

    Args:
        resolver: Locates packages and lists their imports.
    """

    def __init__(self, resolver: PackageResolver) -> None:
        self.resolver = resolver
        self._visited: Set[str] = set()
        self._found: Set[str] = set()

    def scan(
        self,
        import_path: str = ".",
        search_dir: Optional[Union[str, Path]] = None,
    ) -> Set[str]:
        """Return the external imports reachable from ``import_path``.

        Args:
            import_path: Package to start from; ``"."`` is the package in
                ``search_dir`` itself.
            search_dir: Directory local imports are resolved against;
                defaults to the current working directory.

        Raises:
            PackageResolutionError: A package on the way cannot be found or
                parsed. No partial result is returned.
        """
        self._visited = set()
        self._found = set()

        root = Path(search_dir) if search_dir is not None else Path.cwd()
        self._walk(import_path, root.resolve())

        logger.info(
            "Found %d external import(s) across %d package(s)",
            len(self._found),
            len(self._visited),
        )
        return set(self._found)

    def sorted_dependencies(
        self,
        import_path: str = ".",
        search_dir: Optional[Union[str, Path]] = None,
    ) -> List[str]:
        """:meth:`scan`, sorted lexicographically for stable manifests."""
        return sorted(self.scan(import_path, search_dir))

    def _visit_key(self, import_path: str, search_dir: Path) -> str:
        # Local paths mean different packages from different directories
        if is_local_import(import_path):
            return str((search_dir / import_path).resolve())
        return import_path

    def _record(self, import_path: str) -> None:
        if import_path not in self._found:
            logger.debug("External import: %s", import_path)
            self._found.add(import_path)

    def _walk(self, import_path: str, search_dir: Path) -> None:
        key = self._visit_key(import_path, search_dir)
        if key in self._visited:
            return
        self._visited.add(key)

        package = self.resolver.resolve(import_path, search_dir)

        for imp in package.imports:
            kind = classify_import(imp)
            if kind is ImportKind.STANDARD:
                continue
            if kind is ImportKind.EXTERNAL:
                self._record(imp)
            self._walk(imp, package.dir)

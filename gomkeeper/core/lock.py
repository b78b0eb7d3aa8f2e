"""Gomfile and Gomfile.lock generation.

:func:`generate_gomfile` scans a source tree and writes the sorted list of
external imports as a fresh ``Gomfile``.

:class:`LockGenerator` turns parsed Gomfile entries into ``Gomfile.lock``:

1. refuse if the lock file already exists (nothing is touched),
2. keep the entries that apply to the build context, in order,
3. pin each one to the revision checked out under the vendor tree, when
   one can be read,
4. write the lock file,
5. remove the internal placeholder roots from the vendor tree,
6. strip the VCS metadata directory of every repository an entry
   resolved to in step 3 (:func:`strip_metadata`).

Steps 1–4 fail loudly; steps 5–6 only log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from gomkeeper.models import Dependency, render_lock, render_manifest
from gomkeeper.core.vcs import VCSRoot, locate_vcs_root
from gomkeeper.core.filters import BuildContext
from gomkeeper.core.scanner import ImportScanner
from gomkeeper.constants import INTERNAL_ROOTS_DIR, VENDOR_SRC_DIR
from gomkeeper.utils import (
    ensure_absent,
    get_logger,
    remove_tree_quietly,
    write_new_file,
)

logger = get_logger("core.lock")

PathLike = Union[str, Path]


def vendor_src(vendor_dir: PathLike) -> Path:
    """Directory holding vendored ``<import path>`` trees."""
    return Path(vendor_dir) / VENDOR_SRC_DIR


def generate_gomfile(
    gomfile_path: PathLike,
    scanner: ImportScanner,
    search_dir: Optional[PathLike] = None,
) -> List[Dependency]:
    """Scan ``search_dir`` and write its external imports to a new Gomfile.

    Raises:
        AlreadyExistsError: ``gomfile_path`` exists.
        PackageResolutionError: The scan failed; no file is written.
        FileOperationError: The file could not be written.
    """
    ensure_absent(gomfile_path)

    names = scanner.sorted_dependencies(".", search_dir)
    dependencies = [Dependency(name=name) for name in names]

    write_new_file(gomfile_path, render_manifest(dependencies))
    logger.info("Wrote %d dependency(ies) to %s", len(dependencies), gomfile_path)
    return dependencies


def sanitize(vendor_dir: PathLike, dependencies: Iterable[Dependency]) -> List[Path]:
    """Delete the VCS metadata directory of each dependency's repository.

    Every repository is located before anything is deleted, so a removal
    never changes which root a later entry resolves to.

    Returns:
        Metadata directories that were removed.
    """
    src = vendor_src(vendor_dir)
    roots = [locate_vcs_root(src, dep.name) for dep in dependencies]
    return strip_metadata(root for root in roots if root is not None)


def strip_metadata(roots: Iterable[VCSRoot]) -> List[Path]:
    """Remove the metadata directory of each distinct root.

    Only the metadata directory goes; the checked-out sources stay. Failures
    are logged and skipped.
    """
    removed: List[Path] = []
    seen: Set[Path] = set()

    for root in roots:
        metadata = root.metadata_path
        if metadata in seen:
            continue
        seen.add(metadata)
        if remove_tree_quietly(metadata):
            removed.append(metadata)

    return removed


@dataclass
class LockResult:
    """Outcome of one lock run.

    Attributes:
        lock_path: The written lock file.
        dependencies: Entries written, in order.
        skipped: Entries left out by the build context.
        roots: Repository found for each written entry, by name.
    """

    lock_path: Path
    dependencies: List[Dependency] = field(default_factory=list)
    skipped: List[Dependency] = field(default_factory=list)
    roots: Dict[str, VCSRoot] = field(default_factory=dict)

    @property
    def pinned(self) -> List[Dependency]:
        return [dep for dep in self.dependencies if dep.commit]

    @property
    def unpinned(self) -> List[Dependency]:
        return [dep for dep in self.dependencies if not dep.commit]


class LockGenerator:
    """Pins Gomfile entries to the revisions found in the vendor tree.

    Args:
        vendor_dir: Vendor directory (the one holding ``src/``).
        context: Groups and target OS used to select entries.
    """

    def __init__(self, vendor_dir: PathLike, context: BuildContext) -> None:
        self.vendor_dir = Path(vendor_dir)
        self.context = context

    @property
    def vendor_src(self) -> Path:
        return vendor_src(self.vendor_dir)

    def resolve(self, dependencies: Iterable[Dependency]) -> Dict[str, VCSRoot]:
        """Pin each dependency whose repository reports a revision.

        Dependencies are updated in place. A repository that cannot report
        a revision leaves its dependency unpinned.
        """
        roots: Dict[str, VCSRoot] = {}
        for dep in dependencies:
            root = locate_vcs_root(self.vendor_src, dep.name)
            if root is None:
                logger.info("%s: no repository under %s", dep.name, self.vendor_src)
                continue

            roots[dep.name] = root
            revision = root.revision()
            if revision:
                dep.pin(revision)
                logger.debug("%s pinned to %s (%s)", dep.name, revision, root.backend.kind)
        return roots

    def generate(
        self,
        dependencies: Iterable[Dependency],
        lock_path: PathLike,
    ) -> LockResult:
        """Write ``lock_path`` for ``dependencies`` and clean the vendor tree.

        Raises:
            AlreadyExistsError: ``lock_path`` exists; nothing was changed.
            FileOperationError: The lock file could not be written.
        """
        ensure_absent(lock_path)

        entries = list(dependencies)
        selected = self.context.select(entries)
        result = LockResult(
            lock_path=Path(lock_path),
            dependencies=selected,
            skipped=[dep for dep in entries if dep not in selected],
        )
        result.roots = self.resolve(selected)

        write_new_file(lock_path, render_lock(selected))
        logger.info(
            "Wrote %s: %d pinned, %d unpinned, %d skipped",
            lock_path,
            len(result.pinned),
            len(result.unpinned),
            len(result.skipped),
        )

        remove_tree_quietly(self.vendor_src / INTERNAL_ROOTS_DIR)
        strip_metadata(result.roots.values())

        return result

"""Version control backends.

Each supported backend is described by a :class:`VCSBackend`: the name of
the metadata directory that marks a repository root and the command that
prints the checked-out revision. :data:`VCS_BACKENDS` lists them in
detection priority order (git, then hg, then bzr); adding a backend means
appending a descriptor, nothing else.

Revision lookups are best-effort. :meth:`VCSBackend.revision` returns
``None`` instead of raising, so one broken working copy cannot stop a lock
run.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Sequence, Tuple, Union

from gomkeeper.utils import get_logger
from gomkeeper.exceptions import VCSRevisionError

logger = get_logger("core.vcs")


@dataclass(frozen=True)
class VCSBackend:
    """Descriptor for one version control system.

    Attributes:
        kind: Short name (``git``, ``hg``, ``bzr``).
        metadata_dir: Directory marking a working copy root.
        revision_command: Command printing the current revision, run with
            the repository root as working directory.
    """

    kind: str
    metadata_dir: str
    revision_command: Tuple[str, ...]

    def owns(self, path: Path) -> bool:
        """True if ``path`` holds this backend's metadata directory."""
        return (path / self.metadata_dir).is_dir()

    def read_revision(self, path: Union[str, Path]) -> str:
        """Run the revision command in ``path``.

        Raises:
            VCSRevisionError: The command is missing, fails, or prints
                nothing.
        """
        try:
            result = subprocess.run(
                list(self.revision_command),
                cwd=str(path),
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as exc:
            raise VCSRevisionError(
                f"{self.revision_command[0]} is not installed",
                vcs=self.kind,
                path=str(path),
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise VCSRevisionError(
                f"{' '.join(self.revision_command)} exited with {exc.returncode}",
                vcs=self.kind,
                path=str(path),
                stderr=exc.stderr,
            ) from exc
        except OSError as exc:
            raise VCSRevisionError(
                f"cannot run {self.revision_command[0]}: {exc}",
                vcs=self.kind,
                path=str(path),
            ) from exc

        revision = result.stdout.strip()
        if not revision:
            raise VCSRevisionError(
                "no revision reported",
                vcs=self.kind,
                path=str(path),
            )
        return revision

    def revision(self, path: Union[str, Path]) -> Optional[str]:
        """Current revision of the working copy at ``path``, or ``None``."""
        try:
            return self.read_revision(path)
        except VCSRevisionError as exc:
            logger.info("No revision for %s: %s", path, exc)
            return None


GIT = VCSBackend("git", ".git", ("git", "rev-parse", "HEAD"))
HG = VCSBackend("hg", ".hg", ("hg", "log", "-r", ".", "--template", "{node}"))
BZR = VCSBackend("bzr", ".bzr", ("bzr", "revno"))

#: Detection priority order.
VCS_BACKENDS: Tuple[VCSBackend, ...] = (GIT, HG, BZR)


@dataclass(frozen=True)
class VCSRoot:
    """A repository root found under the vendor tree."""

    path: Path
    backend: VCSBackend

    @property
    def metadata_path(self) -> Path:
        return self.path / self.backend.metadata_dir

    def revision(self) -> Optional[str]:
        return self.backend.revision(self.path)


def detect_backend(
    path: Path,
    backends: Sequence[VCSBackend] = VCS_BACKENDS,
) -> Optional[VCSBackend]:
    """First backend, in priority order, whose metadata lives in ``path``."""
    for backend in backends:
        if backend.owns(path):
            return backend
    return None


def locate_vcs_root(
    vendor_src: Union[str, Path],
    name: str,
    backends: Sequence[VCSBackend] = VCS_BACKENDS,
) -> Optional[VCSRoot]:
    """Find the repository that holds import path ``name``.

    Starts at ``vendor_src/name`` and drops one trailing path segment at a
    time until a backend's metadata directory is found, so
    ``host/org/repo/subpkg`` resolves to the root at ``host/org/repo``.
    ``vendor_src`` itself is never considered.

    Returns:
        The root, or ``None`` when no ancestor is a working copy.
    """
    root = Path(vendor_src)
    current = PurePosixPath(name.lstrip("/"))

    while str(current) not in (".", "/", ""):
        candidate = root.joinpath(*current.parts)
        backend = detect_backend(candidate, backends)
        if backend is not None:
            logger.debug("%s is a %s repository (for %s)", candidate, backend.kind, name)
            return VCSRoot(path=candidate, backend=backend)
        current = current.parent

    logger.debug("No repository found for %s", name)
    return None

"""
Filesystem utilities for gomkeeper.

Manifest and lock files are created, never overwritten: :func:`write_new_file`
refuses an existing target and writes through a temporary file so a failed
write leaves nothing behind. Cleanup of vendored trees is best-effort, see
:func:`remove_tree_quietly`.
"""

from __future__ import annotations

import os
import sys
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple, Union

from gomkeeper.constants import MAX_FILE_SIZE
from gomkeeper.utils.logger import get_logger
from gomkeeper.exceptions import AlreadyExistsError, FileOperationError

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file, normalizing every failure to ``FileOperationError``.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = Path(file_path)

    if not path.is_file():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )

    try:
        size = path.stat().st_size
        if max_size is not None and size > max_size:
            raise FileOperationError(
                f"File too large: {size} bytes (max {max_size})",
                file_path=str(path),
                operation="read",
            )
        return path.read_text(encoding=encoding)
    except FileOperationError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def ensure_absent(file_path: PathLike) -> Path:
    """Raise :class:`AlreadyExistsError` if ``file_path`` exists."""
    path = Path(file_path)
    if path.exists():
        raise AlreadyExistsError(str(path))
    return path


def write_new_file(file_path: PathLike, content: str) -> Path:
    """Create ``file_path`` with ``content``, refusing to overwrite.

    Content is written to a sibling temporary file and moved into place,
    so readers never observe a partially written manifest.

    Raises:
        AlreadyExistsError: The target already exists.
        FileOperationError: The file could not be written.
    """
    target = ensure_absent(file_path)
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(target.parent or Path(".")),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except OSError as exc:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Failed to write {target.name}: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc

    logger.debug("Wrote %s (%d bytes)", target, len(content))
    return target


def remove_tree_quietly(path: PathLike) -> bool:
    """Recursively delete ``path``, logging instead of raising on failure.

    Returns:
        True if the directory existed and was removed.
    """
    target = Path(path)
    if not target.exists():
        return False

    errors: List[Tuple[str, BaseException]] = []

    if sys.version_info >= (3, 12):
        shutil.rmtree(target, onexc=lambda _f, p, exc: errors.append((p, exc)))
    else:
        shutil.rmtree(target, onerror=lambda _f, p, info: errors.append((p, info[1])))

    for failed_path, exc in errors:
        logger.warning("Could not remove %s: %s", failed_path, exc)

    if errors:
        return False

    logger.debug("Removed %s", target)
    return True

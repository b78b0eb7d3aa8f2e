"""
Custom exception hierarchy for gomkeeper.

This module defines structured exception types used across gomkeeper.
All exceptions inherit from :class:`GomKeeperError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Fatal conditions (an existing manifest, an unresolvable package, a failed
write) propagate to the CLI. :class:`VCSRevisionError` is the one degraded
condition: it is raised and caught inside :mod:`gomkeeper.core.vcs` and
never escapes a lock run.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class GomKeeperError(Exception):
    """Base exception for all gomkeeper errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ParseError(GomKeeperError):
    """Raised when a Gomfile cannot be parsed.

    Args:
        message: Error description.
        line_number: Line number where parsing failed.
        line_content: Raw content of the problematic line.
        file_path: Path to the file being parsed.
    """

    __slots__ = ("line_number", "line_content", "file_path")

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "line", line_number)
        _add_if(details, "content", line_content)
        _add_if(details, "file", file_path)

        super().__init__(message, details)

        self.line_number = line_number
        self.line_content = line_content
        self.file_path = file_path


class FileOperationError(GomKeeperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/delete).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class AlreadyExistsError(FileOperationError):
    """Raised when a manifest, lock file or CI config would be overwritten.

    Nothing is modified when this is raised; the user must remove the
    existing file and retry.
    """

    __slots__ = ()

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"{file_path} already exists",
            file_path=file_path,
            operation="create",
        )


class ConfigError(GomKeeperError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "config", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class PackageResolutionError(GomKeeperError):
    """Raised when a Go package cannot be located or parsed.

    Aborts the whole import scan; no manifest is written.

    Args:
        message: Error description.
        import_path: Import path being resolved.
        search_dir: Directory the import was resolved against.
        file_path: Source file that failed to parse, if any.
    """

    __slots__ = ("import_path", "search_dir", "file_path")

    def __init__(
        self,
        message: str,
        *,
        import_path: Optional[str] = None,
        search_dir: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "import", import_path)
        _add_if(details, "dir", search_dir)
        _add_if(details, "file", file_path)

        super().__init__(message, details)

        self.import_path = import_path
        self.search_dir = search_dir
        self.file_path = file_path


class VCSRevisionError(GomKeeperError):
    """Raised when a working copy's current revision cannot be read.

    Args:
        message: Error description.
        vcs: Backend kind (``git``, ``hg`` or ``bzr``).
        path: Repository root the command ran in.
        stderr: Command error output, truncated for safety.
    """

    __slots__ = ("vcs", "path", "stderr")

    def __init__(
        self,
        message: str,
        *,
        vcs: Optional[str] = None,
        path: Optional[str] = None,
        stderr: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "vcs", vcs)
        _add_if(details, "path", path)
        if stderr:
            details["stderr"] = _truncate(stderr.strip())

        super().__init__(message, details)

        self.vcs = vcs
        self.path = path
        self.stderr = stderr

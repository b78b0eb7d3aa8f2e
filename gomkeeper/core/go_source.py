"""Go package loading.

Resolves a Go import path to a directory on disk and reads the import
declarations of the buildable ``.go`` files in it. Only the file header is
lexed (package clause and import declarations); the rest of each file is
never looked at.

Lookup order for non-local imports follows the GOPATH convention: every
configured source root (``<vendor>/src`` first, then each ``$GOPATH/src``)
is tried in turn. Local imports (``./x``, ``../x``) are resolved against
the directory of the importing package.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from gomkeeper.exceptions import FileOperationError, PackageResolutionError
from gomkeeper.core.build_tags import GO_BUILD_RE, PLUS_BUILD_RE, BuildConstraint, BuildTags
from gomkeeper.core.filters import host_goarch
from gomkeeper.utils import get_logger, safe_read_file
from gomkeeper.constants import (
    GO_SOURCE_SUFFIX,
    GO_TEST_SUFFIX,
    KNOWN_GOARCH,
    KNOWN_GOOS,
)

logger = get_logger("core.go_source")

_GO_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
  | (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*.*?\*/)
  | (?P<raw_string>`[^`]*`)
  | (?P<string>"(?:[^"\\\n]|\\.)*")
  | (?P<ident>[^\W\d]\w*)
  | (?P<punct>[();.])
    """,
    re.VERBOSE | re.DOTALL,
)

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}


class GoSyntaxError(ValueError):
    """Raised when a Go file header cannot be parsed."""


@dataclass
class GoFileHeader:
    """Package clause and imports of one Go source file."""

    package: str
    imports: List[str] = field(default_factory=list)
    constraint: Optional[BuildConstraint] = None

    def builds_for(self, tags: BuildTags) -> bool:
        return self.constraint is None or self.constraint.satisfied_by(tags)


@dataclass
class GoPackage:
    """A resolved Go package: where it lives and what it imports.

    Attributes:
        import_path: Path the package was requested as.
        dir: Absolute directory holding its sources.
        imports: Sorted, de-duplicated imports of all buildable files.
    """

    import_path: str
    dir: Path
    imports: List[str] = field(default_factory=list)


def is_local_import(path: str) -> bool:
    """Return True for ``.``, ``..`` and paths starting with ``./`` or ``../``."""
    return path in (".", "..") or path.startswith(("./", "../"))


def _tokens(source: str) -> Iterator[Tuple[str, str]]:
    pos = 0
    while pos < len(source):
        match = _GO_TOKEN_RE.match(source, pos)
        if match is None:
            yield "invalid", source[pos]
            return
        pos = match.end()
        if match.lastgroup != "ws":
            yield match.lastgroup or "", match.group()
    yield "eof", ""


def _unquote(kind: str, literal: str) -> str:
    if kind == "raw_string":
        return literal[1:-1]
    try:
        return _interpret_escapes(literal[1:-1])
    except (ValueError, IndexError) as exc:
        raise GoSyntaxError(f"invalid string literal {literal}: {exc}") from exc


def _interpret_escapes(body: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt in "uU":
            width = 4 if nxt == "u" else 8
            out.append(chr(int(body[i + 2 : i + 2 + width], 16)))
            i += 2 + width
        elif nxt == "x":
            out.append(chr(int(body[i + 2 : i + 4], 16)))
            i += 4
        elif nxt in "01234567":
            digits = body[i + 1 : i + 4]
            if len(digits) != 3 or any(d not in "01234567" for d in digits):
                raise ValueError(f"octal escape needs three digits: \\{digits}")
            value = int(digits, 8)
            if value > 0xFF:
                raise ValueError(f"octal escape out of range: \\{digits}")
            out.append(chr(value))
            i += 4
        else:
            raise ValueError(f"unknown escape sequence \\{nxt}")
    return "".join(out)


def parse_imports(source: str, filename: str = "<source>") -> GoFileHeader:
    """Parse the package clause and import declarations of a Go file.

    ``//go:build`` and ``// +build`` comments before the package clause
    become the header's :class:`BuildConstraint`; see
    :meth:`GoFileHeader.builds_for`.

    Raises:
        GoSyntaxError: The header is malformed.
    """
    if source.startswith("\ufeff"):
        source = source[1:]

    tokens = _tokens(source)
    constraint_lines: List[str] = []

    def error(message: str) -> GoSyntaxError:
        return GoSyntaxError(f"{filename}: {message}")

    def next_token() -> Tuple[str, str]:
        kind, text = next(tokens)
        while kind in ("line_comment", "block_comment"):
            kind, text = next(tokens)
        if kind == "invalid":
            raise error(f"unexpected character {text!r}")
        return kind, text

    # Package clause, collecting constraint comments in front of it
    kind, text = next(tokens)
    while kind in ("line_comment", "block_comment"):
        text = text.rstrip()
        if kind == "line_comment" and (GO_BUILD_RE.match(text) or PLUS_BUILD_RE.match(text)):
            constraint_lines.append(text)
        kind, text = next(tokens)

    if (kind, text) != ("ident", "package"):
        raise error("expected 'package' clause")
    kind, package = next_token()
    if kind != "ident":
        raise error("expected package name")

    try:
        constraint = BuildConstraint.from_lines(constraint_lines)
    except ValueError as exc:
        raise error(str(exc)) from exc

    header = GoFileHeader(package=package, constraint=constraint)

    def import_spec(kind: str, text: str) -> None:
        if kind == "ident" or (kind, text) == ("punct", "."):
            kind, text = next_token()
        if kind not in ("string", "raw_string"):
            raise error(f"expected import path, found {text!r}")
        path = _unquote(kind, text)
        if not path:
            raise error("empty import path")
        header.imports.append(path)

    kind, text = next_token()
    while True:
        if (kind, text) == ("punct", ";"):
            kind, text = next_token()
            continue
        if (kind, text) != ("ident", "import"):
            break

        kind, text = next_token()
        if (kind, text) == ("punct", "("):
            kind, text = next_token()
            while (kind, text) != ("punct", ")"):
                if kind == "eof":
                    raise error("unterminated import group")
                if (kind, text) != ("punct", ";"):
                    import_spec(kind, text)
                kind, text = next_token()
        else:
            import_spec(kind, text)
        kind, text = next_token()

    return header


def _goos_suffix(stem: str) -> Optional[str]:
    """Return the target OS named by a ``_<goos>`` or ``_<goos>_<goarch>`` suffix."""
    parts = stem.split("_")[1:]
    if parts and parts[-1] in KNOWN_GOOS:
        return parts[-1]
    if len(parts) >= 2 and parts[-1] in KNOWN_GOARCH and parts[-2] in KNOWN_GOOS:
        return parts[-2]
    return None


def _goarch_suffix(stem: str) -> Optional[str]:
    """Return the architecture named by a trailing ``_<goarch>`` suffix."""
    parts = stem.split("_")[1:]
    if parts and parts[-1] in KNOWN_GOARCH:
        return parts[-1]
    return None


class PackageResolver:
    """Locates Go packages on disk and lists their imports.

    Args:
        source_roots: Directories holding ``<import path>`` trees, searched
            in order.
        goos: Target operating system.
        goarch: Target architecture; defaults to the host's.

    Files whose name suffix or build constraint excludes the target are
    skipped.
    """

    def __init__(
        self,
        source_roots: Sequence[Path],
        goos: str,
        goarch: Optional[str] = None,
    ) -> None:
        self.source_roots = [Path(root) for root in source_roots]
        self.tags = BuildTags(goos=goos, goarch=goarch or host_goarch())

    @property
    def goos(self) -> str:
        return self.tags.goos

    def find_dir(self, import_path: str, search_dir: Path) -> Optional[Path]:
        if is_local_import(import_path):
            candidate = Path(os.path.normpath(Path(search_dir) / import_path))
            return candidate if candidate.is_dir() else None

        for root in self.source_roots:
            candidate = root / import_path
            if candidate.is_dir():
                return candidate
        return None

    def resolve(self, import_path: str, search_dir: Path) -> GoPackage:
        """Resolve ``import_path`` relative to ``search_dir``.

        Raises:
            PackageResolutionError: No directory, no buildable Go files, or
                a file that cannot be read or parsed.
        """
        directory = self.find_dir(import_path, search_dir)
        if directory is None:
            raise PackageResolutionError(
                f"cannot find package {import_path!r}",
                import_path=import_path,
                search_dir=str(search_dir),
            )
        directory = directory.resolve()

        imports = set()
        buildable = 0
        for source_file in self._candidate_files(directory):
            try:
                header = parse_imports(safe_read_file(source_file), source_file.name)
            except (GoSyntaxError, FileOperationError) as exc:
                raise PackageResolutionError(
                    f"cannot parse package {import_path!r}: {exc}",
                    import_path=import_path,
                    search_dir=str(search_dir),
                    file_path=str(source_file),
                ) from exc

            if not header.builds_for(self.tags):
                logger.debug("Skipping %s (build constraint)", source_file)
                continue
            buildable += 1
            imports.update(header.imports)

        if not buildable:
            raise PackageResolutionError(
                f"no buildable Go source files in {directory}",
                import_path=import_path,
                search_dir=str(search_dir),
            )

        logger.debug("Resolved %s -> %s (%d imports)", import_path, directory, len(imports))
        return GoPackage(import_path=import_path, dir=directory, imports=sorted(imports))

    def _candidate_files(self, directory: Path) -> List[Path]:
        files = []
        for entry in sorted(directory.iterdir()):
            name = entry.name
            if not name.endswith(GO_SOURCE_SUFFIX) or not entry.is_file():
                continue
            if name.startswith(("_", ".")) or name.endswith(GO_TEST_SUFFIX):
                continue
            stem = name[: -len(GO_SOURCE_SUFFIX)]
            goos, goarch = _goos_suffix(stem), _goarch_suffix(stem)
            if goos is not None and not self.tags.matches(goos):
                continue
            if goarch is not None and goarch != self.tags.goarch:
                continue
            files.append(entry)
        return files

"""
Centralized constants for gomkeeper.

This module defines immutable values used across gomkeeper: manifest and
lock file names, vendor layout, VCS metadata, Go target platforms and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# Manifest files
# ---------------------------------------------------------------------------

#: Unresolved dependency manifest.
GOMFILE_NAME: Final[str] = "Gomfile"

#: Resolved, pinned dependency manifest.
GOMFILE_LOCK_NAME: Final[str] = "Gomfile.lock"

#: CI configuration written by ``gen travis-yml``.
TRAVIS_YML_NAME: Final[str] = ".travis.yml"

#: Fixed content of the generated CI configuration.
TRAVIS_YML_CONTENT: Final[str] = """language: go
go:
  - tip
before_install:
  - go get github.com/mattn/gom
script:
  - $HOME/gopath/bin/gom install
  - $HOME/gopath/bin/gom test
"""

# ---------------------------------------------------------------------------
# Vendor layout
# ---------------------------------------------------------------------------

#: Default vendor directory, relative to the project root.
DEFAULT_VENDOR_DIR: Final[str] = "_vendor"

#: Sources live under ``<vendor>/src/<import path>`` (GOPATH layout).
VENDOR_SRC_DIR: Final[str] = "src"

#: Placeholder roots created while installing; removed once pinned.
INTERNAL_ROOTS_DIR: Final[str] = "gom-internal-roots"

# ---------------------------------------------------------------------------
# Build context
# ---------------------------------------------------------------------------

#: Groups active when nothing else is configured.
DEFAULT_GROUPS: Final[Sequence[str]] = ("development",)

#: Python ``sys.platform`` prefixes mapped to Go ``GOOS`` identifiers.
PLATFORM_TO_GOOS: Final[Mapping[str, str]] = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
    "dragonfly": "dragonfly",
    "sunos": "solaris",
    "aix": "aix",
}

#: Target operating systems recognized in ``_<goos>.go`` file suffixes.
KNOWN_GOOS: Final[Sequence[str]] = (
    "aix",
    "android",
    "darwin",
    "dragonfly",
    "freebsd",
    "illumos",
    "ios",
    "js",
    "linux",
    "nacl",
    "netbsd",
    "openbsd",
    "plan9",
    "solaris",
    "wasip1",
    "windows",
    "zos",
)

#: Architectures recognized in ``_<goos>_<goarch>.go`` file suffixes.
KNOWN_GOARCH: Final[Sequence[str]] = (
    "386",
    "amd64",
    "arm",
    "arm64",
    "loong64",
    "mips",
    "mips64",
    "mips64le",
    "mipsle",
    "ppc64",
    "ppc64le",
    "riscv64",
    "s390x",
    "wasm",
)

#: ``platform.machine()`` values (lower-cased) mapped to Go ``GOARCH``.
MACHINE_TO_GOARCH: Final[Mapping[str, str]] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loong64",
}

#: Operating systems satisfying the ``unix`` build tag.
UNIX_GOOS: Final[Sequence[str]] = (
    "aix",
    "android",
    "darwin",
    "dragonfly",
    "freebsd",
    "hurd",
    "illumos",
    "ios",
    "linux",
    "netbsd",
    "openbsd",
    "solaris",
)

#: Operating systems that also satisfy another GOOS tag.
GOOS_ALSO_MATCHES: Final[Mapping[str, str]] = {
    "android": "linux",
    "illumos": "solaris",
    "ios": "darwin",
}

# ---------------------------------------------------------------------------
# Go source files
# ---------------------------------------------------------------------------

GO_SOURCE_SUFFIX: Final[str] = ".go"

GO_TEST_SUFFIX: Final[str] = "_test.go"

#: Maximum allowed file size (in bytes) when reading manifests and sources.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

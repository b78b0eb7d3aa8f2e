"""Configuration file loader for gomkeeper.

Supports two formats:

- ``gomkeeper.toml``: settings under ``[gomkeeper]`` table
- ``pyproject.toml``: settings under ``[tool.gomkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``GOMKEEPER_CONFIG``
2. ``gomkeeper.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.gomkeeper]`` section

Configuration precedence: defaults < config file < environment < CLI args.

Example (``gomkeeper.toml``)::

    [gomkeeper]
    vendor_dir = "_vendor"
    groups = ["development", "test"]
    goos = "linux"
    gopath = ["/home/me/go"]
"""

from __future__ import annotations

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import tomli as tomllib

from gomkeeper.exceptions import ConfigError
from gomkeeper.utils.logger import get_logger
from gomkeeper.constants import DEFAULT_GROUPS, DEFAULT_VENDOR_DIR, VENDOR_SRC_DIR

logger = get_logger("config")

#: Environment variable naming the vendor directory (as gom reads it).
ENV_VENDOR_DIR = "GOM_VENDOR_NAME"

#: Comma-separated active groups.
ENV_GROUPS = "GOMKEEPER_GROUPS"

ENV_GOOS = "GOOS"

ENV_GOPATH = "GOPATH"


@dataclass
class GomKeeperConfig:
    """Parsed and validated gomkeeper configuration.

    Attributes:
        vendor_dir: Vendor directory relative to the project root.
        groups: Active build groups for ``:group`` filtering.
        goos: Target OS for ``:goos`` filtering; ``None`` means the host.
        gopath: Extra GOPATH workspaces searched after the vendor tree.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    vendor_dir: str = DEFAULT_VENDOR_DIR
    groups: List[str] = field(default_factory=lambda: list(DEFAULT_GROUPS))
    goos: Optional[str] = None
    gopath: List[str] = field(default_factory=list)

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Configuration options for debug logging, without metadata."""
        return {
            "vendor_dir": self.vendor_dir,
            "groups": list(self.groups),
            "goos": self.goos,
            "gopath": list(self.gopath),
        }

    def apply_environment(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Override file settings with ``GOM_VENDOR_NAME``, ``GOOS``,
        ``GOPATH`` and ``GOMKEEPER_GROUPS`` when set."""
        env = os.environ if environ is None else environ

        if env.get(ENV_VENDOR_DIR):
            self.vendor_dir = env[ENV_VENDOR_DIR]
        if env.get(ENV_GOOS):
            self.goos = env[ENV_GOOS]
        if env.get(ENV_GOPATH):
            self.gopath = [p for p in env[ENV_GOPATH].split(os.pathsep) if p]
        if env.get(ENV_GROUPS):
            self.groups = [g.strip() for g in env[ENV_GROUPS].split(",") if g.strip()]

    def vendor_path(self, project_dir: Path) -> Path:
        return (Path(project_dir) / self.vendor_dir).resolve()

    def source_roots(self, project_dir: Path) -> List[Path]:
        """Package lookup roots: the vendor tree first, then each GOPATH."""
        roots = [self.vendor_path(project_dir) / VENDOR_SRC_DIR]
        roots.extend(Path(p).expanduser() / "src" for p in self.gopath)
        return roots


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    gomkeeper_toml = cwd / "gomkeeper.toml"
    if gomkeeper_toml.is_file():
        logger.debug("Found gomkeeper.toml: %s", gomkeeper_toml)
        return gomkeeper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.gomkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """True if ``pyproject.toml`` has a ``[tool.gomkeeper]`` table.

    An unreadable or invalid pyproject is treated as not configuring
    gomkeeper.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "gomkeeper" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> GomKeeperConfig:
    """Load and validate gomkeeper configuration.

    Environment overrides are not applied here; see
    :meth:`GomKeeperConfig.apply_environment`.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        return GomKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("gomkeeper", {})
    else:
        section = raw.get("gomkeeper", {})

    if not section:
        logger.debug("Config file found but no gomkeeper section, using defaults")
        return GomKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _string_list(value: Any, option: str, config_path: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(
        f"{option} must be a string or a list of strings, got {type(value).__name__}",
        config_path=config_path,
        option=option,
    )


def _parse_section(section: Dict[str, Any], *, config_path: str) -> GomKeeperConfig:
    """Validate a ``[gomkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = GomKeeperConfig()

    unknown = set(section) - {"vendor_dir", "groups", "goos", "gopath"}
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option in ("vendor_dir", "goos"):
        if option in section:
            val = section[option]
            if not isinstance(val, str) or not val:
                raise ConfigError(
                    f"{option} must be a non-empty string, got {val!r}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    if "groups" in section:
        config.groups = _string_list(section["groups"], "groups", config_path)
    if "gopath" in section:
        config.gopath = _string_list(section["gopath"], "gopath", config_path)

    return config

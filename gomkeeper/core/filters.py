"""Conditional inclusion of Gomfile entries.

An entry may be restricted to build groups (``:group``) and to target
operating systems (``:goos``). :class:`BuildContext` holds the active
groups and target OS and decides, per entry, whether it applies. A missing
key places no constraint; when both are present both must match.
"""

from __future__ import annotations

import os
import sys
import platform
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

from gomkeeper.models import Dependency
from gomkeeper.utils import get_logger
from gomkeeper.constants import DEFAULT_GROUPS, MACHINE_TO_GOARCH, PLATFORM_TO_GOOS

logger = get_logger("core.filters")


def host_goos() -> str:
    """Go ``GOOS`` identifier of the running platform.

    ``$GOOS`` wins when set, as it does for the Go toolchain.
    """
    env_goos = os.environ.get("GOOS")
    if env_goos:
        return env_goos
    for prefix, goos in PLATFORM_TO_GOOS.items():
        if sys.platform.startswith(prefix):
            return goos
    return sys.platform


def host_goarch() -> str:
    """Go ``GOARCH`` identifier of the running machine; ``$GOARCH`` wins."""
    env_goarch = os.environ.get("GOARCH")
    if env_goarch:
        return env_goarch
    machine = platform.machine().lower()
    return MACHINE_TO_GOARCH.get(machine, machine)


@dataclass(frozen=True)
class BuildContext:
    """Active build groups and target OS.

    Attributes:
        groups: Groups an entry's ``:group`` is matched against.
        goos: Target operating system an entry's ``:goos`` must name.
    """

    groups: FrozenSet[str] = field(default_factory=lambda: frozenset(DEFAULT_GROUPS))
    goos: str = field(default_factory=host_goos)

    @classmethod
    def create(
        cls,
        groups: Optional[Iterable[str]] = None,
        goos: Optional[str] = None,
    ) -> "BuildContext":
        return cls(
            groups=frozenset(groups) if groups is not None else frozenset(DEFAULT_GROUPS),
            goos=goos or host_goos(),
        )

    def matches_group(self, declared: Optional[List[str]]) -> bool:
        return declared is None or any(group in self.groups for group in declared)

    def matches_goos(self, declared: Optional[List[str]]) -> bool:
        return declared is None or self.goos in declared

    def includes(self, dependency: Dependency) -> bool:
        """True if ``dependency`` applies to this context."""
        included = self.matches_group(dependency.groups) and self.matches_goos(
            dependency.goos
        )
        if not included:
            logger.debug(
                "Skipping %s (group=%s, goos=%s)",
                dependency.name,
                dependency.groups,
                dependency.goos,
            )
        return included

    def select(self, dependencies: Iterable[Dependency]) -> List[Dependency]:
        """Entries that apply, in their original order."""
        return [dep for dep in dependencies if self.includes(dep)]

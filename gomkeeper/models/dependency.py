"""
Dependency data model for gomkeeper.

A :class:`Dependency` is one ``gom '<import path>'`` entry of a Gomfile,
either freshly produced by the import scanner or rehydrated by the Gomfile
parser. The only mutation after construction is the lock generator adding
a ``commit`` option.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

#: Build-context tag(s) the entry is restricted to.
GROUP_OPTION = "group"

#: Target operating system(s) the entry is restricted to.
GOOS_OPTION = "goos"

#: Resolved revision; only the lock generator sets it.
COMMIT_OPTION = "commit"


class Symbol(str):
    """A Ruby-style symbol value (``:test``) from a Gomfile.

    Compares equal to the plain string, so ``Symbol("test") == "test"``.
    Only the rendering differs.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Symbol({str.__repr__(self)})"


OptionValue = Union[str, bool, List[Any]]


def option_values(value: Any) -> List[str]:
    """Flatten an option value to the list of strings it declares."""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def render_value(value: Any) -> str:
    """Render an option value the way a Gomfile writes it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Symbol):
        return f":{value}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(v) for v in value) + "]"
    text = str(value)
    if "'" in text:
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return f"'{text}'"


@dataclass
class Dependency:
    """A single Gomfile entry.

    Attributes:
        name: Go import path, unique within a manifest.
        options: Option mapping (``group``, ``goos``, ``commit`` and any
            other key found in the Gomfile, kept in source order).
        line_number: Line in the source Gomfile, 0 for scanned entries.
    """

    name: str
    options: Dict[str, OptionValue] = field(default_factory=dict)
    line_number: int = 0

    @property
    def commit(self) -> Optional[str]:
        value = self.options.get(COMMIT_OPTION)
        return str(value) if value else None

    @property
    def groups(self) -> Optional[List[str]]:
        """Declared groups, or ``None`` when the entry is unrestricted."""
        if GROUP_OPTION not in self.options:
            return None
        return option_values(self.options[GROUP_OPTION])

    @property
    def goos(self) -> Optional[List[str]]:
        """Declared target systems, or ``None`` when unrestricted."""
        if GOOS_OPTION not in self.options:
            return None
        return option_values(self.options[GOOS_OPTION])

    def pin(self, revision: str) -> None:
        self.options[COMMIT_OPTION] = revision

    def to_line(self, include_options: bool = True) -> str:
        """Render the manifest line, with its options unless told otherwise."""
        parts = [f"gom {render_value(self.name)}"]
        if not include_options:
            return parts[0]
        parts.extend(
            f":{key} => {render_value(value)}" for key, value in self.options.items()
        )
        return ", ".join(parts)

    def to_lock_line(self) -> str:
        """Render the lock line: the name, plus ``:commit`` when pinned."""
        line = f"gom {render_value(self.name)}"
        if self.commit:
            line += f", :{COMMIT_OPTION} => {render_value(self.commit)}"
        return line

    def __str__(self) -> str:
        return self.to_line()


def render_manifest(dependencies: Iterable[Dependency]) -> str:
    """Render one manifest line per dependency, in the given order."""
    return "".join(f"{dep.to_line()}\n" for dep in dependencies)


def render_lock(dependencies: Iterable[Dependency]) -> str:
    """Render one lock line per dependency, in the given order."""
    return "".join(f"{dep.to_lock_line()}\n" for dep in dependencies)

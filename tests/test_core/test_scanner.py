from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from gomkeeper.core.go_source import PackageResolver
from gomkeeper.core.scanner import (
    ImportKind,
    ImportScanner,
    classify_import,
    is_standard_import,
)
from gomkeeper.exceptions import PackageResolutionError


@pytest.fixture
def layout(tmp_path: Path) -> tuple:
    """Project directory and vendor ``src`` root."""
    project = tmp_path / "project"
    vendor_src = tmp_path / "project" / "_vendor" / "src"
    project.mkdir()
    vendor_src.mkdir(parents=True)
    return project, vendor_src


def _scanner(vendor_src: Path) -> ImportScanner:
    return ImportScanner(PackageResolver([vendor_src], goos="linux"))


@pytest.mark.unit
class TestClassifyImport:
    @pytest.mark.parametrize(
        "path, kind",
        [
            ("fmt", ImportKind.STANDARD),
            ("net/http", ImportKind.STANDARD),
            ("C", ImportKind.STANDARD),
            ("pkgs/alpha", ImportKind.STANDARD),
            ("./util", ImportKind.LOCAL),
            ("../shared", ImportKind.LOCAL),
            ("github.com/mattn/gom", ImportKind.EXTERNAL),
            ("gopkg.in/yaml.v2", ImportKind.EXTERNAL),
            ("internal.corp/x", ImportKind.EXTERNAL),
        ],
    )
    def test_classification(self, path: str, kind: ImportKind) -> None:
        assert classify_import(path) is kind

    def test_standard_heuristic_is_dot_only(self) -> None:
        """Any '.' anywhere makes a path non-standard."""
        assert is_standard_import("a/b/c") is True
        assert is_standard_import("a/b.c") is False


@pytest.mark.unit
class TestImportScanner:
    """Tests for the recursive import walk."""

    def test_records_external_imports_transitively(
        self, layout: tuple, write_package: Callable[..., Path]
    ) -> None:
        """Sub-packages of one repository are recorded separately; std is excluded."""
        project, vendor_src = layout
        write_package(project, ["fmt", "pkgs.example/alpha", "pkgs.example/alpha/sub"])
        write_package(vendor_src / "pkgs.example/alpha", ["fmt", "pkgs.example/beta"], package="alpha")
        write_package(vendor_src / "pkgs.example/alpha/sub", [], package="sub")
        write_package(vendor_src / "pkgs.example/beta", ["net/http"], package="beta")

        result = _scanner(vendor_src).scan(".", project)

        assert result == {"pkgs.example/alpha", "pkgs.example/alpha/sub", "pkgs.example/beta"}

    def test_local_imports_are_explored_not_recorded(
        self, layout: tuple, write_package: Callable[..., Path]
    ) -> None:
        project, vendor_src = layout
        write_package(project, ["./internal/util"])
        write_package(project / "internal" / "util", ["ext.example/lib", "../helpers"], package="util")
        write_package(project / "internal" / "helpers", ["ext.example/helper"], package="helpers")
        write_package(vendor_src / "ext.example/lib", [], package="lib")
        write_package(vendor_src / "ext.example/helper", [], package="helper")

        result = _scanner(vendor_src).scan(".", project)

        assert result == {"ext.example/lib", "ext.example/helper"}

    def test_diamond_dependency_is_scanned_once(
        self, layout: tuple, write_package: Callable[..., Path]
    ) -> None:
        project, vendor_src = layout
        write_package(project, ["left.example/l", "right.example/r"])
        write_package(vendor_src / "left.example/l", ["shared.example/s"], package="l")
        write_package(vendor_src / "right.example/r", ["shared.example/s"], package="r")
        write_package(vendor_src / "shared.example/s", ["os"], package="s")

        resolver = MagicMock(wraps=PackageResolver([vendor_src], goos="linux"))
        result = ImportScanner(resolver).scan(".", project)

        assert result == {"left.example/l", "right.example/r", "shared.example/s"}
        calls = Counter(call.args[0] for call in resolver.resolve.call_args_list)
        assert calls["shared.example/s"] == 1

    def test_import_cycle_terminates(
        self, layout: tuple, write_package: Callable[..., Path]
    ) -> None:
        project, vendor_src = layout
        write_package(project, ["a.example/a"])
        write_package(vendor_src / "a.example/a", ["b.example/b"], package="a")
        write_package(vendor_src / "b.example/b", ["a.example/a"], package="b")

        assert _scanner(vendor_src).scan(".", project) == {"a.example/a", "b.example/b"}

    def test_standard_imports_never_resolved(
        self, layout: tuple, write_package: Callable[..., Path]
    ) -> None:
        """Standard paths are skipped before lookup, so they need not exist."""
        project, vendor_src = layout
        write_package(project, ["fmt", "encoding/json", "pkgs/alpha"])

        resolver = MagicMock(wraps=PackageResolver([vendor_src], goos="linux"))
        result = ImportScanner(resolver).scan(".", project)

        assert result == set()
        assert [call.args[0] for call in resolver.resolve.call_args_list] == ["."]

    def test_missing_dependency_aborts_scan(
        self, layout: tuple, write_package: Callable[..., Path]
    ) -> None:
        project, vendor_src = layout
        write_package(project, ["present.example/p", "missing.example/m"])
        write_package(vendor_src / "present.example/p", [], package="p")

        with pytest.raises(PackageResolutionError) as exc_info:
            _scanner(vendor_src).scan(".", project)

        assert exc_info.value.import_path == "missing.example/m"

    def test_scan_is_deterministic(
        self, layout: tuple, write_package: Callable[..., Path]
    ) -> None:
        project, vendor_src = layout
        write_package(project, ["z.example/z", "a.example/a", "m.example/m"])
        for name in ("z.example/z", "a.example/a", "m.example/m"):
            write_package(vendor_src / name, [], package="p")

        scanner = _scanner(vendor_src)
        first = scanner.sorted_dependencies(".", project)
        second = scanner.sorted_dependencies(".", project)

        assert first == second == ["a.example/a", "m.example/m", "z.example/z"]

    def test_defaults_to_current_directory(
        self,
        layout: tuple,
        write_package: Callable[..., Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        project, vendor_src = layout
        write_package(project, ["ext.example/lib"])
        write_package(vendor_src / "ext.example/lib", [], package="lib")
        monkeypatch.chdir(project)

        assert _scanner(vendor_src).scan() == {"ext.example/lib"}

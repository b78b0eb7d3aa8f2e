from __future__ import annotations

import pytest

from gomkeeper.models import Dependency, Symbol, render_lock, render_manifest


@pytest.mark.unit
class TestDependency:
    """Tests for the Gomfile entry model."""

    def test_defaults(self) -> None:
        dep = Dependency("github.com/mattn/go-sqlite3")

        assert dep.options == {}
        assert dep.line_number == 0
        assert dep.commit is None
        assert dep.groups is None
        assert dep.goos is None

    def test_groups_and_goos_normalize_to_lists(self) -> None:
        dep = Dependency("x.example/y", {"group": "test", "goos": [Symbol("linux"), "darwin"]})

        assert dep.groups == ["test"]
        assert dep.goos == ["linux", "darwin"]

    def test_to_line_renders_options(self) -> None:
        dep = Dependency(
            "github.com/a/b",
            {"group": [Symbol("test"), Symbol("development")], "commit": "abc123", "skipdep": True},
        )

        assert dep.to_line() == (
            "gom 'github.com/a/b', :group => [:test, :development], "
            ":commit => 'abc123', :skipdep => true"
        )
        assert dep.to_line(include_options=False) == "gom 'github.com/a/b'"

    def test_to_lock_line(self) -> None:
        dep = Dependency("github.com/a/b", {"group": "test"})

        assert dep.to_lock_line() == "gom 'github.com/a/b'"

        dep.pin("deadbeef")

        assert dep.commit == "deadbeef"
        assert dep.to_lock_line() == "gom 'github.com/a/b', :commit => 'deadbeef'"

    def test_quotes_in_values(self) -> None:
        dep = Dependency("example.com/x", {"tag": "it's"})

        assert dep.to_line() == "gom 'example.com/x', :tag => \"it's\""

    def test_symbol_equals_plain_string(self) -> None:
        assert Symbol("test") == "test"
        assert repr(Symbol("test")) == "Symbol('test')"


@pytest.mark.unit
class TestRendering:
    def test_render_manifest_keeps_order(self) -> None:
        deps = [Dependency("b.example/b"), Dependency("a.example/a")]

        assert render_manifest(deps) == "gom 'b.example/b'\ngom 'a.example/a'\n"

    def test_render_lock(self) -> None:
        deps = [Dependency("a.example/a", {"commit": "111"}), Dependency("b.example/b")]

        assert render_lock(deps) == "gom 'a.example/a', :commit => '111'\ngom 'b.example/b'\n"

    def test_render_empty(self) -> None:
        assert render_manifest([]) == ""
        assert render_lock([]) == ""

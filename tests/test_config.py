from __future__ import annotations

import os
from pathlib import Path

import pytest

from gomkeeper.config import (
    GomKeeperConfig,
    _parse_section,
    _pyproject_has_section,
    discover_config_file,
    load_config,
)
from gomkeeper.exceptions import ConfigError


@pytest.mark.unit
class TestGomKeeperConfig:
    """Tests for GomKeeperConfig dataclass."""

    def test_defaults(self) -> None:
        config = GomKeeperConfig()

        assert config.vendor_dir == "_vendor"
        assert config.groups == ["development"]
        assert config.goos is None
        assert config.gopath == []
        assert config.source_path is None

    def test_to_log_dict_omits_metadata(self) -> None:
        config = GomKeeperConfig(goos="linux", source_path=Path("/x/gomkeeper.toml"))

        assert config.to_log_dict() == {
            "vendor_dir": "_vendor",
            "groups": ["development"],
            "goos": "linux",
            "gopath": [],
        }

    def test_environment_overrides(self) -> None:
        config = GomKeeperConfig(vendor_dir="deps", groups=["ci"])

        config.apply_environment(
            {
                "GOM_VENDOR_NAME": "vendor",
                "GOOS": "darwin",
                "GOPATH": os.pathsep.join(["/go/one", "", "/go/two"]),
                "GOMKEEPER_GROUPS": "development, test,,",
            }
        )

        assert config.vendor_dir == "vendor"
        assert config.goos == "darwin"
        assert config.gopath == ["/go/one", "/go/two"]
        assert config.groups == ["development", "test"]

    def test_empty_environment_keeps_file_values(self) -> None:
        config = GomKeeperConfig(vendor_dir="deps", goos="linux")

        config.apply_environment({"GOOS": "", "GOM_VENDOR_NAME": ""})

        assert config.vendor_dir == "deps"
        assert config.goos == "linux"

    def test_source_roots_vendor_first(self, tmp_path: Path) -> None:
        config = GomKeeperConfig(gopath=["/go/one", "/go/two"])

        roots = config.source_roots(tmp_path)

        assert roots == [
            (tmp_path / "_vendor").resolve() / "src",
            Path("/go/one/src"),
            Path("/go/two/src"),
        ]


@pytest.mark.unit
class TestDiscovery:
    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text("[gomkeeper]\n")

        assert discover_config_file(path) == path.resolve()

    def test_explicit_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            discover_config_file(tmp_path / "missing.toml")

    def test_gomkeeper_toml_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "gomkeeper.toml").write_text("[gomkeeper]\n")
        (tmp_path / "pyproject.toml").write_text("[tool.gomkeeper]\n")

        assert discover_config_file() == tmp_path / "gomkeeper.toml"

    def test_pyproject_needs_section(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pyproject.toml").write_text("[tool.other]\nx = 1\n")

        assert discover_config_file() is None

    def test_invalid_pyproject_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.gomkeeper\n")

        assert _pyproject_has_section(path) is False


@pytest.mark.unit
class TestLoadConfig:
    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        assert load_config() == GomKeeperConfig()

    def test_gomkeeper_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "gomkeeper.toml"
        path.write_text(
            '[gomkeeper]\nvendor_dir = "deps"\ngroups = ["development", "test"]\n'
            'goos = "linux"\ngopath = "/go"\n'
        )

        config = load_config(path)

        assert config.vendor_dir == "deps"
        assert config.groups == ["development", "test"]
        assert config.goos == "linux"
        assert config.gopath == ["/go"]
        assert config.source_path == path.resolve()

    def test_pyproject_section(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pyproject.toml").write_text('[tool.gomkeeper]\ngroups = "test"\n')

        config = load_config()

        assert config.groups == ["test"]
        assert config.source_path == tmp_path / "pyproject.toml"

    def test_empty_section_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "gomkeeper.toml"
        path.write_text("[other]\nx = 1\n")

        config = load_config(path)

        assert config.vendor_dir == "_vendor"
        assert config.source_path == path.resolve()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "gomkeeper.toml"
        path.write_text("[gomkeeper\n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)


@pytest.mark.unit
class TestParseSection:
    def test_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour, groupz"):
            _parse_section({"groupz": [], "colour": True}, config_path="c.toml")

    @pytest.mark.parametrize("value", ["", 3, None])
    def test_vendor_dir_must_be_non_empty_string(self, value) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({"vendor_dir": value}, config_path="c.toml")

        assert exc_info.value.option == "vendor_dir"

    @pytest.mark.parametrize("value", [1, ["ok", 2], {"a": "b"}])
    def test_groups_must_be_strings(self, value) -> None:
        with pytest.raises(ConfigError, match="groups must be a string or a list of strings"):
            _parse_section({"groups": value}, config_path="c.toml")

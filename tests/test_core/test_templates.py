from __future__ import annotations

from pathlib import Path

import pytest

from gomkeeper.constants import TRAVIS_YML_CONTENT
from gomkeeper.core.templates import write_travis_yml
from gomkeeper.exceptions import AlreadyExistsError


@pytest.mark.unit
class TestWriteTravisYml:
    def test_writes_stock_content(self, tmp_path: Path) -> None:
        target = write_travis_yml(tmp_path)

        assert target == tmp_path / ".travis.yml"
        assert target.read_text() == TRAVIS_YML_CONTENT
        assert "gom install" in target.read_text()

    def test_defaults_to_current_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        write_travis_yml()

        assert (tmp_path / ".travis.yml").is_file()

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        (tmp_path / ".travis.yml").write_text("language: python\n")

        with pytest.raises(AlreadyExistsError, match="already exists"):
            write_travis_yml(tmp_path)

        assert (tmp_path / ".travis.yml").read_text() == "language: python\n"

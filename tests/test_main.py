from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from gomkeeper.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for the ``python -m gomkeeper`` entry point."""

    @pytest.mark.parametrize("exit_code", [0, 1, 130], ids=["success", "error", "interrupted"])
    def test_returns_cli_exit_code(self, exit_code: int) -> None:
        cli_module = MagicMock()
        cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict(sys.modules, {"gomkeeper.cli": cli_module}):
            assert main() == exit_code

        cli_module.main.assert_called_once_with()

    def test_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        with patch.dict(sys.modules, {"gomkeeper.cli": None}):
            result = main()

        assert result == 1
        err = capsys.readouterr().err
        assert "gomkeeper version:" in err
        assert "ImportError:" in err


@pytest.mark.unit
class TestPrintStartupError:
    def test_reports_versions(self, capsys: pytest.CaptureFixture) -> None:
        with patch.dict(sys.modules, {"gomkeeper.__version__": MagicMock(__version__="9.9.9")}):
            _print_startup_error(ImportError("No module named 'click'"))

        err = capsys.readouterr().err
        assert "gomkeeper version: 9.9.9" in err
        assert f"Python version: {sys.version}" in err
        assert err.endswith("ImportError: No module named 'click'\n")

    def test_unknown_version(self, capsys: pytest.CaptureFixture) -> None:
        with patch.dict(sys.modules, {"gomkeeper.__version__": None}):
            _print_startup_error(ImportError("x"))

        assert "gomkeeper version: <unknown>" in capsys.readouterr().err

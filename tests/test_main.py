from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from requirekit.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for main() entry point function."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["success", "error", "interrupted"],
    )
    def test_main_returns_cli_exit_code(self, exit_code: int) -> None:
        """Test main returns exit code from cli_main when import succeeds."""
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"requirekit.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_main_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """Test main returns 1 when cli module import fails."""
        # A None entry in sys.modules makes the import raise ImportError
        with patch.dict("sys.modules", {"requirekit.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "ImportError:" in captured.err
        assert captured.out == ""


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error helper function."""

    def test_print_startup_error_with_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test _print_startup_error prints version when available."""
        mock_version_module = MagicMock(__version__="1.2.3")

        with patch.dict(sys.modules, {"requirekit.__version__": mock_version_module}):
            _print_startup_error(ImportError("Test error message"))

        captured = capsys.readouterr()
        assert "requirekit version: 1.2.3" in captured.err
        assert "ImportError: Test error message" in captured.err

    def test_print_startup_error_version_import_fails(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test _print_startup_error handles version import failure gracefully."""
        with patch.dict(sys.modules, {"requirekit.__version__": None}):
            _print_startup_error(ImportError("Test error message"))

        captured = capsys.readouterr()
        assert "requirekit version: <unknown>" in captured.err
        assert "ImportError: Test error message" in captured.err

    def test_print_startup_error_includes_blank_line(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test _print_startup_error separates the error with a blank line."""
        _print_startup_error(ImportError("Test error"))

        lines = capsys.readouterr().err.split("\n")
        assert "" in lines
        assert any(line.startswith("Python version") for line in lines)

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest
from rich.console import Console

from portkeeper.utils.console import (
    PORTKEEPER_THEME,
    _get_console,
    _get_err_console,
    _should_use_color,
    colorize_update_type,
    confirm,
    get_raw_console,
    print_error,
    print_line,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that affect console behavior."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("CI", raising=False)


# ==============================================================================
# Console lifecycle
# ==============================================================================


@pytest.mark.unit
class TestThemeConfiguration:
    """Tests for the console theme."""

    @pytest.mark.parametrize(
        "style_name", ["success", "error", "warning", "info", "dim", "highlight"]
    )
    def test_theme_has_required_styles(self, style_name: str) -> None:
        assert style_name in PORTKEEPER_THEME.styles


@pytest.mark.unit
class TestShouldUseColor:
    """Tests for _should_use_color."""

    def test_no_color_env_disables_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        assert _should_use_color() is False

    def test_ci_env_disables_color(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CI", "true")
        assert _should_use_color() is False

    def test_tty_enables_color(self, clean_env: None) -> None:
        with patch.object(sys.stdout, "isatty", return_value=True):
            assert _should_use_color() is True

    def test_isatty_error_disables_color(self, clean_env: None) -> None:
        with patch.object(sys.stdout, "isatty", side_effect=OSError("closed")):
            assert _should_use_color() is False


@pytest.mark.unit
class TestConsoleSingletons:
    """Tests for the stdout and stderr console singletons."""

    def test_singleton_returns_same_instance(self) -> None:
        assert _get_console() is _get_console()
        assert _get_err_console() is _get_err_console()

    def test_stdout_and_stderr_consoles_differ(self) -> None:
        assert _get_console() is not _get_err_console()
        assert _get_err_console().stderr is True

    def test_reconfigure_clears_instances(self) -> None:
        first = _get_console()
        reconfigure_console()
        assert _get_console() is not first

    def test_get_raw_console_is_stdout_console(self) -> None:
        assert get_raw_console() is _get_console()


# ==============================================================================
# Message helpers
# ==============================================================================


@pytest.mark.unit
class TestStatusMessages:
    """Tests for print_success, print_error and print_warning."""

    def test_success_goes_to_stdout(self, capsys: pytest.CaptureFixture) -> None:
        print_success("Installed nginx-1.26.1")

        captured = capsys.readouterr()
        assert "[OK] Installed nginx-1.26.1" in captured.out
        assert captured.err == ""

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture) -> None:
        print_error("Package foo not found in the index.")

        captured = capsys.readouterr()
        assert "[ERROR] Package foo not found in the index." in captured.err
        assert captured.out == ""

    def test_warning_goes_to_stderr(self, capsys: pytest.CaptureFixture) -> None:
        print_warning("No packages installed.")

        assert "[WARNING] No packages installed." in capsys.readouterr().err

    def test_markup_is_not_interpreted(self, capsys: pytest.CaptureFixture) -> None:
        """Brackets in package names and messages are printed verbatim."""
        print_error("[bold]pkg[/bold]")

        assert "[bold]pkg[/bold]" in capsys.readouterr().err

    def test_custom_prefix(self, capsys: pytest.CaptureFixture) -> None:
        print_success("Done", prefix="*")

        assert "* Done" in capsys.readouterr().out


@pytest.mark.unit
class TestPrintLine:
    """Tests for print_line."""

    def test_prints_exact_text(self, capsys: pytest.CaptureFixture) -> None:
        print_line("nginx             1.24.0  <  1.26.1")

        assert capsys.readouterr().out == "nginx             1.24.0  <  1.26.1\n"

    def test_long_lines_are_not_wrapped(self, capsys: pytest.CaptureFixture) -> None:
        text = "x" * 200
        print_line(text)

        assert capsys.readouterr().out == text + "\n"

    def test_tabs_and_brackets_survive(self, capsys: pytest.CaptureFixture) -> None:
        print_line("a[1]\tb")

        assert "a[1]" in capsys.readouterr().out

    def test_empty_line(self, capsys: pytest.CaptureFixture) -> None:
        print_line()

        assert capsys.readouterr().out == "\n"


@pytest.mark.unit
class TestPrintTable:
    """Tests for print_table."""

    def test_prints_rows_and_title(self, capsys: pytest.CaptureFixture) -> None:
        print_table(
            [{"Package": "nginx", "Installed": "1.24.0"}],
            title="Updates",
        )

        out = capsys.readouterr().out
        assert "Updates" in out
        assert "nginx" in out
        assert "1.24.0" in out

    def test_empty_data_prints_nothing(self, capsys: pytest.CaptureFixture) -> None:
        print_table([])

        assert capsys.readouterr().out == ""

    def test_custom_headers_select_columns(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        print_table(
            [{"Package": "nginx", "Hidden": "secret"}],
            headers=["Package"],
        )

        out = capsys.readouterr().out
        assert "nginx" in out
        assert "secret" not in out

    def test_missing_values_render_empty(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_table([{"A": "1"}, {"B": "2"}], headers=["A", "B"])

        table = mock_print.call_args[0][0]
        assert table.row_count == 2


# ==============================================================================
# Interaction
# ==============================================================================


@pytest.mark.unit
class TestConfirm:
    """Tests for confirm."""

    @pytest.mark.parametrize(
        "answer,default,expected",
        [
            ("y", False, True),
            ("YES", False, True),
            ("n", True, False),
            ("no", True, False),
            ("", True, True),
            ("", False, False),
            ("maybe", False, False),
        ],
    )
    def test_answers(self, answer: str, default: bool, expected: bool) -> None:
        with patch("builtins.input", return_value=answer):
            assert confirm("Delete all?", default=default) is expected

    @pytest.mark.parametrize("error", [EOFError, KeyboardInterrupt])
    def test_interrupted_input_declines(self, error: type) -> None:
        with patch("builtins.input", side_effect=error):
            assert confirm("Delete all?", default=True) is False

    def test_prompt_shows_default(self, capsys: pytest.CaptureFixture) -> None:
        with patch("builtins.input", return_value="y"):
            confirm("Delete all?", default=False)

        assert "Delete all? [y/N]:" in capsys.readouterr().out


@pytest.mark.unit
class TestColorizeUpdateType:
    """Tests for colorize_update_type."""

    @pytest.mark.parametrize(
        "update_type,color",
        [
            ("major", "red"),
            ("minor", "yellow"),
            ("patch", "green"),
            ("revision", "cyan"),
            ("rebuild", "magenta"),
        ],
    )
    def test_known_types(self, update_type: str, color: str) -> None:
        assert colorize_update_type(update_type) == f"[{color}]{update_type}[/{color}]"

    def test_unknown_type_unchanged(self) -> None:
        assert colorize_update_type("same") == "same"

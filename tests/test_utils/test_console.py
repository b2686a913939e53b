from __future__ import annotations

import sys
from typing import Generator
from unittest.mock import patch

import pytest
from rich.console import Console

from pinkeeper.utils.console import (
    MUTED,
    PINKEEPER_THEME,
    _get_console,
    _should_use_color,
    colorize_update_type,
    print_error,
    print_status,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


@pytest.fixture(autouse=True)
def reset_console() -> Generator[None, None, None]:
    """Give every test a fresh console singleton."""
    reconfigure_console()
    yield
    reconfigure_console()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("CI", raising=False)


@pytest.mark.unit
class TestShouldUseColor:
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")

        assert _should_use_color() is False

    def test_ci_env(self, clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CI", "true")

        assert _should_use_color() is False

    def test_tty(self, clean_env: None) -> None:
        with patch.object(sys.stdout, "isatty", return_value=True):
            assert _should_use_color() is True

    def test_not_a_tty(self, clean_env: None) -> None:
        with patch.object(sys.stdout, "isatty", return_value=False):
            assert _should_use_color() is False


@pytest.mark.unit
class TestConsoleSingleton:
    def test_same_instance(self) -> None:
        assert _get_console() is _get_console()

    def test_reconfigure_builds_new_console(self) -> None:
        first = _get_console()
        reconfigure_console()

        assert _get_console() is not first
        assert isinstance(_get_console(), Console)

    def test_muted_style_is_themed(self) -> None:
        assert MUTED in PINKEEPER_THEME.styles


@pytest.mark.unit
class TestMessages:
    def test_status_is_printed_verbatim(self, capsys: pytest.CaptureFixture) -> None:
        print_status('Updating "uvicorn[standard]" from 0.20.0 to 0.20.1')

        assert 'Updating "uvicorn[standard]" from 0.20.0 to 0.20.1' in capsys.readouterr().out

    def test_status_accepts_style_hint(self) -> None:
        with patch("pinkeeper.utils.console._get_console") as get_console:
            print_status("No newer patch versions found", style=MUTED)

        get_console.return_value.print.assert_called_once_with(
            "No newer patch versions found", style=MUTED, markup=False
        )

    @pytest.mark.parametrize(
        "func,prefix",
        [
            (print_success, "[OK]"),
            (print_error, "[ERROR]"),
            (print_warning, "[WARNING]"),
        ],
    )
    def test_prefixed_messages(self, func, prefix: str, capsys) -> None:
        func("Pinned 2 package(s)")

        assert f"{prefix} Pinned 2 package(s)" in capsys.readouterr().out

    def test_custom_prefix(self, capsys: pytest.CaptureFixture) -> None:
        print_error("boom", prefix="!!")

        assert "!! boom" in capsys.readouterr().out


@pytest.mark.unit
class TestPrintTable:
    def test_renders_rows_and_title(self, capsys: pytest.CaptureFixture) -> None:
        print_table(
            [{"Package": "flask", "Pinned": "3.0.0"}],
            title="New Pins",
        )

        out = capsys.readouterr().out
        assert "New Pins" in out
        assert "flask" in out
        assert "3.0.0" in out

    def test_explicit_header_order(self, capsys: pytest.CaptureFixture) -> None:
        print_table(
            [{"Package": "flask", "Pinned": "3.0.0"}],
            headers=["Pinned", "Package"],
        )

        out = capsys.readouterr().out
        assert out.index("Pinned") < out.index("Package")

    def test_empty_data_prints_nothing(self, capsys: pytest.CaptureFixture) -> None:
        print_table([], title="New Pins")

        assert capsys.readouterr().out == ""


@pytest.mark.unit
class TestColorizeUpdateType:
    @pytest.mark.parametrize(
        "update_type,color",
        [("major", "red"), ("minor", "yellow"), ("patch", "green"), ("new", "cyan")],
    )
    def test_known_types(self, update_type: str, color: str) -> None:
        assert colorize_update_type(update_type) == f"[{color}]{update_type}[/{color}]"

    def test_unknown_type_unchanged(self) -> None:
        assert colorize_update_type("same") == "same"

"""Unit tests for the command-line registry backend.

``subprocess.run`` is patched throughout; no command is ever executed.
"""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from pinkeeper.core.registry import CommandRegistry
from pinkeeper.exceptions import RegistryError

RUN = "pinkeeper.core.registry.subprocess.run"


def _completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


@pytest.mark.unit
class TestConstruction:
    def test_defaults_to_pip_index(self) -> None:
        registry = CommandRegistry()

        assert registry.query_command == "pip index versions {name}"
        assert registry.supports_batch is False

    def test_query_command_needs_placeholder(self) -> None:
        with pytest.raises(RegistryError, match="must contain"):
            CommandRegistry("pip index versions")

    def test_batch_command_needs_placeholder(self) -> None:
        with pytest.raises(RegistryError, match="Batch query command"):
            CommandRegistry(batch_query_command="gem query -ra")

    def test_batch_support(self) -> None:
        registry = CommandRegistry(batch_query_command="gem query -ra {names}")

        assert registry.supports_batch is True


@pytest.mark.unit
class TestQuery:
    def test_substitutes_name(self) -> None:
        with patch(RUN, return_value=_completed("flask (3.0.0)\n")) as mock_run:
            output = CommandRegistry(timeout=5).query("flask")

        assert output == "flask (3.0.0)\n"
        argv = mock_run.call_args.args[0]
        assert argv == ["pip", "index", "versions", "flask"]
        assert mock_run.call_args.kwargs["timeout"] == 5
        assert mock_run.call_args.kwargs["check"] is False

    def test_placeholder_inside_token(self) -> None:
        registry = CommandRegistry("curl https://pypi.org/simple/{name}/")

        with patch(RUN, return_value=_completed("")) as mock_run:
            registry.query("rich")

        assert mock_run.call_args.args[0] == ["curl", "https://pypi.org/simple/rich/"]

    def test_non_zero_exit_returns_empty(self) -> None:
        failed = _completed("partial", returncode=1, stderr="ERROR: nothing")

        with patch(RUN, return_value=failed):
            assert CommandRegistry().query("nothing-here") == ""

    def test_missing_executable_returns_empty(self) -> None:
        with patch(RUN, side_effect=FileNotFoundError("pip")):
            assert CommandRegistry().query("flask") == ""

    def test_timeout_returns_empty(self) -> None:
        with patch(RUN, side_effect=subprocess.TimeoutExpired("pip", 1)):
            assert CommandRegistry(timeout=1).query("flask") == ""

    def test_os_error_returns_empty(self) -> None:
        with patch(RUN, side_effect=PermissionError("denied")):
            assert CommandRegistry().query("flask") == ""

    def test_none_stdout(self) -> None:
        with patch(RUN, return_value=_completed(None)):
            assert CommandRegistry().query("flask") == ""


@pytest.mark.unit
class TestQueryMany:
    def test_standalone_placeholder_expands_to_arguments(self) -> None:
        registry = CommandRegistry(batch_query_command="gem query -ra {names}")

        with patch(RUN, return_value=_completed("rack (3.0.8)\n")) as mock_run:
            output = registry.query_many(["rails", "rack"])

        assert output == "rack (3.0.8)\n"
        assert mock_run.call_args.args[0] == ["gem", "query", "-ra", "rails", "rack"]
        assert mock_run.call_count == 1

    def test_embedded_placeholder_joins_names(self) -> None:
        registry = CommandRegistry(batch_query_command="lookup --packages={names}")

        with patch(RUN, return_value=_completed("")) as mock_run:
            registry.query_many(["a", "b"])

        assert mock_run.call_args.args[0] == ["lookup", "--packages=a b"]

    def test_without_batch_command(self) -> None:
        with pytest.raises(RegistryError, match="batch"):
            CommandRegistry().query_many(["flask"])

    def test_failure_returns_empty(self) -> None:
        registry = CommandRegistry(batch_query_command="gem query -ra {names}")

        with patch(RUN, return_value=_completed("", returncode=2)):
            assert registry.query_many(["rails"]) == ""

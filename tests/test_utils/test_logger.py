from __future__ import annotations

import io
import logging
from typing import Generator
from unittest.mock import patch

import pytest

from pinkeeper.utils.logger import (
    ColoredFormatter,
    ROOT_LOGGER_NAME,
    get_logger,
    setup_logging,
)


@pytest.fixture
def clean_logger_state() -> Generator[None, None, None]:
    """Reset the pinkeeper logger before and after each test."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


def _record(level: int = logging.INFO, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("pinkeeper.test", level, __file__, 1, msg, None, None)


@pytest.mark.unit
class TestColoredFormatter:
    def test_plain_when_disabled(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        assert formatter.format(_record()) == "INFO: hello"

    def test_colors_level_name_on_tty(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            output = formatter.format(_record(logging.WARNING))

        assert output == "\033[33mWARNING\033[0m: hello"

    def test_record_is_restored(self) -> None:
        formatter = ColoredFormatter("%(levelname)s")
        record = _record(logging.ERROR)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            formatter.format(record)

        assert record.levelname == "ERROR"

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")

        assert ColoredFormatter._should_use_color() is False


@pytest.mark.unit
class TestSetupLogging:
    def test_writes_to_stream(self, clean_logger_state: None) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("registry").info("Running registry query: pip index versions flask")

        assert "INFO: Running registry query" in stream.getvalue()

    def test_level_filters_messages(self, clean_logger_state: None) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.WARNING, stream=stream)

        get_logger("pinner").info("flask is not in the lock file; skipping")

        assert stream.getvalue() == ""

    def test_verbose_format_names_logger(self, clean_logger_state: None) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.DEBUG, verbose=True, stream=stream)

        get_logger("version_cache").debug("Found 3 version(s) for flask")

        assert " - pinkeeper.version_cache - DEBUG - Found 3" in stream.getvalue()

    def test_repeated_setup_replaces_handler(self, clean_logger_state: None) -> None:
        setup_logging(stream=io.StringIO())
        setup_logging(stream=io.StringIO())

        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1


@pytest.mark.unit
class TestGetLogger:
    @pytest.mark.parametrize(
        "name,expected",
        [
            (None, "pinkeeper"),
            ("pinkeeper", "pinkeeper"),
            ("registry", "pinkeeper.registry"),
            ("pinkeeper.core.pinner", "pinkeeper.core.pinner"),
        ],
    )
    def test_namespacing(self, name, expected: str) -> None:
        assert get_logger(name).name == expected

"""Tests for core logging module."""

import logging
import sys
from io import StringIO

import pytest

from .lib import LOG_FORMAT, get_logger, resolve_level, setup_logging


class TestGetLogger:
    """Tests for logger naming."""

    @pytest.mark.unit
    def test_default_name(self) -> None:
        assert get_logger().name == "irtree"

    @pytest.mark.unit
    def test_short_name_is_nested(self) -> None:
        """Names outside the namespace are placed under irtree."""
        logger = get_logger("cli")
        assert logger.name == "irtree.cli"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_module_name_kept(self) -> None:
        assert get_logger("irtree.mutation.lib").name == "irtree.mutation.lib"
        assert get_logger("irtree") is get_logger()


class TestResolveLevel:
    """Tests for level name handling."""

    @pytest.mark.unit
    def test_numbers_pass_through(self) -> None:
        assert resolve_level(logging.WARNING) == logging.WARNING

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (" error ", logging.ERROR)],
    )
    def test_names(self, name, expected) -> None:
        assert resolve_level(name) == expected

    @pytest.mark.unit
    def test_unknown_name_is_info(self) -> None:
        assert resolve_level("chatty") == logging.INFO


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture
    def basic_config_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        return calls

    @pytest.mark.unit
    def test_level_name_and_stream(self, basic_config_calls) -> None:
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        assert basic_config_calls == [
            {"level": logging.DEBUG, "format": LOG_FORMAT, "stream": stream, "force": False}
        ]

    @pytest.mark.unit
    def test_default_stream_is_current_stderr(self, basic_config_calls, monkeypatch) -> None:
        """The stream is looked up at call time, not at import time."""
        replacement = StringIO()
        monkeypatch.setattr(sys, "stderr", replacement)
        setup_logging()
        assert basic_config_calls[0]["stream"] is replacement
        assert basic_config_calls[0]["level"] == logging.INFO

    @pytest.mark.unit
    def test_force(self, basic_config_calls) -> None:
        setup_logging(logging.ERROR, force=True)
        assert basic_config_calls[0]["force"] is True

    @pytest.mark.unit
    def test_format_fields(self) -> None:
        for field in ("asctime", "name", "levelname", "message"):
            assert f"%({field})s" in LOG_FORMAT

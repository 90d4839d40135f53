"""Tests for logging setup."""

import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from prdocumentator.config import LogFormat, LoggingConfig, LogLevel
from prdocumentator.utils import configure_logging, mask_token


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest set it up."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_text_format(self):
        """Plain text uses a stream handler at the configured level."""
        configure_logging(LoggingConfig(level=LogLevel.WARNING))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert type(root.handlers[0]) is logging.StreamHandler

    def test_rich_format(self):
        """The rich format installs a RichHandler on the given console."""
        console = Console(file=io.StringIO())
        configure_logging(LoggingConfig(format=LogFormat.RICH), console=console)

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler, RichHandler)
        assert handler.console is console

    def test_http_loggers_quieted(self):
        """httpx request lines are hidden below WARNING."""
        configure_logging(LoggingConfig(level=LogLevel.DEBUG))
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("prdocumentator").level == logging.DEBUG


class TestMaskToken:
    """Tests for mask_token."""

    def test_mask(self):
        """Only the first eight characters survive."""
        assert mask_token("0123456789abcdef") == "01234567..."

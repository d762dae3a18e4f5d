import logging

import pytest
from pythonjsonlogger import jsonlogger

from case_browser.logging_config import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_is_the_default(restore_root_logger, monkeypatch):
    monkeypatch.delenv("CASE_BROWSER_LOG_FORMAT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    configure_logging()

    root = restore_root_logger
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.INFO


def test_env_selects_plain_format_and_level(restore_root_logger, monkeypatch):
    monkeypatch.setenv("CASE_BROWSER_LOG_FORMAT", "plain")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    configure_logging()

    root = restore_root_logger
    assert not isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.DEBUG


def test_arguments_override_env(restore_root_logger, monkeypatch):
    monkeypatch.setenv("CASE_BROWSER_LOG_FORMAT", "plain")

    configure_logging(level=logging.WARNING, force_format="json")

    root = restore_root_logger
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.WARNING

from __future__ import annotations

import logging
import sys

import pytest

from barony_checkpoint.logging_config import LOG_LEVEL_ENV, configure_logging


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)


def test_single_stdout_handler(root_logger, monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    configure_logging()
    configure_logging()

    assert len(root_logger.handlers) == 1
    assert root_logger.handlers[0].stream is sys.stdout
    assert root_logger.level == logging.INFO


def test_env_overrides_level(root_logger, monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    configure_logging(logging.WARNING)
    assert root_logger.level == logging.DEBUG


def test_unknown_env_level_keeps_default(root_logger, monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "basicConfig")
    configure_logging(logging.WARNING)
    assert root_logger.level == logging.WARNING

"""
Unit tests for the logging setup.

Run with: pytest backend/tests/test_logger.py -v
"""

import logging

import pytest

import config
from sitegen.logger import NOISY_LOGGERS, get_logger


@pytest.fixture(autouse=True)
def restore_levels(monkeypatch):
    yield
    monkeypatch.setattr(config, "DEBUG_MODE", False)
    get_logger()


def test_sdk_loggers_quiet_by_default(monkeypatch):
    monkeypatch.setattr(config, "DEBUG_MODE", False)
    logger = get_logger("sitegen.example")
    assert logger.level == logging.INFO
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_debug_mode_lets_sdk_loggers_through(monkeypatch):
    monkeypatch.setattr(config, "DEBUG_MODE", True)
    logger = get_logger("sitegen.example")
    assert logger.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG

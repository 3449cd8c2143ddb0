"""
Tests for log setup.
"""

import logging
import sys

import pytest

from release_audit.utils.logging import setup_logging


@pytest.fixture
def captured(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    aiohttp_logger = logging.getLogger("aiohttp")
    monkeypatch.setattr(aiohttp_logger, "level", aiohttp_logger.level)
    return calls


def test_logs_go_to_stderr(captured, monkeypatch):
    monkeypatch.delenv("AUDIT_LOG_LEVEL", raising=False)
    setup_logging()
    [handler] = captured["handlers"]
    assert handler.stream is sys.stderr
    assert captured["level"] == logging.WARNING


def test_level_from_environment(captured, monkeypatch):
    monkeypatch.setenv("AUDIT_LOG_LEVEL", "debug")
    setup_logging()
    assert captured["level"] == logging.DEBUG
    assert logging.getLogger("aiohttp").level == logging.WARNING


def test_unknown_level_falls_back_to_warning(captured):
    setup_logging("chatty")
    assert captured["level"] == logging.WARNING

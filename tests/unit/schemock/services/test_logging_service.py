# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/services/test_logging_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for LoggingService.
"""

# Standard
import io
import logging

# Third-Party
import orjson
import pytest

# First-Party
from schemock.services.logging_service import LoggingService


@pytest.fixture
def service():
    svc = LoggingService()
    yield svc
    svc.shutdown()
    logging.getLogger("schemock").setLevel(logging.NOTSET)


def test_get_logger_returns_named_logger(service):
    assert service.get_logger("schemock.services.x") is logging.getLogger("schemock.services.x")


def test_text_format(service):
    stream = io.StringIO()
    service.initialize("INFO", "text", stream=stream)
    service.get_logger("schemock.test").info("hello")
    assert "[INFO] schemock.test: hello" in stream.getvalue()


def test_json_format(service):
    stream = io.StringIO()
    service.initialize("DEBUG", "json", stream=stream)
    service.get_logger("schemock.test").debug("details %s", 42)
    entry = orjson.loads(stream.getvalue().splitlines()[-1])
    assert entry["level"] == "DEBUG"
    assert entry["logger"] == "schemock.test"
    assert entry["message"] == "details 42"


def test_json_format_includes_exception(service):
    stream = io.StringIO()
    service.initialize("INFO", "json", stream=stream)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        service.get_logger("schemock.test").exception("failed")
    entry = orjson.loads(stream.getvalue().splitlines()[-1])
    assert "RuntimeError: boom" in entry["exc_info"]


def test_reinitialize_does_not_duplicate(service):
    first, second = io.StringIO(), io.StringIO()
    service.initialize("INFO", "text", stream=first)
    service.initialize("INFO", "text", stream=second)
    service.get_logger("schemock.test").info("once")
    assert first.getvalue() == ""
    assert second.getvalue().count("once") == 1


def test_level_filters(service):
    stream = io.StringIO()
    service.initialize("warning", "text", stream=stream)
    logger = service.get_logger("schemock.test")
    logger.info("hidden")
    logger.warning("shown")
    assert "hidden" not in stream.getvalue()
    assert "shown" in stream.getvalue()
    service.set_level("info")
    logger.info("now visible")
    assert "now visible" in stream.getvalue()


def test_shutdown_detaches_only_own_handler(service):
    foreign = logging.NullHandler()
    root = logging.getLogger("schemock")
    root.addHandler(foreign)
    try:
        service.initialize("INFO", "text", stream=io.StringIO())
        service.shutdown()
        assert root.handlers == [foreign]
    finally:
        root.removeHandler(foreign)

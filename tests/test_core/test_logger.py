# tests/test_core/test_logger.py

import inspect
import logging

import pytest
from loguru import logger

from app.core import logger as log_setup


@pytest.fixture()
def captured():
    """Collect Loguru messages emitted while the test runs."""
    messages = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    yield messages
    logger.remove(sink_id)


def _warn_from_app_module() -> int:
    logging.getLogger("app.services.sample").warning("movie %s rejected", "Repo Man")
    return inspect.currentframe().f_lineno - 1


def test_stdlib_record_keeps_its_call_site(captured):
    line = _warn_from_app_module()

    assert len(captured) == 1
    record = captured[0].record
    assert record["message"] == "movie Repo Man rejected"
    assert record["level"].name == "WARNING"
    assert record["name"] == "app.services.sample"
    assert record["function"] == "_warn_from_app_module"
    assert record["line"] == line


def test_stdlib_exception_info_is_forwarded(captured):
    try:
        raise RuntimeError("connection already closed")
    except RuntimeError:
        logging.getLogger("app.api").exception("Rollback failed")

    record = captured[0].record
    assert record["exception"] is not None
    assert record["exception"].type is RuntimeError
    assert record["function"] == "test_stdlib_exception_info_is_forwarded"


def test_app_and_framework_loggers_are_bridged():
    for name in log_setup.BRIDGED_LOGGERS:
        handlers = logging.getLogger(name).handlers
        assert any(isinstance(h, log_setup.InterceptHandler) for h in handlers)
        assert logging.getLogger(name).propagate is False
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

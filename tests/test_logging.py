import io
import logging

import pytest
import structlog

from src.rifugio.logging import bind_check_context, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


def test_json_logging_writes_to_given_stream(restore_logging):
    stream = io.StringIO()

    setup_logging(json_output=True, log_level="info", stream=stream)

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    assert structlog.contextvars.merge_contextvars in processors
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert [h.stream for h in root.handlers] == [stream]


def test_console_logging_by_default(restore_logging):
    setup_logging(stream=io.StringIO())

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    assert logging.getLogger().level == logging.WARNING


def test_bind_check_context_replaces_previous_run():
    structlog.contextvars.bind_contextvars(url="https://old.test", cell=4)

    bind_check_context(url="https://new.test", start_day=1, end_day=2, min_beds=2)

    assert structlog.contextvars.get_contextvars() == {
        "url": "https://new.test",
        "start_day": 1,
        "end_day": 2,
        "min_beds": 2,
    }

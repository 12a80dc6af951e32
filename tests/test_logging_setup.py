import io
import logging

import pytest

from booking_decoder import logging_setup
from booking_decoder.logging_setup import bind, configure_logging, get_logger


def test_get_logger_installs_null_handler():
    get_logger("booking_decoder.test")
    handlers = logging.getLogger("booking_decoder").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_configure_logging_once():
    first, second = io.StringIO(), io.StringIO()
    configure_logging("DEBUG", fmt="%(name)s %(message)s", stream=first)
    configure_logging("ERROR", stream=second)

    get_logger("booking_decoder.test").debug("identity:collision digest=abc counter=1")

    assert first.getvalue() == "booking_decoder.test identity:collision digest=abc counter=1\n"
    assert second.getvalue() == ""
    assert logging_setup._CONFIGURED is True


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("BOOKING_DECODER_LOG_LEVEL", "warning")
    stream = io.StringIO()
    configure_logging(stream=stream, fmt="%(message)s")
    log = get_logger("booking_decoder.test")
    log.info("hidden")
    log.warning("shown")
    assert stream.getvalue() == "shown\n"


def test_configure_logging_returns_package_logger():
    logger = configure_logging("INFO", stream=io.StringIO())
    assert logger is logging.getLogger("booking_decoder")
    assert logger.propagate is False
    assert not any(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_unknown_level_rejected():
    with pytest.raises(ValueError, match="unknown log level"):
        configure_logging("chatty", stream=io.StringIO())
    assert logging_setup._CONFIGURED is False


def test_bound_context_is_appended():
    stream = io.StringIO()
    configure_logging("INFO", fmt="%(name)s %(message)s", stream=stream)
    log = bind(get_logger("booking_decoder.pipeline"), family="leading-sepa")
    log.warning("batch:record_skipped position=%d", 3)
    assert stream.getvalue() == (
        "booking_decoder.pipeline batch:record_skipped position=3 family=leading-sepa\n"
    )

"""
Tests for logging utilities.
"""

import logging

from shared.logging import (
    LOGGER_ROOT,
    RunContextFilter,
    StructuredFormatter,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)


def make_record(msg="hello", **extra):
    record = logging.LogRecord("concept_video.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_get_logger_namespaced():
    assert get_logger("renderer").name == f"{LOGGER_ROOT}.renderer"
    assert get_logger(f"{LOGGER_ROOT}.muxer").name == f"{LOGGER_ROOT}.muxer"


def test_run_id_filter():
    """Records carry the run ID of the current context."""
    set_run_id("abc12345")
    try:
        record = make_record()
        RunContextFilter().filter(record)
        assert record.run_id == "abc12345"
        assert get_run_id() == "abc12345"
    finally:
        set_run_id(None)

    record = make_record()
    RunContextFilter().filter(record)
    assert record.run_id == "-"


def test_formatter_appends_extras():
    formatter = StructuredFormatter("%(message)s")
    record = make_record("Pipeline finished", success=True, chapters=2)

    assert formatter.format(record) == "Pipeline finished | chapters=2 success=True"


def test_formatter_without_extras():
    formatter = StructuredFormatter("%(message)s")
    assert formatter.format(make_record("plain")) == "plain"


def test_configure_logging_idempotent():
    configure_logging("DEBUG")
    configure_logging("WARNING")

    root = logging.getLogger(LOGGER_ROOT)
    assert len(root.handlers) == 1
    assert root.level == logging.WARNING
    assert root.propagate is False

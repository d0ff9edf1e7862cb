"""
Tests for settings and logging setup.
"""

import logging

import pytest
from pythonjsonlogger.json import JsonFormatter

from contract_engine.config import DEFAULT_OPS_LOG, Settings
from contract_engine.logging_config import TraceIDFilter, get_logger, setup_logging


def test_settings_defaults():
    s = Settings.from_env({})
    assert s == Settings(log_level="INFO", log_format="json", ops_log=DEFAULT_OPS_LOG, store_path=None)


def test_settings_from_env_and_fallbacks():
    s = Settings.from_env({
        "CONTRACT_LOG_LEVEL": "debug",
        "CONTRACT_LOG_FORMAT": "TEXT",
        "CONTRACT_OPS_LOG": "/tmp/x/ops.log",
        "CONTRACT_STORE_PATH": "/tmp/x/state.log",
    })
    assert (s.log_level, s.log_format, s.ops_log, s.store_path) == ("DEBUG", "text", "/tmp/x/ops.log", "/tmp/x/state.log")

    bad = Settings.from_env({"CONTRACT_LOG_LEVEL": "loud", "CONTRACT_LOG_FORMAT": "xml"})
    assert (bad.log_level, bad.log_format) == ("INFO", "json")


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_json(restore_root_logger):
    setup_logging(Settings(log_level="WARNING", log_format="json"))
    root = restore_root_logger

    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)


def test_setup_logging_text(restore_root_logger):
    setup_logging(Settings(log_level="DEBUG", log_format="text"))
    root = restore_root_logger

    assert root.level == logging.DEBUG
    assert not isinstance(root.handlers[0].formatter, JsonFormatter)


def test_get_logger_carries_trace_id():
    adapter = get_logger("contract_engine.test", trace_id="abc")
    assert adapter.extra == {"trace_id": "abc"}
    assert get_logger("contract_engine.test").extra == {"trace_id": "N/A"}


def test_trace_id_filter_fills_missing():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert TraceIDFilter().filter(record)
    assert record.trace_id == "N/A"

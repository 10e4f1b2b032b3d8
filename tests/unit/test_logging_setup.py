"""Unit tests for recurcal.core.logging_setup."""

import logging

import pytest

from recurcal.core.logging_setup import QUIET_LOGGERS, configure_logging, get_logging_status

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def restore_logger_levels():
    names = ["", "recurcal", *QUIET_LOGGERS]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_explicit_level_applies_to_recurcal():
    assert configure_logging("WARNING") == logging.WARNING
    assert logging.getLogger("recurcal").level == logging.WARNING


def test_default_level_is_info():
    assert configure_logging() == logging.INFO


def test_debug_mode_wins():
    assert configure_logging("ERROR", debug_mode=True) == logging.DEBUG


@pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
def test_debug_env_var(monkeypatch, value):
    monkeypatch.setenv("RECURCAL_DEBUG", value)
    assert configure_logging("ERROR") == logging.DEBUG


def test_log_level_env_var_used_when_no_argument(monkeypatch):
    monkeypatch.setenv("RECURCAL_LOG_LEVEL", "error")
    assert configure_logging() == logging.ERROR


def test_unknown_level_name_falls_back_to_info():
    assert configure_logging("VERBOSE") == logging.INFO


def test_third_party_loggers_stay_quiet():
    configure_logging("DEBUG")
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_repeated_calls_do_not_stack_handlers():
    configure_logging("INFO")
    count = len(logging.getLogger().handlers)
    configure_logging("DEBUG")
    assert len(logging.getLogger().handlers) == count


def test_get_logging_status_reports_level_names():
    configure_logging("WARNING")
    status = get_logging_status()
    assert status["recurcal"] == "WARNING"
    assert status["root"] == "WARNING"
    assert status["yaml"] == "WARNING"

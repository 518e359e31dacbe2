"""Unit tests for log.py"""

import json
import logging

import pytest
import structlog

from mdarticle.core.archive import Archive
from mdarticle.log import configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """Restore root and package logger state after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    pkg = logging.getLogger("mdarticle")
    pkg_level = pkg.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    pkg.setLevel(pkg_level)
    structlog.reset_defaults()


def test_verbose_enables_debug():
    configure_logging(verbose=True)
    assert logging.getLogger("mdarticle").level == logging.DEBUG
    assert logging.getLogger().level == logging.WARNING


def test_non_verbose_sets_warning():
    configure_logging(verbose=False)
    assert logging.getLogger("mdarticle").level == logging.WARNING


def test_json_mode_output(capfd):
    configure_logging(verbose=True, log_json=True)
    structlog.get_logger("mdarticle.test").warning("json test", answer=42)
    parsed = json.loads(capfd.readouterr().err.strip())
    assert parsed["event"] == "json test"
    assert parsed["answer"] == 42
    assert parsed["level"] == "warning"
    assert parsed["logger"] == "mdarticle.test"
    assert "timestamp" in parsed


def test_debug_hidden_unless_verbose(capfd):
    configure_logging(verbose=False, log_json=True)
    structlog.get_logger("mdarticle.test").debug("quiet")
    assert capfd.readouterr().err == ""


def test_collision_warning_is_logged(capfd):
    """Overwriting an archive entry emits a structured warning."""
    configure_logging(log_json=True)
    archive = Archive()
    archive.add("a.md", "1")
    archive.add("a.md", "2")
    parsed = json.loads(capfd.readouterr().err.strip())
    assert parsed["event"] == "archive entry overwritten"
    assert parsed["name"] == "a.md"
    assert parsed["logger"] == "mdarticle.core.archive"


def test_third_party_debug_is_suppressed(capfd):
    configure_logging(verbose=True, log_json=True)
    logging.getLogger("sqlalchemy.engine").debug("sql noise")
    assert capfd.readouterr().err == ""


def test_repeated_calls_do_not_stack_handlers():
    configure_logging(verbose=True)
    configure_logging(verbose=True, log_json=True)
    assert len(logging.getLogger().handlers) == 1

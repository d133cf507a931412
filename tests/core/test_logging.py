"""Tests for pawjournal.core.utils.logging."""

import os

from loguru import logger

from pawjournal.core.config import Config
from pawjournal.core.exceptions import PersistenceError
from pawjournal.core.utils.logging import resolve_log_file, setup_logging, setup_logging_from_config
from pawjournal.events.store import guarded_write


def _failing_write():
    raise PersistenceError("disk full")


def _read(path):
    with open(path) as f:
        return f.read()


def test_file_sink_keeps_engine_records_only(tmp_dir):
    log_file = os.path.join(tmp_dir, "engine.log")
    setup_logging(level="INFO", log_file=log_file)
    guarded_write(_failing_write, "evt-1", "save event")
    logger.info("host application message")
    logger.remove()

    content = _read(log_file)
    assert "Failed to save event evt-1: disk full" in content
    assert "pawjournal.events.store" in content
    assert "host application message" not in content


def test_setup_from_config(tmp_dir):
    config = Config(env_prefix="", data_dir=tmp_dir)
    config.set("logging.level", "error")
    config.set("logging.file", "pawjournal.log")
    config.ensure_directories()

    setup_logging_from_config(config)
    guarded_write(_failing_write, "med-1", "save medication")
    logger.remove()

    assert "save medication med-1" in _read(os.path.join(tmp_dir, "logs", "pawjournal.log"))


class TestResolveLogFile:
    def test_unset(self):
        assert resolve_log_file(Config(env_prefix="")) is None

    def test_relative_to_log_dir(self, tmp_dir):
        config = Config(env_prefix="", data_dir=tmp_dir)
        config.set("logging.file", "engine.log")
        assert resolve_log_file(config) == os.path.join(tmp_dir, "logs", "engine.log")

    def test_absolute(self, tmp_dir):
        config = Config(env_prefix="")
        path = os.path.join(tmp_dir, "elsewhere.log")
        config.set("logging.file", path)
        assert resolve_log_file(config) == path

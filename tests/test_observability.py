"""
Tests for observability — logging setup and level resolution.
"""

import logging
from pathlib import Path

import pytest

from src.core.observability.logging_config import (
    resolve_level,
    setup_from_env,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_default(self):
        assert resolve_level() == "WARNING"

    def test_flag_precedence(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True, env_level="DEBUG") == "ERROR"

    def test_env_level(self):
        assert resolve_level(env_level="INFO") == "INFO"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging(level="INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back(self):
        setup_logging(level="LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_repeat_setup_replaces_handlers(self):
        setup_logging(level="INFO")
        setup_logging(level="INFO")
        assert len(logging.getLogger().handlers) == 1

    def test_file_handler(self, tmp_path: Path):
        log_file = tmp_path / "qbit.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG

        logging.getLogger("src.test").debug("planned apt-get install jq")
        for handler in root.handlers:
            handler.flush()
        assert "planned apt-get install jq" in log_file.read_text()

    def test_named_loggers_untouched(self):
        named = logging.getLogger("src.core.engine.executor")
        named.setLevel(logging.NOTSET)
        setup_logging(level="DEBUG")
        assert named.level == logging.NOTSET
        assert named.getEffectiveLevel() == logging.DEBUG


class TestSetupFromEnv:
    def test_env_level(self):
        setup_from_env({"QBIT_LOG_LEVEL": "INFO"})
        assert logging.getLogger().level == logging.INFO

    def test_flags_beat_env(self):
        setup_from_env({"QBIT_LOG_LEVEL": "INFO"}, quiet=True)
        assert logging.getLogger().level == logging.ERROR

    def test_log_file_from_env(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        setup_from_env({"QBIT_LOG_FILE": str(log_file), "QBIT_LOG_FILE_LEVEL": "INFO"})
        logging.getLogger("src.test").info("step 1/2")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "step 1/2" in log_file.read_text()

    def test_empty_log_file_ignored(self):
        setup_from_env({"QBIT_LOG_FILE": ""})
        assert len(logging.getLogger().handlers) == 1

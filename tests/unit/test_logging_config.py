"""Unit tests for resiliencysim logging configuration."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import resiliencysim
from resiliencysim.logging_config import LOGGER_NAME, _clear_handlers, _get_level, _get_logger


class TestSilentByDefault:
    def test_import_produces_no_log_output(self, capfd):
        """Importing and reloading resiliencysim should not print anything."""
        import importlib

        importlib.reload(resiliencysim)

        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_logger_has_null_handler(self):
        logger = logging.getLogger(LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


class TestEnableConsoleLogging:
    def test_adds_stream_handler(self):
        resiliencysim.enable_console_logging()
        logger = _get_logger()
        assert any(type(h) is logging.StreamHandler for h in logger.handlers)

    def test_sets_level(self):
        resiliencysim.enable_console_logging(level="DEBUG")
        assert _get_logger().level == logging.DEBUG

    def test_outputs_to_stderr(self, capfd):
        resiliencysim.enable_console_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("test message")
        assert "test message" in capfd.readouterr().err

    def test_custom_format(self, capfd):
        resiliencysim.enable_console_logging(level="INFO", format="[CUSTOM] %(message)s")
        logging.getLogger(f"{LOGGER_NAME}.test").info("hello")
        assert "[CUSTOM] hello" in capfd.readouterr().err


class TestEnableFileLogging:
    def test_writes_to_file(self, tmp_path):
        path = tmp_path / "logs" / "trials.log"
        handler = resiliencysim.enable_file_logging(path, level="INFO")

        logging.getLogger(f"{LOGGER_NAME}.test").info("written to disk")
        handler.flush()

        assert isinstance(handler, RotatingFileHandler)
        assert "written to disk" in path.read_text()

    def test_rotation_settings(self, tmp_path):
        handler = resiliencysim.enable_file_logging(tmp_path / "r.log", max_bytes=1000, backup_count=2)
        assert handler.maxBytes == 1000
        assert handler.backupCount == 2


class TestConfigureFromEnv:
    def test_no_env_does_nothing(self, monkeypatch):
        monkeypatch.delenv("RS_LOGGING", raising=False)
        monkeypatch.delenv("RS_LOG_FILE", raising=False)

        assert resiliencysim.configure_from_env() is False
        assert all(isinstance(h, logging.NullHandler) for h in _get_logger().handlers)

    def test_level_enables_console(self, monkeypatch):
        monkeypatch.setenv("RS_LOGGING", "debug")
        monkeypatch.delenv("RS_LOG_FILE", raising=False)

        assert resiliencysim.configure_from_env() is True
        assert _get_logger().level == logging.DEBUG
        assert any(type(h) is logging.StreamHandler for h in _get_logger().handlers)

    def test_file_enables_file_logging(self, monkeypatch, tmp_path):
        monkeypatch.delenv("RS_LOGGING", raising=False)
        monkeypatch.setenv("RS_LOG_FILE", str(tmp_path / "env.log"))

        resiliencysim.configure_from_env()

        assert _get_logger().level == logging.INFO
        assert any(isinstance(h, RotatingFileHandler) for h in _get_logger().handlers)


class TestLevels:
    def test_get_level(self):
        assert _get_level("warning") == logging.WARNING
        assert _get_level(logging.ERROR) == logging.ERROR
        assert _get_level("nonsense") == logging.INFO

    def test_set_level(self):
        resiliencysim.set_level("ERROR")
        assert _get_logger().level == logging.ERROR

    def test_set_module_level(self):
        resiliencysim.set_module_level("core.simulation", "DEBUG")
        assert logging.getLogger(f"{LOGGER_NAME}.core.simulation").level == logging.DEBUG
        logging.getLogger(f"{LOGGER_NAME}.core.simulation").setLevel(logging.NOTSET)

    def test_disable_logging(self, capfd):
        resiliencysim.enable_console_logging()
        resiliencysim.disable_logging()

        logging.getLogger(f"{LOGGER_NAME}.test").critical("silenced")

        assert "silenced" not in capfd.readouterr().err
        assert _get_logger().level > logging.CRITICAL

    def test_clear_handlers_keeps_null_handler(self):
        resiliencysim.enable_console_logging()
        _clear_handlers()
        assert all(isinstance(h, logging.NullHandler) for h in _get_logger().handlers)

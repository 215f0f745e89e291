"""Unit tests for the structured logging helpers."""

import logging

import pytest

from precision_lens.core.logging_config import configure_logging
from precision_lens.core.logging_utils import StructuredLogger, ensure_structured_logger, get_module_logger


class TestStructuredLogger:
    """Component prefixes and namespacing."""

    def test_module_logger_namespace_and_prefix(self, caplog):
        logger = get_module_logger("CameraSession")
        assert logger.name == "precision_lens.CameraSession"
        assert logger.component == "CameraSession"

        with caplog.at_level(logging.INFO, logger="precision_lens"):
            logger.info("Camera active: %s", "environment")

        assert caplog.records[-1].getMessage() == "[CameraSession] Camera active: environment"

    def test_dotted_name_uses_last_segment(self):
        assert get_module_logger("precision_lens.app.master").component == "master"

    def test_bad_format_args_do_not_raise(self, caplog):
        logger = get_module_logger("Gestures")
        with caplog.at_level(logging.INFO, logger="precision_lens"):
            logger.info("no placeholders", 1, 2)
        assert "args=1 2" in caplog.records[-1].getMessage()

    def test_ensure_structured_logger(self):
        plain = logging.getLogger("precision_lens.Router")
        wrapped = ensure_structured_logger(plain)
        assert isinstance(wrapped, StructuredLogger)
        assert ensure_structured_logger(wrapped) is wrapped
        assert ensure_structured_logger(None, fallback_name="asyncio").name == "precision_lens.asyncio"


class TestConfigureLogging:
    """Root handler setup."""

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    @staticmethod
    def _remove(handlers):
        root = logging.getLogger()
        for handler in handlers:
            root.removeHandler(handler)
            handler.close()

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "lens.log"
        handlers = configure_logging("debug", console=False, log_file=log_file)
        try:
            get_module_logger("Status").info("Camera stopped.")
            for handler in handlers:
                handler.flush()
            assert "[Status] Camera stopped." in log_file.read_text(encoding="utf-8")
        finally:
            self._remove(handlers)

    def test_reconfigure_replaces_only_own_handlers(self, tmp_path):
        root = logging.getLogger()
        foreign = logging.NullHandler()
        root.addHandler(foreign)
        try:
            first = configure_logging("info", console=True, log_file=None)
            second = configure_logging("warning", console=False, log_file=tmp_path / "lens.log")

            assert foreign in root.handlers
            assert not any(h in root.handlers for h in first)
            assert all(h in root.handlers for h in second)
            assert root.level == logging.WARNING
            self._remove(second)
        finally:
            root.removeHandler(foreign)

    def test_aiohttp_access_log_is_quieted(self):
        handlers = configure_logging("debug", console=False, log_file=None)
        try:
            assert handlers == []
            assert logging.getLogger("aiohttp.access").level == logging.WARNING
        finally:
            self._remove(handlers)

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("chatty", console=False, log_file=None)

"""Tests for logger setup."""

import logging

import pytest

from docflow.core.config import Settings
from docflow.core.logging import configure_logging, setup_logger


@pytest.fixture
def logger_name(request):
    """Unique logger name per test; handlers removed afterwards."""
    name = f"docflow-test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestSetupLogger:

    def test_console_only(self, logger_name):
        logger = setup_logger(logger_name, level="debug")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_file_logging(self, logger_name, tmp_path):
        logger = setup_logger(
            logger_name, log_dir=str(tmp_path / "logs"), file_logging=True, console_logging=False
        )
        logger.info("document 1 submitted")
        for handler in logger.handlers:
            handler.flush()

        log_file = tmp_path / "logs" / f"{logger_name}.log"
        assert log_file.exists()
        assert "document 1 submitted" in log_file.read_text()

    def test_no_duplicate_handlers(self, logger_name):
        setup_logger(logger_name)
        logger = setup_logger(logger_name)
        assert len(logger.handlers) == 1

    def test_invalid_level(self, logger_name):
        with pytest.raises(ValueError):
            setup_logger(logger_name, level="LOUD")


class TestConfigureLogging:

    def test_applies_settings(self, tmp_path):
        settings = Settings(_env_file=None, log_level="WARNING", log_dir=str(tmp_path), log_to_file=False)

        logger = configure_logging(settings)

        assert logger.name == "docflow"
        assert logger.level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

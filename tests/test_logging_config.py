"""Tests for job_runner.logging_config module."""

import logging
import sys

from job_runner.logging_config import configure_logging
from job_runner.models import RunnerSettings


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_configures_root_logger(self):
        """Test level and stdout handler are installed."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            logger = configure_logging(RunnerSettings(log_level="DEBUG", log_format="%(message)s"))

            assert logger.name == "job_runner"
            assert root.level == logging.DEBUG
            stream_handlers = [h for h in root.handlers if isinstance(h, logging.StreamHandler)]
            assert any(h.stream is sys.stdout for h in stream_handlers)
            assert any(h.formatter._fmt == "%(message)s" for h in stream_handlers)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_defaults(self):
        """Test configure_logging without settings uses INFO."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging()
            assert root.level == logging.INFO
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

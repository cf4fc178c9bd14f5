"""
Logging setup for job-runner.

Library modules only create loggers; applications call configure_logging()
once at startup to route records (and job status lines) to stdout.
"""

import logging
import sys
from typing import Optional

from job_runner.models import RunnerSettings


def configure_logging(settings: Optional[RunnerSettings] = None) -> logging.Logger:
    """
    Configure root logging from runner settings.

    Args:
        settings: Runner settings (defaults are used if None)

    Returns:
        The package logger
    """
    settings = settings or RunnerSettings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )

    return logging.getLogger("job_runner")

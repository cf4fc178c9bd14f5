"""
Job Runner - in-process sequential task orchestrator.

Register tasks (a function plus bound arguments) into a job; the job runs
them one at a time, dispatches lifecycle hooks around each step,
aggregates results and errors, and supports cooperative stop.
"""

__version__ = "1.0.0"

from job_runner.errors import JobExecutionError

from job_runner.models import (
    TaskStatus,
    JobStatus,
    TaskParams,
    JobParams,
    RunnerSettings,
    TaskSnapshot,
    JobReport,
)

from job_runner.hooks import TaskHook, JobHook, HookTable
from job_runner.queue import Queue
from job_runner.task import Task
from job_runner.job import Job, QueueEntry
from job_runner.config import ConfigManager, DEFAULT_CONFIG_FILE
from job_runner.logging_config import configure_logging

__all__ = [
    # Errors
    "JobExecutionError",
    # Models
    "TaskStatus",
    "JobStatus",
    "TaskParams",
    "JobParams",
    "RunnerSettings",
    "TaskSnapshot",
    "JobReport",
    # Hooks
    "TaskHook",
    "JobHook",
    "HookTable",
    # Components
    "Queue",
    "Task",
    "Job",
    "QueueEntry",
    # Config
    "ConfigManager",
    "DEFAULT_CONFIG_FILE",
    "configure_logging",
]

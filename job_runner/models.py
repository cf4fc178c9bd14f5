"""
Data models for the job runner.

Defines Pydantic models for task/job parameters, runner settings,
and read-only snapshots of execution state.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Task execution status."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class JobStatus(str, Enum):
    """Job execution status."""
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"
    STOPPED = "stopped"


class TaskParams(BaseModel):
    """Construction parameters for a Task."""

    name: Optional[str] = Field(default=None, description="Task name used in logs")
    silent: bool = Field(default=False, description="Swallow failures instead of re-raising")


class JobParams(BaseModel):
    """
    Construction parameters for a Job.

    ``logger`` is a string sink receiving the job's status lines.
    """

    name: Optional[str] = Field(default=None, description="Job name used in status lines")
    queue_name: Optional[str] = Field(default=None, description="Name of the job's task queue")
    exec_async: bool = Field(default=False, description="Accepted for compatibility; tasks always run sequentially")
    keep_runs: bool = Field(default=True, description="Keep executed queue entries in history")
    logger: Optional[Callable[[str], None]] = Field(default=None, description="Status line sink")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class RunnerSettings(BaseModel):
    """Global runner settings (log output and job defaults)."""

    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(
        default="%(asctime)s [%(levelname)s] %(message)s",
        description="logging format string"
    )
    keep_runs: bool = Field(default=True, description="Default history retention for job queues")
    exec_async: bool = Field(default=False, description="Default exec_async flag for jobs")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class TaskSnapshot(BaseModel):
    """Read-only view of a task's execution state."""

    name: Optional[str] = None
    status: TaskStatus
    silent: bool = False
    is_running: bool = False

    # Timestamps (epoch milliseconds)
    started_at: Optional[int] = None
    ended_at: Optional[int] = None
    stopped_at: Optional[int] = None
    duration_ms: Optional[int] = None

    errors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)


class JobReport(BaseModel):
    """
    Summary of a job run.

    Mirrors the final status line in structured form.
    """

    name: Optional[str] = None
    queue_name: Optional[str] = None
    status: JobStatus

    # Timestamps (epoch milliseconds)
    started_at: int = 0
    ended_at: int = 0
    stopped_at: Optional[int] = None
    duration_seconds: float = 0.0

    # Queue stats
    total_tasks: int = 0
    executed_tasks: int = 0
    pending_tasks: int = 0

    # Outcome
    result_count: int = 0
    error_count: int = 0
    errors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)

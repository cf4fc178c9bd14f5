"""Test fixtures for job-runner tests."""

import os

import pytest

from job_runner.config import ENV_OVERRIDES
from job_runner.job import Job
from job_runner.task import Task

from helpers import fails, returns


class StatusLog:
    """Collects job status lines passed to the logger sink."""

    def __init__(self):
        self.lines = []

    def __call__(self, line: str) -> None:
        self.lines.append(line)


@pytest.fixture
def status_log():
    """Capture job status lines."""
    return StatusLog()


@pytest.fixture
def job(status_log):
    """Create an empty job writing status lines to ``status_log``."""
    return Job(name="test-job", queue_name="test-queue", logger=status_log)


@pytest.fixture
def ok_task():
    """A task returning 1."""
    return Task(returns(1), name="ok")


@pytest.fixture
def failing_task():
    """A non-silent task that always fails."""
    return Task(fails(), name="failing")


@pytest.fixture
def silent_failing_task():
    """A silent task that always fails."""
    return Task(fails("quiet"), name="silent", silent=True)


@pytest.fixture
def clean_env():
    """Remove JOB_RUNNER_* variables before and after the test."""
    for name in ENV_OVERRIDES:
        os.environ.pop(name, None)
    yield
    for name in ENV_OVERRIDES:
        os.environ.pop(name, None)

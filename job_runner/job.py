"""
Job: sequential task orchestrator.

Drains a Queue of (task, args) entries one at a time, dispatching job
hooks around each task:

    before_start(job) -> before_all()
      for each entry: before_each(task) -> task.run(*args) -> [on_error(error)] -> after_each(task)
    [on_success(results)] -> after_all(job) -> on_finish(errors, results)

Task failures never abort the job; they are collected and the loop
continues. stop() is cooperative and only observed between tasks.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from job_runner.errors import JobExecutionError
from job_runner.hooks import HookName, HookTable, JobHook, TaskHook, call_hook
from job_runner.models import JobParams, JobReport, JobStatus, TaskStatus
from job_runner.queue import Queue
from job_runner.task import Task, now_ms


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueueEntry:
    """A task and the positional arguments bound to it at registration."""

    task: Task
    args: Tuple[Any, ...] = ()


class Job:
    """
    Runs registered tasks strictly in order and aggregates their outcomes.

    Results are collected in dequeue order; every failing task contributes
    exactly one wrapped error, whether it is silent or not.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        queue_name: Optional[str] = None,
        exec_async: bool = False,
        logger: Optional[Callable[[str], None]] = None,
        keep_runs: bool = True,
    ):
        """
        Initialize a job.

        Args:
            name: Job name used in status lines
            queue_name: Name of the underlying task queue
            exec_async: Accepted for compatibility; tasks never run concurrently
            logger: Sink for status lines (defaults to this module's logger)
            keep_runs: Keep executed entries in the queue history
        """
        params = JobParams(
            name=name,
            queue_name=queue_name,
            exec_async=exec_async,
            logger=logger,
            keep_runs=keep_runs,
        )
        self.name = params.name
        self.queue_name = params.queue_name
        self.exec_async = params.exec_async
        self._log: Callable[[str], None] = params.logger or _status_logger

        self._queue: Queue[QueueEntry] = Queue(params.queue_name, keep_runs=params.keep_runs)
        self._hooks = HookTable(JobHook)

        self._errors: List[JobExecutionError] = []
        self._results: List[Any] = []
        self._started_at = 0
        self._ended_at = 0
        self._stopped_at: Optional[int] = None
        self._run_stopped_at: Optional[int] = None
        self._is_running = False
        self._should_stop = False
        self._stopped = False
        self._dequeued = 0
        self._active_task: Optional[Task] = None

    @classmethod
    def from_params(cls, params: JobParams) -> "Job":
        """Create a job from validated JobParams."""
        return cls(
            name=params.name,
            queue_name=params.queue_name,
            exec_async=params.exec_async,
            logger=params.logger,
            keep_runs=params.keep_runs,
        )

    # Registration

    def add_task(self, task: Task, *args: Any) -> "Job":
        """
        Register a task with the arguments it will be run with.

        Attaches an on_error hook to the task that records its failures
        into this job. A handler already attached to the task's on_error
        keeps being called after the job has recorded the error.

        Args:
            task: Task to run
            *args: Positional arguments passed unchanged to task.run()

        Returns:
            self, for chaining
        """
        if not isinstance(task, Task):
            raise JobExecutionError(f"Param 'task' is not a Task: {task!r}")

        previous = task.hook(TaskHook.ON_ERROR)

        async def forward_error(error: JobExecutionError) -> None:
            # Only the job currently running this task records the error
            if self._active_task is task:
                self._record_error(error)
            if previous is not None:
                await call_hook(previous, error)

        task.add_hook(TaskHook.ON_ERROR, forward_error)
        self._queue.push(QueueEntry(task=task, args=tuple(args)))
        return self

    def add_hook(self, hook: HookName, fn: Callable) -> "Job":
        """
        Attach a job hook, replacing any previous one of the same name.

        Raises:
            JobExecutionError: If the hook name is unknown or ``fn`` is not callable
        """
        self._hooks.set(hook, fn)
        return self

    # Execution

    async def run(self) -> None:
        """
        Drain the queue, running each task in order.

        Raises:
            JobExecutionError: If the job is already running
        """
        if self._is_running:
            raise JobExecutionError(f"Job '{self.name}' is already running")

        self._log(f"[{self.name}] job starting...")
        self._is_running = True
        self._stopped = False
        self._run_stopped_at = None
        self._started_at = now_ms()

        try:
            await self._hooks.fire(JobHook.BEFORE_START, self)
            await self._hooks.fire(JobHook.BEFORE_ALL)

            await self._drain()

            if not self._errors:
                await self._hooks.fire(JobHook.ON_SUCCESS, list(self._results))
            await self._hooks.fire(JobHook.AFTER_ALL, self)
            await self._hooks.fire(JobHook.ON_FINISH, list(self._errors), list(self._results))
        finally:
            self._ended_at = now_ms()
            self._is_running = False
            self._active_task = None

        if self._run_stopped_at:
            elapsed = (self._run_stopped_at - self._started_at) / 1000
            stopped_at = datetime.fromtimestamp(self._run_stopped_at / 1000).isoformat()
            self._log(
                f"[{self.name}] stopped within {elapsed}s at {stopped_at} "
                f"with {len(self._errors)} errors."
            )
        else:
            elapsed = (self._ended_at - self._started_at) / 1000
            self._log(f"[{self.name}] finished job within {elapsed}s")

    async def _drain(self) -> None:
        """Run queued entries until the queue is empty or a stop is observed."""
        while not self._queue.is_empty:
            entry = self._queue.next()

            self._dequeued += 1
            task = entry.task
            errors_before = len(self._errors)
            raised = False

            try:
                raised = await self._run_entry(entry, errors_before)
                for error in self._errors[errors_before:]:
                    await self._hooks.fire(JobHook.ON_ERROR, error)
            finally:
                await self._hooks.fire(JobHook.AFTER_EACH, task)

            if self._should_stop:
                if not raised:
                    self._mark_stopped()
                self._should_stop = False
                self._stopped = True
                logger.debug(f"[{self.name}] stopped with {self._queue.length} entries pending")
                break

    async def _run_entry(self, entry: QueueEntry, errors_before: int) -> bool:
        """
        Run one entry and record its outcome.

        Returns:
            True if task.run() raised
        """
        task = entry.task
        self._active_task = task
        try:
            await self._hooks.fire(JobHook.BEFORE_EACH, task)
            result = await task.run(*entry.args)
        except Exception as e:
            self._mark_stopped()
            # The forwarding hook may already have recorded this failure
            if len(self._errors) == errors_before:
                self._record_error(JobExecutionError.wrap(e))
            return True
        finally:
            self._active_task = None

        if task.status is TaskStatus.SUCCEEDED:
            self._results.append(result)
        elif task.status is TaskStatus.FAILED and len(self._errors) == errors_before:
            # Silent failure whose forwarding hook was replaced after add_task()
            self._record_error(task.errors[-1])
        return False

    def _mark_stopped(self) -> None:
        """Record a stop for this run; earlier stop times are overwritten, never cleared."""
        self._run_stopped_at = now_ms()
        self._stopped_at = self._run_stopped_at

    def _record_error(self, error: JobExecutionError) -> bool:
        """Append ``error`` unless this exact error is already recorded."""
        if any(recorded is error for recorded in self._errors):
            return False
        self._errors.append(error)
        logger.debug(f"[{self.name}] recorded error: {error.message}")
        return True

    def stop(self) -> None:
        """Stop after the task currently running; never interrupts it."""
        self._should_stop = True
        self._log("Process queue set to stop after the current job.")

    def run_sync(self) -> None:
        """
        Run the job synchronously.

        Runs run() on a fresh event loop, for callers outside async code.
        """
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self.run())
        finally:
            asyncio.set_event_loop(None)
            loop.close()

    # State

    def report(self) -> JobReport:
        """Get a structured summary of the job's state."""
        if self._ended_at:
            duration = (self._ended_at - self._started_at) / 1000
        elif self._started_at:
            duration = (now_ms() - self._started_at) / 1000
        else:
            duration = 0.0

        return JobReport(
            name=self.name,
            queue_name=self.queue_name,
            status=self.status,
            started_at=self._started_at,
            ended_at=self._ended_at,
            stopped_at=self._stopped_at,
            duration_seconds=duration,
            total_tasks=self._dequeued + self._queue.length,
            executed_tasks=self._dequeued,
            pending_tasks=self._queue.length,
            result_count=len(self._results),
            error_count=len(self._errors),
            errors=[error.message for error in self._errors],
        )

    @property
    def status(self) -> JobStatus:
        if self._is_running:
            return JobStatus.RUNNING
        if self._stopped:
            return JobStatus.STOPPED
        if self._ended_at:
            return JobStatus.FINISHED
        return JobStatus.IDLE

    @property
    def errors(self) -> List[JobExecutionError]:
        return list(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    @property
    def results(self) -> List[Any]:
        return list(self._results)

    @property
    def started_at(self) -> int:
        return self._started_at

    @property
    def ended_at(self) -> int:
        return self._ended_at

    @property
    def stopped_at(self) -> Optional[int]:
        return self._stopped_at

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def stop_requested(self) -> bool:
        return self._should_stop

    @property
    def pending(self) -> int:
        """Number of entries not yet dequeued."""
        return self._queue.length

    @property
    def current(self) -> Optional[QueueEntry]:
        return self._queue.current

    @property
    def executed(self) -> List[QueueEntry]:
        return self._queue.executed

    def __repr__(self) -> str:
        return f"Job(name={self.name!r}, status={self.status.value}, pending={self.pending})"


def _status_logger(message: str) -> None:
    logger.info(message)

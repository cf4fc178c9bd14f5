"""
Task: a single unit of work.

Wraps a sync or async function together with its lifecycle hooks:

    before_start(task) -> fn(*args) -> on_success(result) | on_error(error) -> on_finish()

on_finish always runs, including when the error is re-raised.
"""

import inspect
import logging
import time
from typing import Any, Callable, Generic, List, Optional, TypeVar

from job_runner.errors import JobExecutionError
from job_runner.hooks import HookName, HookTable, TaskHook
from job_runner.models import TaskParams, TaskSnapshot, TaskStatus


logger = logging.getLogger(__name__)

R = TypeVar("R")


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class Task(Generic[R]):
    """
    A function plus lifecycle hooks, producing a result or a wrapped error.

    With ``silent=True`` failures are recorded and passed to on_error
    but not raised to the caller of run(). Exceptions raised by the
    on_error and on_finish handlers of a silent task are logged and
    dropped.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        name: Optional[str] = None,
        silent: bool = False,
    ):
        """
        Initialize a task.

        Args:
            fn: Function (or coroutine function) to execute
            name: Optional task name
            silent: Swallow failures instead of re-raising them

        Raises:
            JobExecutionError: If ``fn`` is not callable
        """
        if fn is None or not callable(fn):
            raise JobExecutionError("Param 'fn' is not a function, cannot be executed.")

        params = TaskParams(name=name, silent=silent)
        self.name = params.name
        self.silent = params.silent
        self.fn = fn

        self._hooks = HookTable(TaskHook)
        self._status = TaskStatus.IDLE
        self._is_running = False
        self._started_at: Optional[int] = None
        self._ended_at: Optional[int] = None
        self._stopped_at: Optional[int] = None
        self._errors: List[JobExecutionError] = []
        self._result: Optional[R] = None

    @classmethod
    def from_params(cls, fn: Callable[..., Any], params: TaskParams) -> "Task":
        return cls(fn, name=params.name, silent=params.silent)

    def add_hook(self, hook: HookName, fn: Callable) -> "Task":
        """
        Attach a lifecycle hook, replacing any previous one of the same name.

        Args:
            hook: before_start, on_success, on_error or on_finish
            fn: Handler (sync or async)

        Returns:
            self, for chaining

        Raises:
            JobExecutionError: If the hook name is unknown or ``fn`` is not callable
        """
        self._hooks.set(hook, fn)
        return self

    def hook(self, hook: HookName) -> Optional[Callable]:
        """Get the handler currently attached to ``hook``."""
        return self._hooks.get(hook)

    async def run(self, *args: Any) -> Optional[R]:
        """
        Execute the wrapped function with ``args``.

        Returns:
            The function's result, or None after a silent failure

        Raises:
            JobExecutionError: If the function or a hook fails and the task is not silent
        """
        label = self.name or getattr(self.fn, "__name__", "task")
        self._result = None
        self._ended_at = None
        self._is_running = True
        self._status = TaskStatus.RUNNING
        self._started_at = now_ms()
        logger.debug(f"[{label}] Task started")

        try:
            await self._hooks.fire(TaskHook.BEFORE_START, self)
            result = self.fn(*args)
            if inspect.isawaitable(result):
                result = await result
            self._result = result
            await self._hooks.fire(TaskHook.ON_SUCCESS, result)
            self._ended_at = now_ms()
            self._status = TaskStatus.SUCCEEDED
            logger.debug(f"[{label}] Task succeeded")
            return result

        except Exception as e:
            error = JobExecutionError.wrap(e)
            self._result = None
            self._errors.append(error)
            self._status = TaskStatus.FAILED
            logger.debug(f"[{label}] Task failed: {error.message}")

            await self._fire_guarded(label, TaskHook.ON_ERROR, error)
            if not self.silent:
                if error is e:
                    raise
                raise error from e
            return None

        finally:
            self._is_running = False
            self._stopped_at = now_ms()
            await self._fire_guarded(label, TaskHook.ON_FINISH)

    async def _fire_guarded(self, label: str, hook: TaskHook, *args: Any) -> None:
        """
        Fire on_error or on_finish, absorbing handler failures of a silent task.

        A silent task logs a failing handler instead of raising, so the
        caller of run() never observes an exception from it.
        """
        if not self.silent:
            await self._hooks.fire(hook, *args)
            return

        try:
            await self._hooks.fire(hook, *args)
        except Exception as e:
            logger.warning(f"[{label}] {hook.value} hook failed: {e}")

    def snapshot(self) -> TaskSnapshot:
        """Get a read-only snapshot of this task's state."""
        return TaskSnapshot(
            name=self.name,
            status=self._status,
            silent=self.silent,
            is_running=self._is_running,
            started_at=self._started_at,
            ended_at=self._ended_at,
            stopped_at=self._stopped_at,
            duration_ms=self.duration_ms,
            errors=[error.message for error in self._errors],
        )

    @property
    def status(self) -> TaskStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def started_at(self) -> Optional[int]:
        return self._started_at

    @property
    def ended_at(self) -> Optional[int]:
        return self._ended_at

    @property
    def stopped_at(self) -> Optional[int]:
        return self._stopped_at

    @property
    def duration_ms(self) -> Optional[int]:
        """Milliseconds between start and stop of the last run."""
        if self._started_at is None or self._stopped_at is None:
            return None
        return self._stopped_at - self._started_at

    @property
    def errors(self) -> List[JobExecutionError]:
        return list(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    @property
    def result(self) -> Optional[R]:
        return self._result

    def __repr__(self) -> str:
        return f"Task(name={self.name!r}, status={self._status.value}, silent={self.silent})"

"""
Lifecycle hook names and dispatch.

Each Task and Job owns a HookTable: one optional handler per event,
replaced on re-registration. Handlers may be plain functions or
coroutine functions; both are awaited to completion before the
caller continues.
"""

import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, Union

from job_runner.errors import JobExecutionError


logger = logging.getLogger(__name__)


class TaskHook(str, Enum):
    """Task lifecycle events."""
    BEFORE_START = "before_start"   # (task)
    ON_SUCCESS = "on_success"       # (result)
    ON_ERROR = "on_error"           # (error) or ()
    ON_FINISH = "on_finish"         # ()


class JobHook(str, Enum):
    """Job lifecycle events."""
    BEFORE_START = "before_start"   # (job)
    BEFORE_ALL = "before_all"       # ()
    BEFORE_EACH = "before_each"     # (task)
    AFTER_EACH = "after_each"       # (task)
    AFTER_ALL = "after_all"         # (job)
    ON_SUCCESS = "on_success"       # (results)
    ON_ERROR = "on_error"           # (error)
    ON_FINISH = "on_finish"         # (errors, results)
    BEFORE_CLOSE = "before_close"   # reserved
    AFTER_CLOSE = "after_close"     # reserved


HookName = Union[str, Enum]


def _takes_positional_args(fn: Callable) -> bool:
    """Check whether ``fn`` accepts at least one positional argument."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures
        return True

    for param in signature.parameters.values():
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False


async def call_hook(fn: Callable, *args: Any) -> Any:
    """
    Call a sync or async callable and await its result if needed.

    A callable that accepts no positional parameters is invoked
    without arguments, so every hook may be written in zero-argument form.

    Args:
        fn: Hook or task function
        *args: Positional arguments for the call

    Returns:
        The (awaited) return value
    """
    if args and not _takes_positional_args(fn):
        args = ()

    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class HookTable:
    """
    Handler slots for one hook enum.

    Registering a handler under an existing name replaces it.
    """

    def __init__(self, hook_type: Type[Enum]):
        """
        Initialize an empty table.

        Args:
            hook_type: TaskHook or JobHook
        """
        self.hook_type = hook_type
        self._handlers: Dict[Enum, Callable] = {}

    def _resolve(self, name: HookName) -> Enum:
        """Map a hook name or enum member to a member of ``hook_type``."""
        if isinstance(name, self.hook_type):
            return name
        try:
            return self.hook_type(getattr(name, "value", name))
        except ValueError:
            valid = ", ".join(member.value for member in self.hook_type)
            raise JobExecutionError(
                f"Unknown hook '{getattr(name, 'value', name)}', expected one of: {valid}"
            )

    def set(self, name: HookName, fn: Callable) -> None:
        """
        Register ``fn`` for ``name``, replacing any previous handler.

        Raises:
            JobExecutionError: If the name is unknown or ``fn`` is not callable
        """
        hook = self._resolve(name)
        if fn is None or not callable(fn):
            raise JobExecutionError(f"Param 'fn' is not a function (hook '{hook.value}')")
        self._handlers[hook] = fn

    def get(self, name: HookName) -> Optional[Callable]:
        return self._handlers.get(self._resolve(name))

    def names(self) -> List[str]:
        return [hook.value for hook in self._handlers]

    def __contains__(self, name: HookName) -> bool:
        try:
            return self._resolve(name) in self._handlers
        except JobExecutionError:
            return False

    async def fire(self, name: HookName, *args: Any) -> None:
        """Await the handler registered for ``name``, if any."""
        handler = self._handlers.get(self._resolve(name))
        if handler is None:
            return
        logger.debug(f"Dispatching {self.hook_type.__name__}.{self._resolve(name).name}")
        await call_hook(handler, *args)

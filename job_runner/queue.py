"""
Ordered FIFO queue with a current cursor and execution history.

Pending elements are drained with next(); the element last returned is
exposed as ``current`` and, when history is kept, superseded elements
move to ``executed`` in dequeue order.
"""

import logging
from collections import deque
from typing import Deque, Generic, List, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Queue(Generic[T]):
    """
    FIFO queue driving a job's task list.

    Rules:
    - push() appends, never reorders pending elements
    - next() is the only operation that dequeues
    - executed only grows, and only when keep_runs is enabled
    """

    def __init__(self, name: Optional[str] = None, keep_runs: bool = True):
        """
        Initialize an empty queue.

        Args:
            name: Optional queue name (used in log output)
            keep_runs: Archive superseded current elements into ``executed``
        """
        self.name = name
        self._keep_runs = keep_runs
        self._pending: Deque[T] = deque()
        self._current: Optional[T] = None
        self._has_current = False
        self._executed: List[T] = []

    def push(self, *items: T) -> None:
        """Append items to the end of the pending sequence."""
        self._pending.extend(items)
        logger.debug(f"[{self.name}] pushed {len(items)} item(s), pending: {len(self._pending)}")

    def next(self) -> Optional[T]:
        """
        Dequeue the next pending element.

        Returns:
            The dequeued element, or None if nothing is pending
            (current and executed are left untouched in that case).
            A pushed None is returned as None too; check is_empty
            before calling when None may be queued.
        """
        if not self._pending:
            return None

        item = self._pending.popleft()

        if self._has_current and self._keep_runs:
            self._executed.append(self._current)

        self._current = item
        self._has_current = True
        return item

    @property
    def current(self) -> Optional[T]:
        return self._current

    @property
    def is_empty(self) -> bool:
        """True when nothing is pending."""
        return not self._pending

    @property
    def length(self) -> int:
        """Number of pending elements."""
        return len(self._pending)

    @property
    def executed(self) -> List[T]:
        return list(self._executed)

    @property
    def list(self) -> List[T]:
        return list(self._pending)

    @property
    def keep_runs(self) -> bool:
        return self._keep_runs

    def __len__(self) -> int:
        return len(self._pending)

    def __repr__(self) -> str:
        return (
            f"Queue(name={self.name!r}, pending={len(self._pending)}, "
            f"executed={len(self._executed)})"
        )

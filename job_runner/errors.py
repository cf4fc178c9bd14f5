"""
Error wrapper shared by tasks and jobs.

Every failure reported by the runner, whether raised by a task function,
a hook, or a misconfigured call, is surfaced as a JobExecutionError.
"""

from typing import Optional, Union


class JobExecutionError(Exception):
    """
    Uniform failure carried through Task and Job.

    Built either from a plain message or from a caught exception,
    in which case the original is kept as ``cause``.
    """

    def __init__(self, error: Union[str, BaseException]):
        """
        Initialize the error.

        Args:
            error: Message string or the exception that was caught
        """
        if isinstance(error, BaseException):
            message = str(error) or type(error).__name__
            cause: Optional[BaseException] = error
        else:
            message = str(error)
            cause = None

        super().__init__(message)
        self._message = message
        self._cause = cause

    @property
    def message(self) -> str:
        return self._message

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    @classmethod
    def wrap(cls, error: Union[str, BaseException]) -> "JobExecutionError":
        """Return ``error`` as-is if already wrapped, otherwise wrap it."""
        if isinstance(error, JobExecutionError):
            return error
        return cls(error)

    def __repr__(self) -> str:
        if self._cause is not None:
            return f"JobExecutionError({self._message!r}, cause={type(self._cause).__name__})"
        return f"JobExecutionError({self._message!r})"

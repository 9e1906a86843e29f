"""
Callback delivery and the result container passed to completions.
"""

import atexit
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .errors import LineSDKError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_pool_lock = threading.Lock()
_pool: Optional[ThreadPoolExecutor] = None


def _shared_pool() -> ThreadPoolExecutor:
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="linesdk-callback")
            atexit.register(_pool.shutdown)
        return _pool


def _log_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Completion callback raised", exc_info=exc)


class CallbackQueue:
    """Where a completion callback is run."""

    def __init__(self, executor: Optional[Executor] = None):
        self._executor = executor

    @classmethod
    def current(cls) -> "CallbackQueue":
        return cls()

    @classmethod
    def asynchronous(cls) -> "CallbackQueue":
        return cls(_shared_pool())

    @classmethod
    def from_executor(cls, executor: Executor) -> "CallbackQueue":
        return cls(executor)

    @property
    def is_current(self) -> bool:
        return self._executor is None

    def execute(self, fn: Callable[[], Any]) -> None:
        if self._executor is None:
            fn()
        else:
            future = self._executor.submit(fn)
            future.add_done_callback(_log_failure)


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[LineSDKError] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LineSDKError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Optional[T]:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value


Completion = Callable[[Result], None]

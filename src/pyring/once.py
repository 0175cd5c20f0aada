"""Compute-once helper for coroutines."""

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncOnce(Generic[T]):
    """Run a coroutine function once and hand its outcome to every caller.

    The first call to `get()` schedules the computation as a task. Callers
    arriving while it is pending await the same task, and callers arriving
    after it finished get the cached result, or the cached exception
    re-raised. A failure is never retried.

    Cancelling a waiter does not cancel the computation, which is shielded so
    the remaining waiters still see its outcome.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        """Initialize with the coroutine function to run."""
        self._factory = factory
        self._task: asyncio.Future[T] | None = None

    @property
    def started(self) -> bool:
        """Return True once the computation has been triggered."""
        return self._task is not None

    @property
    def done(self) -> bool:
        """Return True once the computation has a result or a failure."""
        return self._task is not None and self._task.done()

    async def get(self) -> T:
        """Return the outcome of the computation, starting it if needed."""
        if self._task is None:
            _LOGGER.debug("Starting one-time computation %s", self._factory)
            self._task = asyncio.ensure_future(self._factory())
        return await asyncio.shield(self._task)

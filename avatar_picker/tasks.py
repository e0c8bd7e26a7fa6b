"""
Ways of running work after a handler has returned.

The handler only calls submit(); whether the work runs on FastAPI's
post-response hook or as a loose asyncio task is up to the caller.
"""
import asyncio
import logging
from typing import Any, Callable, Protocol, Set
from fastapi import BackgroundTasks

logger = logging.getLogger(__name__)

class BackgroundTaskRunner(Protocol):
    def submit(self, fn: Callable[..., Any], *args, **kwargs)-> None:
        ...

class FastAPIRunner:
    """
    Defers work until the response has been sent, using the request's
    BackgroundTasks.
    """
    def __init__(self, background_tasks: BackgroundTasks):
        self._background_tasks = background_tasks

    def submit(self, fn, *args, **kwargs):
        self._background_tasks.add_task(fn, *args, **kwargs)

class AsyncioRunner:
    """
    Spawns each submitted coroutine function as a task on the running loop.
    The event loop only keeps weak references to tasks, so the runner
    holds on to them until they finish.
    """
    def __init__(self):
        self._pending: Set[asyncio.Task] = set()

    def submit(self, fn, *args, **kwargs):
        task = asyncio.create_task(fn(*args, **kwargs))
        self._pending.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task):
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Background task failed: %r", task.exception())

    @property
    def pending(self)-> int:
        return len(self._pending)

    async def drain(self):
        """
        Wait for everything submitted so far. Failures have already been
        logged, and are not raised.
        """
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions = True)

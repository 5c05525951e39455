"""Fire-and-forget execution of cache population writes."""

import asyncio
from collections.abc import Coroutine
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class BackgroundWriter:
    """Runs store writes as detached tasks.

    A write never blocks or fails the response it was scheduled for: errors
    are funneled to the log and dropped. Strong references are kept until
    each task finishes so the event loop cannot collect it mid-flight.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, coro: Coroutine[Any, Any, Any], *, description: str = "store write") -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_done(t, description))
        return task

    def _on_done(self, task: asyncio.Task[Any], description: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("background_write_cancelled", description=description)
            return
        error = task.exception()
        if error is not None:
            logger.warning(
                "background_write_failed",
                description=description,
                error=str(error),
                error_type=type(error).__name__,
            )

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for pending writes, cancelling any still running after timeout."""
        if not self._tasks:
            return
        logger.debug("draining_background_writes", count=len(self._tasks))
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

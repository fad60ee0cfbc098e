"""Detached notification work.

Lifecycle operations never wait for their notifications. ``submit`` takes a
coroutine and schedules it as a task on the running event loop, holding a
strong reference until it finishes. Failures are logged on the
``notifications.background`` logger and never reach the caller.

Without a running loop (CLI scripts, synchronous tests) the coroutine is run
to completion inline through ``asyncio.run``; errors are still only logged.
"""

import asyncio

import structlog

logger = structlog.get_logger("notifications.background")


class BackgroundNotifications:
    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, coro, name: str | None = None):
        """Run ``coro`` detached from the caller.

        Returns the scheduled task, or None when the coroutine was run inline.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            try:
                asyncio.run(coro)
            except Exception as exc:
                logger.error("Background notification failed", task=name, error=str(exc), exc_info=True)
            return None

        task = loop.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background notification cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background notification failed",
                task=task.get_name(),
                error=str(exc),
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def drain(self, timeout: float | None = None):
        """Wait for every in-flight task (used at shutdown and in tests)."""
        while self._tasks:
            tasks = list(self._tasks)
            done, pending = await asyncio.wait(tasks, timeout=timeout)
            if pending:
                logger.warning("Background notifications still pending after drain", pending=len(pending))
                return


_background_instance: BackgroundNotifications | None = None


def get_background() -> BackgroundNotifications:
    """Return the process-wide background runner (singleton)."""
    global _background_instance
    if _background_instance is None:
        _background_instance = BackgroundNotifications()
    return _background_instance


def reset_background():
    """Reset the background runner singleton (useful for testing)."""
    global _background_instance
    _background_instance = None

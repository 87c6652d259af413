"""Keyed, cancellable delayed tasks on the running asyncio loop.

schedule(key, delay, fn) replaces any task pending under the same key,
which is all debouncing needs. After close() every timer that still
fires is a no-op.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


class TaskScheduler:
    def __init__(self) -> None:
        self._handles: dict[str, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task] = set()
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def schedule(
        self, key: str, delay: float, callback: Callable[..., Any], *args: Any
    ) -> None:
        """Run callback(*args) after delay seconds, replacing key's pending task.

        Coroutine results are awaited as tracked tasks.
        """
        if not self._alive:
            logger.debug("Scheduler closed, ignoring %s", key)
            return
        self.cancel(key)
        loop = asyncio.get_running_loop()
        self._handles[key] = loop.call_later(
            max(0.0, delay), self._fire, key, callback, args
        )

    def cancel(self, key: str) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def is_pending(self, key: str) -> bool:
        return key in self._handles

    def _fire(self, key: str, callback: Callable[..., Any], args: tuple) -> None:
        self._handles.pop(key, None)
        if not self._alive:
            return
        try:
            result = callback(*args)
        except Exception:
            logger.exception("Scheduled task %s failed", key)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Scheduled coroutine failed", exc_info=exc)

    async def wait_idle(self) -> None:
        """Wait until no timers are pending and no spawned task is running."""
        loop = asyncio.get_running_loop()
        while self._handles or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
                continue
            # Short steps so timers cancelled meanwhile stop the wait early.
            next_due = min(h.when() for h in self._handles.values())
            await asyncio.sleep(min(max(0.0, next_due - loop.time()) + 0.001, POLL_INTERVAL))

    def close(self) -> None:
        self._alive = False
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        for task in list(self._tasks):
            task.cancel()

"""Debounce helper: only the last of several rapid calls actually runs."""
from __future__ import annotations
import asyncio
from typing import Awaitable, Callable, Optional


class Debouncer:
    def __init__(self, delay: float):
        self.delay = delay
        self._task: Optional[asyncio.Task] = None

    def run(self, action: Callable[[], Awaitable[None]]) -> asyncio.Task:
        """Cancel any pending action and schedule ``action`` after the delay.

        Must be called from inside a running event loop.
        """
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._delayed(action))
        return self._task

    async def _delayed(self, action: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        await action()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

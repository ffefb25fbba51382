import asyncio
import inspect
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)

Callback = Callable[[], Awaitable[None] | None]


class Debouncer:
    """One pending delayed call per key.

    Scheduling a key again cancels the call still waiting under that key, so
    only the last call after a quiet period runs.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def schedule(self, key: str, delay: float, callback: Callback) -> asyncio.Task[None]:
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._run(key, delay, callback), name=f"debounce:{key}")
        self._tasks[key] = task
        return task

    async def _run(self, key: str, delay: float, callback: Callback) -> None:
        await asyncio.sleep(delay)
        # Past this point the call counts as started and can no longer be cancelled by a newer schedule
        if self._tasks.get(key) is asyncio.current_task():
            del self._tasks[key]
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("debounced_call_failed", key=key)

    def cancel(self, key: str) -> bool:
        task = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for key in list(self._tasks):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def flush(self) -> None:
        """Wait for every pending call to run."""
        while self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
            self._tasks = {key: task for key, task in self._tasks.items() if not task.done()}

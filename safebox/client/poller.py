import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class Poller:
    """
    Repeats ``fetch`` every ``interval`` seconds and hands each result to
    ``on_result``. The task runs until ``stop()`` is awaited; a failing
    fetch is logged and the next tick still runs.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Any]],
        on_result: Callable[[Any], None],
        interval: float = 30.0,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.fetch = fetch
        self.on_result = on_result
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            try:
                self.on_result(await self.fetch())
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Polling %s failed", getattr(self.fetch, "__name__", self.fetch))
            await asyncio.sleep(self.interval)

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.stop()

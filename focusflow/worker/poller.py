# focusflow/worker/poller.py

import asyncio
from typing import Callable, Optional

from focusflow.core.logger import logger


class ClockPoller:
    """Calls ``on_tick`` every ``interval`` seconds on the running event loop.

    The first tick happens one interval after start. Ticks are skipped while
    ``is_busy()`` is true. A failing tick is logged and the loop goes on.
    ``on_tick`` runs in a worker thread and must do its own locking.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        on_tick: Callable[[], object],
        is_busy: Optional[Callable[[], bool]] = None,
    ):
        self.name = name
        self.interval = interval
        self._on_tick = on_tick
        self._is_busy = is_busy
        self._task: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            self.stop()
        self.ticks = 0
        self._stopped = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(self._stopped), name=f"poller:{self.name}")

    def stop(self) -> None:
        if self._stopped is not None:
            self._stopped.set()
        if self._task is not None:
            self._task.cancel()
        self._task = None
        self._stopped = None

    def tick(self) -> None:
        if self._is_busy is not None and self._is_busy():
            logger.trace(f"[{self.name}] alert open, skipping tick")
            return
        self.ticks += 1
        self._on_tick()

    async def _run(self, stopped: asyncio.Event) -> None:
        logger.info(f"[{self.name}] running; poll={self.interval}s")
        try:
            while not stopped.is_set():
                try:
                    await asyncio.wait_for(stopped.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
                if stopped.is_set():
                    break
                try:
                    # ticks may block on the store; keep them off the loop
                    await asyncio.to_thread(self.tick)
                except Exception as e:
                    logger.exception(f"[{self.name}] tick error: {e}")
        finally:
            logger.info(f"[{self.name}] stopped")

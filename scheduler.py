import time, asyncio, logging
from typing import Awaitable, Callable, Optional

from log_setup import LOGGER_NAME

log = logging.getLogger(LOGGER_NAME)

REFRESH_INTERVAL_SEC = 120


class RefreshTimer:
    """Runs `callback` right away, then every `interval` seconds until stopped.

    The next wait starts only after the previous call returned, so calls never overlap.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], interval: float = REFRESH_INTERVAL_SEC):
        self.callback = callback
        self.interval = interval
        self.task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self):
        if self.running:
            return
        self.task = asyncio.ensure_future(self._loop())
        log.info("Refresh timer started | interval=%ss", self.interval)

    def stop(self):
        if self.running:
            self.task.cancel()
            log.info("Refresh timer stopped.")
        self.task = None

    async def _loop(self):
        while True:
            t0 = time.monotonic()
            try:
                await self.callback()
            except Exception as e:
                log.exception("refresh error: %s", e)
            elapsed = time.monotonic() - t0
            await asyncio.sleep(max(0, self.interval - elapsed))

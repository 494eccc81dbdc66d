# Rev 0.1.1

"""Polling trigger for background refreshes (Rev 0.1.1)
Calls an async callback every `interval` seconds on the running asyncio loop.
Callback errors are logged and the loop keeps going.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Optional

log = logging.getLogger(__name__)


class RealtimePoller:
    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        *,
        interval: float = 30.0,
        immediate: bool = True,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._callback = callback
        self._interval = interval
        self._immediate = immediate
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.stop()
        self._task = asyncio.ensure_future(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def trigger_update(self) -> None:
        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            log.exception("Realtime update failed")

    async def _run(self) -> None:
        if self._immediate:
            await self.trigger_update()
        while True:
            await asyncio.sleep(self._interval)
            await self.trigger_update()

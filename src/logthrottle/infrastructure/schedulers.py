import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

from logthrottle.application.ports import Scheduler

LOG = logging.getLogger(__name__)


@dataclass
class ThreadingScheduler(Scheduler):
    daemon: bool = True
    name_prefix: str = "logthrottle-flush"

    def call_later(
        self, delay_s: float, callback: Callable[..., Any], *args: Any
    ) -> threading.Timer:
        timer = threading.Timer(max(0.0, delay_s), callback, args=args)
        timer.daemon = self.daemon
        timer.name = f"{self.name_prefix}-{id(timer):x}"
        timer.start()
        LOG.debug("scheduled %s in %.3fs", timer.name, delay_s)
        return timer


class AsyncioScheduler(Scheduler):
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _require_loop(self) -> asyncio.AbstractEventLoop:
        # Without an explicit loop, call_later must run inside the running loop.
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def call_later(
        self, delay_s: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        return self._require_loop().call_later(max(0.0, delay_s), callback, *args)

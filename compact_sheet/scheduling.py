"""
Cancellable delayed tasks.

Debounced search passes and delayed re-renders are scheduled through a
`DelayedTasks` owner keyed by filter name or entity id. Scheduling a key
cancels whatever was still pending for it. Callbacks are best-effort UI
polish, so failures are logged and dropped.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Minimal timer interface: run a callback after a delay in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        """Returns a handle with a cancel() method."""
        pass


class AsyncioScheduler(Scheduler):
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class DelayedTasks:
    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._pending: Dict[str, Any] = {}

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        self.cancel(key)
        holder = {}

        def run():
            if self._pending.get(key) is holder.get("handle"):
                del self._pending[key]
            try:
                callback()
            except Exception as e:
                logger.warning(f"Scheduled task '{key}' failed: {e}", exc_info=True)

        handle = self._scheduler.call_later(delay, run)
        holder["handle"] = handle
        self._pending[key] = handle

    def cancel(self, key: str) -> bool:
        handle = self._pending.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug(f"Cancelled pending task '{key}'")
        return True

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        return key in self._pending

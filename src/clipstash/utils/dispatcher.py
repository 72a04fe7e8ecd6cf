"""Single UI-affinity execution context.

Every mutation of history and window state runs on one asyncio loop. Code
running on foreign threads (the hotkey listener) must go through
:meth:`Dispatcher.post`.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Dispatcher:

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.new_event_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue ``callback`` on the loop. Safe from any thread."""
        if self._loop.is_closed():
            logger.debug("Dropping callback posted to a closed dispatcher")
            return
        self._loop.call_soon_threadsafe(self._guarded, callback, args)

    def post_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        """Run ``callback`` after ``delay`` seconds. Call from the loop thread."""
        return self._loop.call_later(delay, self._guarded, callback, args)

    def run_forever(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def run_for(self, seconds: float) -> None:
        """Drive the loop for a bounded time; used by tests and scripts."""
        self._loop.run_until_complete(asyncio.sleep(seconds))

    def stop(self) -> None:
        if not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._loop.stop)

    def close(self) -> None:
        if not self._loop.is_closed():
            self._loop.close()

    @staticmethod
    def _guarded(callback: Callable[..., Any], args: tuple) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception(f"Unhandled error in dispatched callback {callback!r}")

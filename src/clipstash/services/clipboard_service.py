import asyncio
import logging
from typing import Callable, Optional

from clipstash.clipboard import ClipboardBackend
from clipstash.models.entry import Snapshot
from clipstash.utils.dispatcher import Dispatcher

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5


class PollScheduler:
    """Polls the clipboard generation counter on the dispatcher loop.

    A snapshot is read only when the counter moved, and is handed to
    ``on_snapshot`` (normally ``HistoryEngine.observe``). A failing reader
    never stops the timer.
    """

    def __init__(
        self,
        backend: ClipboardBackend,
        on_snapshot: Callable[[Snapshot], None],
        dispatcher: Dispatcher,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self.backend = backend
        self.poll_interval = poll_interval
        self._on_snapshot = on_snapshot
        self._dispatcher = dispatcher
        self._timer: Optional[asyncio.TimerHandle] = None
        self._is_running = False
        self._last_generation: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        if self._is_running:
            logger.debug("PollScheduler already running")
            return

        # Whatever is on the clipboard at launch is not a new copy.
        self._last_generation = self._read_generation()
        self._is_running = True
        self._schedule()
        logger.info(f"Clipboard polling started ({self.poll_interval:.2f}s)")

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if not self._is_running:
            return
        self._is_running = False
        logger.info("Clipboard polling stopped")

    def tick(self) -> None:
        generation = self._read_generation()
        if generation is None or generation == self._last_generation:
            return

        # Record before reading so a slow read cannot be processed twice.
        self._last_generation = generation

        snapshot = self.backend.read_snapshot()
        if snapshot is None:
            logger.debug(f"No usable clipboard content for generation {generation}")
            return

        logger.info(f"Clipboard copied: {snapshot.kind.value}")
        self._on_snapshot(snapshot)

    def _read_generation(self) -> Optional[int]:
        try:
            return self.backend.current_generation()
        except Exception as e:
            logger.debug(f"Clipboard generation unavailable: {e}")
            return None

    def _schedule(self) -> None:
        self._timer = self._dispatcher.post_later(self.poll_interval, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if not self._is_running:
            return
        try:
            self.tick()
        except Exception as e:
            logger.error(f"Error in clipboard poll: {e}")
        finally:
            if self._is_running:
                self._schedule()

    def __enter__(self) -> "PollScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

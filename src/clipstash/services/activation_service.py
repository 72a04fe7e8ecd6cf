import asyncio
import logging
from typing import Callable, List, Optional, Protocol

from clipstash.clipboard import ClipboardBackend
from clipstash.models.entry import EntrySummary
from clipstash.services.history_service import HistoryEngine
from clipstash.services.input_service import simulate_paste_keystroke
from clipstash.utils.dispatcher import Dispatcher

logger = logging.getLogger(__name__)

DEFAULT_PASTE_DELAY = 0.2


class ActivationSurface(Protocol):
    """The window that lists history. Provided by whatever UI hosts us."""

    @property
    def is_visible(self) -> bool: ...

    def show(self) -> None: ...

    def hide(self) -> None: ...

    def center(self) -> None: ...

    def render(self, entries: List[EntrySummary]) -> None: ...


class ConsoleSurface:
    """Headless surface that writes the history list to the log."""

    def __init__(self) -> None:
        self._visible = False
        self._entries: List[EntrySummary] = []

    @property
    def is_visible(self) -> bool:
        return self._visible

    def show(self) -> None:
        self._visible = True
        logger.info(f"Clipboard history ({len(self._entries)} items):")
        for index, entry in enumerate(self._entries, start=1):
            marker = "*" if entry.pinned else " "
            label = entry.text if entry.text is not None else f"[{entry.kind.value}]"
            label = label.replace("\n", " ")
            if len(label) > 60:
                label = label[:60] + "..."
            logger.info(f"{marker}{index:>3}. {entry.created_at:%H:%M:%S}  {label}")

    def hide(self) -> None:
        self._visible = False

    def center(self) -> None:
        pass

    def render(self, entries: List[EntrySummary]) -> None:
        self._entries = entries


class ActivationController:
    """Shows/hides the history surface and replays a selected entry."""

    def __init__(
        self,
        history: HistoryEngine,
        clipboard: ClipboardBackend,
        surface: ActivationSurface,
        dispatcher: Dispatcher,
        paste_delay: float = DEFAULT_PASTE_DELAY,
        paste: Callable[[], None] = simulate_paste_keystroke,
    ) -> None:
        self.history = history
        self.clipboard = clipboard
        self.surface = surface
        self.paste_delay = paste_delay
        self._dispatcher = dispatcher
        self._paste = paste
        self._pending_paste: Optional[asyncio.TimerHandle] = None
        self._unsubscribe = history.subscribe(surface.render)
        surface.render(history.entries())

    def toggle(self) -> None:
        if self.surface.is_visible:
            self.surface.hide()
            return
        self.surface.center()
        self.surface.show()

    def on_focus_lost(self) -> None:
        if self.surface.is_visible:
            self.surface.hide()

    def select(self, entry_id: str) -> bool:
        snapshot = self.history.promote(entry_id)
        if snapshot is None:
            logger.debug(f"select: entry {entry_id} is gone")
            return False

        if not self.clipboard.write(snapshot):
            logger.warning(f"Could not write entry {entry_id} to the clipboard")
            return False

        self.surface.hide()

        # Give the window time to hide and focus time to return first.
        if self._pending_paste is not None:
            self._pending_paste.cancel()
        self._pending_paste = self._dispatcher.post_later(self.paste_delay, self._fire_paste)
        return True

    def close(self) -> None:
        if self._pending_paste is not None:
            self._pending_paste.cancel()
            self._pending_paste = None
        self._unsubscribe()

    def _fire_paste(self) -> None:
        self._pending_paste = None
        self._paste()

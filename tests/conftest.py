from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from clipstash.clipboard.base import ClipboardBackend
from clipstash.errors import HotkeyRegistrationError
from clipstash.models.entry import EntrySummary, Snapshot
from clipstash.models.hotkey import HotkeyBinding
from clipstash.services.hotkey_service import HotkeyBackend
from clipstash.utils.dispatcher import Dispatcher


class FakeClipboard(ClipboardBackend):
    """In-memory clipboard with a generation counter like NSPasteboard's."""

    def __init__(self) -> None:
        self.generation = 0
        self.content: Optional[Snapshot] = None
        self.writes: List[Snapshot] = []
        self.reads = 0
        self.fail_reads = 0
        self.generation_error: Optional[Exception] = None
        self.refuse_writes = False

    def copy(self, snapshot: Optional[Snapshot]) -> None:
        self.content = snapshot
        self.generation += 1

    def copy_text(self, text: str) -> None:
        self.copy(Snapshot.from_text(text))

    def current_generation(self) -> int:
        if self.generation_error is not None:
            raise self.generation_error
        return self.generation

    def _read(self) -> Optional[Snapshot]:
        self.reads += 1
        if self.fail_reads:
            self.fail_reads -= 1
            raise RuntimeError("clipboard busy")
        return self.content

    def _write(self, snapshot: Snapshot) -> bool:
        if self.refuse_writes:
            return False
        self.writes.append(snapshot)
        self.copy(snapshot)
        return True


class FakeHotkeyBackend(HotkeyBackend):

    def __init__(self, refuse: Tuple[HotkeyBinding, ...] = ()) -> None:
        self.refuse = set(refuse)
        self.active: Dict[int, Tuple[HotkeyBinding, Callable[[], None]]] = {}
        self.calls: List[Tuple[str, HotkeyBinding]] = []
        self._next_handle = 0

    def register(self, binding: HotkeyBinding, callback: Callable[[], None]) -> Any:
        self.calls.append(("register", binding))
        if binding in self.refuse:
            raise HotkeyRegistrationError(f"{binding.display()} is taken")
        self._next_handle += 1
        self.active[self._next_handle] = (binding, callback)
        return self._next_handle

    def unregister(self, handle: Any) -> None:
        binding, _ = self.active.pop(handle)
        self.calls.append(("unregister", binding))

    def active_bindings(self) -> List[HotkeyBinding]:
        return [binding for binding, _ in self.active.values()]

    def press(self, binding: HotkeyBinding) -> None:
        """Simulate the hook library firing, as it would on its own thread."""
        for active, callback in list(self.active.values()):
            if active == binding:
                callback()


class FakeSurface:

    def __init__(self) -> None:
        self.is_visible = False
        self.rendered: List[List[EntrySummary]] = []
        self.events: List[str] = []

    def show(self) -> None:
        self.is_visible = True
        self.events.append("show")

    def hide(self) -> None:
        self.is_visible = False
        self.events.append("hide")

    def center(self) -> None:
        self.events.append("center")

    def render(self, entries: List[EntrySummary]) -> None:
        self.rendered.append(entries)


class FakeLaunchService:

    def __init__(self) -> None:
        self.enabled: Optional[bool] = None

    def is_enabled(self) -> bool:
        return bool(self.enabled)

    def set_enabled(self, enabled: bool) -> bool:
        self.enabled = enabled
        return True


@pytest.fixture
def dispatcher():
    d = Dispatcher()
    yield d
    d.close()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def hotkey_backend():
    return FakeHotkeyBackend()


@pytest.fixture
def surface():
    return FakeSurface()

"""Global hotkey registration.

Exactly one system-wide chord is registered at a time. Key events arrive on
the hook library's own thread and are re-posted to the dispatcher, so the
``on_trigger`` callback always runs on the UI context.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import keyboard

from clipstash.errors import HotkeyRegistrationError
from clipstash.models.hotkey import HotkeyBinding
from clipstash.utils.dispatcher import Dispatcher
from clipstash.utils.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class HotkeyBackend(ABC):

    @abstractmethod
    def register(self, binding: HotkeyBinding, callback: Callable[[], None]) -> Any:
        """Install a hook; returns a handle for :meth:`unregister`.

        Raises :class:`HotkeyRegistrationError` if the platform refuses.
        """

    @abstractmethod
    def unregister(self, handle: Any) -> None:
        pass


class KeyboardHotkeyBackend(HotkeyBackend):
    """Backend built on the ``keyboard`` package."""

    def register(self, binding: HotkeyBinding, callback: Callable[[], None]) -> Any:
        try:
            combo = binding.to_combo()
            return keyboard.add_hotkey(combo, callback)
        except (ValueError, ImportError, OSError) as e:
            raise HotkeyRegistrationError(f"Cannot register {binding.display()}: {e}") from e

    def unregister(self, handle: Any) -> None:
        keyboard.remove_hotkey(handle)


class HotkeyTrigger:

    def __init__(
        self,
        dispatcher: Dispatcher,
        on_trigger: Optional[Callable[[], None]] = None,
        backend: Optional[HotkeyBackend] = None,
        settings_store: Optional[SettingsStore] = None,
    ) -> None:
        self.on_trigger = on_trigger
        self._dispatcher = dispatcher
        self._backend = backend or KeyboardHotkeyBackend()
        self._settings_store = settings_store
        self._handle: Any = None
        self._registered = False
        self._token = 0
        self.binding: Optional[HotkeyBinding] = None
        self.last_error: Optional[str] = None

    @property
    def is_registered(self) -> bool:
        return self._registered

    @property
    def shortcut_string(self) -> str:
        if self.binding is None:
            return ""
        return self.binding.display()

    def start(self, binding: HotkeyBinding) -> bool:
        self._teardown()
        return self._install(binding)

    def rebind(self, binding: HotkeyBinding) -> bool:
        """Replace the active chord.

        The old hook is removed before the new one is installed. On failure
        the trigger ends up unregistered, never still listening on the old
        chord.
        """
        self._teardown()
        if not self._install(binding):
            return False

        if self._settings_store is not None:
            settings = self._settings_store.settings.with_hotkey(binding)
            self._settings_store.save(settings)
        return True

    def stop(self) -> None:
        self._teardown()

    def _install(self, binding: HotkeyBinding) -> bool:
        # Keep the attempted chord even on failure so settings can show it.
        self.binding = binding
        self._token += 1
        token = self._token

        def on_hotkey() -> None:
            self._dispatcher.post(self._deliver, token)

        try:
            self._handle = self._backend.register(binding, on_hotkey)
        except HotkeyRegistrationError as e:
            self.last_error = str(e)
            logger.warning(f"Failed to register hotkey {binding.display()}: {e}")
            return False

        self._registered = True
        self.last_error = None
        logger.info(f"Registered hotkey {binding.display()}")
        return True

    def _teardown(self) -> None:
        # Invalidate deliveries already queued for the old registration.
        self._token += 1

        if not self._registered:
            return

        handle, self._handle = self._handle, None
        self._registered = False
        try:
            self._backend.unregister(handle)
        except Exception as e:
            logger.warning(f"Error removing hotkey hook: {e}")

    def _deliver(self, token: int) -> None:
        if token != self._token or not self._registered:
            logger.debug("Dropping hotkey event for a stale registration")
            return
        if self.on_trigger is not None:
            self.on_trigger()

    def __enter__(self) -> "HotkeyTrigger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

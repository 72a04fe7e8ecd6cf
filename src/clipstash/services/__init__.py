"""Service layer for ClipStash."""

from clipstash.services.activation_service import ActivationController, ConsoleSurface
from clipstash.services.clipboard_service import PollScheduler
from clipstash.services.history_service import HistoryEngine
from clipstash.services.hotkey_service import HotkeyTrigger, KeyboardHotkeyBackend
from clipstash.services.launch_service import LaunchAtLoginService

__all__ = [
    "ActivationController",
    "ConsoleSurface",
    "HistoryEngine",
    "HotkeyTrigger",
    "KeyboardHotkeyBackend",
    "LaunchAtLoginService",
    "PollScheduler",
]

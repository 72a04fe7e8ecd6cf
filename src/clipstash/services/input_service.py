import logging
import platform

import keyboard

logger = logging.getLogger(__name__)


def paste_combo() -> str:
    return "command+v" if platform.system() == "Darwin" else "ctrl+v"


def simulate_paste_keystroke() -> None:
    """Send the platform paste chord to the focused application."""
    combo = paste_combo()
    try:
        keyboard.send(combo)
    except Exception as e:
        logger.warning(f"Could not send {combo}: {e}")

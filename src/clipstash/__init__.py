"""ClipStash: clipboard history with pinning and a global hotkey."""

__version__ = "0.1.0"

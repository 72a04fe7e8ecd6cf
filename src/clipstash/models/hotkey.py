import platform
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Dict, List


class Modifier(IntFlag):
    NONE = 0
    COMMAND = 1
    CONTROL = 2
    OPTION = 4
    SHIFT = 8


class KeyCode(IntEnum):
    # Virtual-key numbering; letters and digits are their ASCII code points.
    BACKSPACE = 0x08
    TAB = 0x09
    RETURN = 0x0D
    ESCAPE = 0x1B
    SPACE = 0x20
    LEFT = 0x25
    UP = 0x26
    RIGHT = 0x27
    DOWN = 0x28
    DELETE = 0x2E
    F1 = 0x70
    F12 = 0x7B


_SPECIAL_NAMES: Dict[int, str] = {
    KeyCode.BACKSPACE: "backspace",
    KeyCode.TAB: "tab",
    KeyCode.RETURN: "enter",
    KeyCode.ESCAPE: "esc",
    KeyCode.SPACE: "space",
    KeyCode.LEFT: "left",
    KeyCode.UP: "up",
    KeyCode.RIGHT: "right",
    KeyCode.DOWN: "down",
    KeyCode.DELETE: "delete",
}

_SPECIAL_LABELS: Dict[int, str] = {
    KeyCode.BACKSPACE: "⌫",
    KeyCode.TAB: "⇥",
    KeyCode.RETURN: "↩",
    KeyCode.ESCAPE: "⎋",
    KeyCode.SPACE: "Space",
    KeyCode.LEFT: "←",
    KeyCode.UP: "↑",
    KeyCode.RIGHT: "→",
    KeyCode.DOWN: "↓",
    KeyCode.DELETE: "⌦",
}

_KEY_ALIASES: Dict[str, KeyCode] = {
    "return": KeyCode.RETURN,
    "escape": KeyCode.ESCAPE,
    "del": KeyCode.DELETE,
}

_MODIFIER_LABELS = (
    (Modifier.COMMAND, "⌘"),
    (Modifier.CONTROL, "⌃"),
    (Modifier.OPTION, "⌥"),
    (Modifier.SHIFT, "⇧"),
)

_MODIFIER_ALIASES: Dict[str, Modifier] = {
    "cmd": Modifier.COMMAND,
    "command": Modifier.COMMAND,
    "win": Modifier.COMMAND,
    "windows": Modifier.COMMAND,
    "super": Modifier.COMMAND,
    "ctrl": Modifier.CONTROL,
    "control": Modifier.CONTROL,
    "alt": Modifier.OPTION,
    "option": Modifier.OPTION,
    "shift": Modifier.SHIFT,
}


def _is_macos() -> bool:
    return platform.system() == "Darwin"


def key_name(key_code: int) -> str:
    """Name of a key as understood by the ``keyboard`` package."""
    if key_code in _SPECIAL_NAMES:
        return _SPECIAL_NAMES[key_code]
    if KeyCode.F1 <= key_code <= KeyCode.F12:
        return f"f{key_code - KeyCode.F1 + 1}"
    if ord("A") <= key_code <= ord("Z") or ord("0") <= key_code <= ord("9"):
        return chr(key_code).lower()
    raise ValueError(f"Unsupported key code: {key_code}")


def key_label(key_code: int) -> str:
    if key_code in _SPECIAL_LABELS:
        return _SPECIAL_LABELS[key_code]
    if KeyCode.F1 <= key_code <= KeyCode.F12:
        return f"F{key_code - KeyCode.F1 + 1}"
    if ord("A") <= key_code <= ord("Z") or ord("0") <= key_code <= ord("9"):
        return chr(key_code)
    return f"Key({key_code})"


def key_code_for(name: str) -> int:
    name = name.strip().lower()
    for code, special in _SPECIAL_NAMES.items():
        if special == name:
            return int(code)
    if name in _KEY_ALIASES:
        return int(_KEY_ALIASES[name])
    if len(name) > 1 and name[0] == "f" and name[1:].isdigit():
        number = int(name[1:])
        if 1 <= number <= 12:
            return int(KeyCode.F1) + number - 1
    if len(name) == 1 and name.isalnum() and name.isascii():
        return ord(name.upper())
    raise ValueError(f"Unknown key: {name!r}")


@dataclass(frozen=True)
class HotkeyBinding:
    key_code: int
    modifiers: Modifier = Modifier.NONE

    @classmethod
    def default(cls) -> "HotkeyBinding":
        primary = Modifier.COMMAND if _is_macos() else Modifier.CONTROL
        return cls(key_code=ord("V"), modifiers=primary | Modifier.SHIFT)

    @classmethod
    def parse(cls, combo: str) -> "HotkeyBinding":
        """Parse a ``keyboard``-style combo such as ``"ctrl+shift+v"``."""
        parts = [part.strip().lower() for part in combo.split("+") if part.strip()]
        if not parts:
            raise ValueError("Empty hotkey")

        modifiers = Modifier.NONE
        for part in parts[:-1]:
            if part not in _MODIFIER_ALIASES:
                raise ValueError(f"Unknown modifier: {part!r}")
            modifiers |= _MODIFIER_ALIASES[part]

        return cls(key_code=key_code_for(parts[-1]), modifiers=modifiers)

    def to_combo(self) -> str:
        parts: List[str] = []
        if self.modifiers & Modifier.CONTROL:
            parts.append("ctrl")
        if self.modifiers & Modifier.OPTION:
            parts.append("alt")
        if self.modifiers & Modifier.SHIFT:
            parts.append("shift")
        if self.modifiers & Modifier.COMMAND:
            parts.append("command" if _is_macos() else "windows")
        parts.append(key_name(self.key_code))
        return "+".join(parts)

    def display(self) -> str:
        parts = [label for flag, label in _MODIFIER_LABELS if self.modifiers & flag]
        parts.append(key_label(self.key_code))
        return " ".join(parts)

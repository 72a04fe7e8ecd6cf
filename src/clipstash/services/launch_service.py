import logging
import os
import platform
import plistlib
import sys
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "io.clipstash.agent"


def default_command() -> List[str]:
    return [sys.executable, "-m", "clipstash"]


class LaunchAtLoginService:
    """Manages the per-user autostart file for the current platform.

    macOS gets a LaunchAgent plist, Linux an XDG autostart ``.desktop``
    entry and Windows a ``.cmd`` script in the Startup folder.
    """

    def __init__(
        self,
        label: str = DEFAULT_LABEL,
        command: Optional[List[str]] = None,
        system: Optional[str] = None,
        home: Optional[Path] = None,
    ) -> None:
        self.label = label
        self.command = command or default_command()
        self.system = system or platform.system()
        self.home = home or Path.home()

    @property
    def agent_path(self) -> Optional[Path]:
        if self.system == "Darwin":
            return self.home / "Library" / "LaunchAgents" / f"{self.label}.plist"
        if self.system == "Linux":
            config_home = os.environ.get("XDG_CONFIG_HOME")
            base = Path(config_home) if config_home else self.home / ".config"
            return base / "autostart" / f"{self.label}.desktop"
        if self.system == "Windows":
            appdata = os.environ.get("APPDATA")
            base = Path(appdata) if appdata else self.home / "AppData" / "Roaming"
            return base / "Microsoft" / "Windows" / "Start Menu" / "Programs" / "Startup" / f"{self.label}.cmd"
        return None

    def is_enabled(self) -> bool:
        path = self.agent_path
        return path is not None and path.exists()

    def set_enabled(self, enabled: bool) -> bool:
        path = self.agent_path
        if path is None:
            logger.warning(f"Launch at login is not supported on {self.system}")
            return False

        try:
            if enabled:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(self._render())
                logger.info(f"Enabled launch at login: {path}")
            elif path.exists():
                path.unlink()
                logger.info(f"Disabled launch at login: {path}")
            return True
        except OSError as e:
            logger.error(f"Failed to update launch agent {path}: {e}")
            return False

    def _render(self) -> bytes:
        if self.system == "Darwin":
            return plistlib.dumps({
                "Label": self.label,
                "ProgramArguments": list(self.command),
                "RunAtLoad": True,
                "ProcessType": "Interactive",
                "KeepAlive": False,
            })

        if self.system == "Linux":
            exec_line = " ".join(self._quote(part) for part in self.command)
            lines = [
                "[Desktop Entry]",
                "Type=Application",
                "Name=ClipStash",
                f"Exec={exec_line}",
                "X-GNOME-Autostart-enabled=true",
                "NoDisplay=true",
                "",
            ]
            return "\n".join(lines).encode("utf-8")

        exec_line = " ".join(f'"{part}"' for part in self.command)
        return f"@echo off\r\nstart \"\" {exec_line}\r\n".encode("utf-8")

    @staticmethod
    def _quote(part: str) -> str:
        if any(ch in part for ch in ' \t"\\'):
            escaped = part.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return part

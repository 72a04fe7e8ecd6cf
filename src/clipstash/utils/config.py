from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".clipstash" / "settings.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _load_env_file(env_path: Optional[Path] = None) -> None:
    try:
        if env_path is not None:
            load_dotenv(dotenv_path=env_path)
        else:
            load_dotenv()
    except OSError as e:
        logger.warning(f"Could not read .env file: {e}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}, using {default}")
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if value < 1:
        logger.warning(f"Ignoring {name}={raw!r} (must be at least 1), using {default}")
        return default
    return value


def _env_log_level(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Ignoring unknown {name}={raw!r}, using {default}")
        return default
    return level


@dataclass(frozen=True)
class AppConfig:
    capacity: int = 50
    poll_interval: float = 0.5
    paste_delay: float = 0.2
    settings_path: Path = DEFAULT_SETTINGS_PATH
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "AppConfig":
        _load_env_file(env_path)

        settings_raw = os.getenv("CLIPSTASH_SETTINGS_PATH")
        settings_path = Path(settings_raw).expanduser() if settings_raw else cls.settings_path

        return cls(
            capacity=_env_int("CLIPSTASH_CAPACITY", cls.capacity),
            poll_interval=_env_float("CLIPSTASH_POLL_INTERVAL", cls.poll_interval),
            paste_delay=_env_float("CLIPSTASH_PASTE_DELAY", cls.paste_delay),
            settings_path=settings_path,
            log_level=_env_log_level("CLIPSTASH_LOG_LEVEL", cls.log_level),
        )

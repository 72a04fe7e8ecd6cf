#!/usr/bin/env python3

import argparse
import logging
import signal
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from clipstash import __version__
from clipstash.clipboard import ClipboardBackend, get_clipboard_backend
from clipstash.models.hotkey import HotkeyBinding
from clipstash.services.activation_service import ActivationController, ActivationSurface, ConsoleSurface
from clipstash.services.clipboard_service import PollScheduler
from clipstash.services.history_service import HistoryEngine
from clipstash.services.hotkey_service import HotkeyBackend, HotkeyTrigger
from clipstash.services.launch_service import LaunchAtLoginService
from clipstash.utils.config import AppConfig
from clipstash.utils.dispatcher import Dispatcher
from clipstash.utils.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class ClipStashApp:

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        clipboard: Optional[ClipboardBackend] = None,
        surface: Optional[ActivationSurface] = None,
        hotkey_backend: Optional[HotkeyBackend] = None,
        launch_service: Optional[LaunchAtLoginService] = None,
        dispatcher: Optional[Dispatcher] = None,
        hotkey_override: Optional[HotkeyBinding] = None,
        enable_hotkey: bool = True,
    ):
        self.config = config or AppConfig.from_env()
        self.dispatcher = dispatcher or Dispatcher()
        self.clipboard = clipboard or get_clipboard_backend()
        self.settings_store = SettingsStore(self.config.settings_path)
        self.launch_service = launch_service or LaunchAtLoginService()
        self.history = HistoryEngine(capacity=self.config.capacity)
        self.poller = PollScheduler(
            backend=self.clipboard,
            on_snapshot=self.history.observe,
            dispatcher=self.dispatcher,
            poll_interval=self.config.poll_interval,
        )
        self.activation = ActivationController(
            history=self.history,
            clipboard=self.clipboard,
            surface=surface or ConsoleSurface(),
            dispatcher=self.dispatcher,
            paste_delay=self.config.paste_delay,
        )
        self.hotkey = HotkeyTrigger(
            dispatcher=self.dispatcher,
            on_trigger=self.activation.toggle,
            backend=hotkey_backend,
            settings_store=self.settings_store,
        )
        self.hotkey_override = hotkey_override
        self.enable_hotkey = enable_hotkey
        self.running = False

    def start(self) -> None:
        if self.running:
            return
        self.running = True

        settings = self.settings_store.settings
        if not settings.has_launched_before:
            self.launch_service.set_enabled(True)
            self.settings_store.save(settings.model_copy(update={"has_launched_before": True}))

        if self.enable_hotkey:
            if self.hotkey_override is not None:
                if not self.hotkey.rebind(self.hotkey_override):
                    logger.warning(f"Hotkey unavailable: {self.hotkey.last_error}")
            elif not self.hotkey.start(self.settings_store.settings.hotkey_binding()):
                logger.warning(f"Hotkey unavailable: {self.hotkey.last_error}")

        self.poller.start()
        logger.info(f"ClipStash running (capacity {self.history.capacity}). Press Ctrl+C to stop")

    def shutdown(self) -> None:
        if not self.running:
            return
        self.running = False

        self.poller.stop()
        self.hotkey.stop()
        self.activation.close()
        logger.info("ClipStash stopped")

    def run(self) -> None:
        self.start()
        try:
            self.dispatcher.run_forever()
        except KeyboardInterrupt:
            logger.info("Stopping...")
        finally:
            self.shutdown()
            self.dispatcher.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="clipstash",
        description="ClipStash - clipboard history with pinning and a global hotkey"
    )

    parser.add_argument(
        "-c", "--capacity",
        type=int,
        default=None,
        help="Maximum number of history entries; pinned entries may exceed it (default: 50)"
    )

    parser.add_argument(
        "-i", "--poll-interval",
        type=float,
        default=None,
        help="Clipboard polling interval in seconds (default: 0.5)"
    )

    parser.add_argument(
        "-k", "--hotkey",
        type=str,
        default=None,
        help="Global hotkey, e.g. 'ctrl+shift+v'; saved for later runs"
    )

    parser.add_argument(
        "--no-hotkey",
        action="store_true",
        help="Do not register a global hotkey"
    )

    parser.add_argument(
        "--launch-at-login",
        choices=["on", "off"],
        default=None,
        help="Enable or disable starting ClipStash at login, then exit"
    )

    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path of the settings file (default: ~/.clipstash/settings.json)"
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ClipStash {__version__}"
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace, base: Optional[AppConfig] = None) -> AppConfig:
    config = base or AppConfig.from_env()
    overrides = {}
    if args.capacity is not None:
        if args.capacity < 1:
            raise ValueError("--capacity must be at least 1")
        overrides["capacity"] = args.capacity
    if args.poll_interval is not None:
        if args.poll_interval <= 0:
            raise ValueError("--poll-interval must be positive")
        overrides["poll_interval"] = args.poll_interval
    if args.settings is not None:
        overrides["settings_path"] = args.settings.expanduser()
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = build_config(args)
        hotkey = HotkeyBinding.parse(args.hotkey) if args.hotkey else None
    except ValueError as e:
        print(f"clipstash: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=config.log_level, format='%(levelname)s: %(message)s')

    if args.launch_at_login is not None:
        ok = LaunchAtLoginService().set_enabled(args.launch_at_login == "on")
        return 0 if ok else 1

    app = ClipStashApp(
        config=config,
        hotkey_override=hotkey,
        enable_hotkey=not args.no_hotkey,
    )

    def signal_handler(signum, frame):
        app.dispatcher.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        app.run()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

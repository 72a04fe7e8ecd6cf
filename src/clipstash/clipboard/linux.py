import hashlib
import os
import shutil
import subprocess
from typing import Callable, List, Optional, Tuple

from clipstash.clipboard.base import ClipboardBackend
from clipstash.models.entry import EntryKind, Snapshot


class LinuxClipboard(ClipboardBackend):
    """Clipboard access through wl-clipboard (Wayland) or xclip (X11).

    Neither tool exposes a change counter, so one is synthesized: every probe
    fingerprints the current payload and bumps a private counter when the
    fingerprint differs from the previous probe.
    """

    _IMAGE_TARGETS = {
        "image/png": "image/png",
        "image/jpeg": "image/jpeg",
        "image/jpg": "image/jpeg",
        "image/bmp": "image/bmp",
        "image/x-ms-bmp": "image/bmp",
        "image/webp": "image/webp",
    }
    _TEXT_TARGETS = (
        "text/plain;charset=utf-8",
        "text/plain;charset=utf8",
        "text/plain",
        "utf8_string",
        "string",
    )

    def __init__(self) -> None:
        self._generation = 0
        self._last_digest: Optional[str] = None
        self._probed: Optional[Snapshot] = None

    def current_generation(self) -> int:
        try:
            snapshot = self._read_current()
        except Exception:
            snapshot = None

        digest = self._fingerprint(snapshot)
        if digest != self._last_digest:
            self._last_digest = digest
            self._generation += 1
        self._probed = snapshot
        return self._generation

    def _read(self) -> Optional[Snapshot]:
        # Reuse the payload fetched by the generation probe of this tick.
        if self._probed is not None:
            snapshot, self._probed = self._probed, None
            return snapshot
        return self._read_current()

    @staticmethod
    def _fingerprint(snapshot: Optional[Snapshot]) -> Optional[str]:
        if snapshot is None:
            return None
        return hashlib.md5(snapshot.kind.value.encode("utf-8") + snapshot.payload).hexdigest()

    def _read_current(self) -> Optional[Snapshot]:
        strategies = (
            self._from_wayland,
            self._from_xclip,
        )

        for strategy in strategies:
            try:
                result = strategy()
            except Exception:
                result = None
            if result:
                return result
        return None

    def _from_wayland(self) -> Optional[Snapshot]:
        if not os.environ.get("WAYLAND_DISPLAY") or not shutil.which("wl-paste"):
            return None

        types = self._parse_type_list(
            self._run_command(["wl-paste", "--list-types"], timeout=1.5)
        )

        def reader(target: str) -> Optional[bytes]:
            command = ["wl-paste", "--type", target]
            if target.lower().startswith("text/"):
                command.append("--no-newline")
            return self._run_command(command, timeout=1.5)

        return self._extract_from_types(types, reader)

    def _from_xclip(self) -> Optional[Snapshot]:
        if not shutil.which("xclip"):
            return None

        types = self._parse_type_list(
            self._run_command(
                ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"],
                timeout=1.5,
            )
        )

        def reader(target: str) -> Optional[bytes]:
            return self._run_command(
                ["xclip", "-selection", "clipboard", "-t", target, "-o"],
                timeout=1.5,
            )

        return self._extract_from_types(types, reader)

    def _extract_from_types(
        self,
        types: List[str],
        reader: Callable[[str], Optional[bytes]],
    ) -> Optional[Snapshot]:
        if not types:
            return None

        lowered = {target.lower(): target for target in types}

        text_target = self._pick(lowered, self._TEXT_TARGETS)
        if text_target is not None:
            data = reader(text_target)
            if data:
                return Snapshot.from_text(data.decode("utf-8", errors="ignore"))

        for candidate, mime in self._IMAGE_TARGETS.items():
            if candidate in lowered:
                data = reader(lowered[candidate])
                if data:
                    return Snapshot.from_image(data, mime=mime)

        return None

    @staticmethod
    def _pick(lowered: dict, wanted) -> Optional[str]:
        for candidate in wanted:
            if candidate in lowered:
                return lowered[candidate]
        return None

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _run_command(self, command: List[str], timeout: float) -> Optional[bytes]:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=timeout,
            )
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None

    def _write_command(self, snapshot: Snapshot) -> Optional[Tuple[List[str], bytes]]:
        if snapshot.kind is EntryKind.TEXT:
            data = (snapshot.text if snapshot.text is not None else
                    snapshot.payload.decode("utf-8", errors="ignore")).encode("utf-8")
            mime = "text/plain;charset=utf-8"
        else:
            data = snapshot.payload
            mime = snapshot.mime or "image/png"

        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            return ["wl-copy", "--type", mime], data
        if shutil.which("xclip"):
            target = "UTF8_STRING" if snapshot.kind is EntryKind.TEXT else mime
            return ["xclip", "-selection", "clipboard", "-t", target, "-i"], data
        return None

    def _write(self, snapshot: Snapshot) -> bool:
        command = self._write_command(snapshot)
        if command is None:
            return False

        argv, data = command
        # Both tools fork a child that keeps serving the selection; it must
        # not inherit an output pipe we would wait on.
        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            process.communicate(input=data, timeout=2.0)
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False
        return process.returncode == 0

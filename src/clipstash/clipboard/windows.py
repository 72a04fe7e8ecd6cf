import io
import time
from typing import Optional

import win32clipboard as wc
import win32con
from PIL import Image, ImageGrab

from clipstash.clipboard.base import ClipboardBackend
from clipstash.models.entry import EntryKind, Snapshot


class WindowsClipboard(ClipboardBackend):
    """Win32 clipboard access.

    Images are written as ``CF_DIB`` for other applications and as the
    registered "PNG" format carrying the original bytes, which is read back
    first so a replayed image keeps its identity.
    """

    def __init__(self) -> None:
        self._png_format: Optional[int] = None

    def current_generation(self) -> int:
        return int(wc.GetClipboardSequenceNumber())

    def _open(self) -> bool:
        for _ in range(3):
            try:
                wc.OpenClipboard()
                return True
            except Exception:
                time.sleep(0.05)
        return False

    def _read(self) -> Optional[Snapshot]:
        text_result = self._from_unicode_text()
        if text_result is not None:
            return text_result
        png_result = self._from_png_format()
        if png_result is not None:
            return png_result
        return self._from_imagegrab()

    def _png(self) -> int:
        if self._png_format is None:
            self._png_format = wc.RegisterClipboardFormat("PNG")
        return self._png_format

    def _from_png_format(self) -> Optional[Snapshot]:
        opened = self._open()
        if not opened:
            return None

        try:
            if wc.IsClipboardFormatAvailable(self._png()):
                try:
                    data = wc.GetClipboardData(self._png())
                except Exception:
                    data = None
                if data:
                    return Snapshot.from_image(bytes(data), mime="image/png")
        finally:
            try:
                wc.CloseClipboard()
            except Exception:
                pass

        return None

    def _from_unicode_text(self) -> Optional[Snapshot]:
        opened = self._open()
        if not opened:
            return None

        try:
            if wc.IsClipboardFormatAvailable(wc.CF_UNICODETEXT):
                try:
                    text = wc.GetClipboardData(wc.CF_UNICODETEXT)
                except Exception:
                    text = None
                if text:
                    return Snapshot.from_text(text)
        finally:
            try:
                wc.CloseClipboard()
            except Exception:
                pass

        return None

    def _from_imagegrab(self) -> Optional[Snapshot]:
        try:
            clipboard_data = ImageGrab.grabclipboard()
        except Exception:
            return None

        # File lists come back as a list of paths; only bitmaps are recorded.
        if clipboard_data is None or not hasattr(clipboard_data, "save"):
            return None

        output = io.BytesIO()
        try:
            clipboard_data.save(output, format="PNG")
        except Exception:
            return None
        return Snapshot.from_image(output.getvalue(), mime="image/png")

    def _write(self, snapshot: Snapshot) -> bool:
        dib_data = None
        if snapshot.kind is EntryKind.IMAGE:
            dib_data = self._to_dib(snapshot.payload)
            if dib_data is None:
                return False

        opened = self._open()
        if not opened:
            return False

        try:
            wc.EmptyClipboard()

            if snapshot.kind is EntryKind.TEXT:
                text = snapshot.text
                if text is None:
                    text = snapshot.payload.decode("utf-8", errors="ignore")
                wc.SetClipboardData(wc.CF_UNICODETEXT, text)
                return True

            wc.SetClipboardData(win32con.CF_DIB, dib_data)
            if snapshot.mime in (None, "image/png"):
                wc.SetClipboardData(self._png(), snapshot.payload)
            return True
        finally:
            try:
                wc.CloseClipboard()
            except Exception:
                pass

    @staticmethod
    def _to_dib(payload: bytes) -> Optional[bytes]:
        try:
            image = Image.open(io.BytesIO(payload))
            if image.mode == "RGBA":
                background = Image.new("RGB", image.size, (255, 255, 255))
                background.paste(image, mask=image.split()[3])
                image = background
            elif image.mode != "RGB":
                image = image.convert("RGB")

            output = io.BytesIO()
            image.save(output, "BMP")
            bmp_data = output.getvalue()
        except Exception:
            return None

        # CF_DIB is a BMP without its 14-byte file header.
        if len(bmp_data) <= 14:
            return None
        return bmp_data[14:]

from typing import Optional

try:
    from AppKit import NSPasteboard, NSPasteboardTypeString, NSPasteboardTypePNG, NSPasteboardTypeTIFF
    from Foundation import NSData
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from clipstash.clipboard.base import ClipboardBackend
from clipstash.models.entry import EntryKind, Snapshot


class MacOSClipboard(ClipboardBackend):

    def current_generation(self) -> int:
        if not HAS_APPKIT:
            return 0
        return int(NSPasteboard.generalPasteboard().changeCount())

    def _read(self) -> Optional[Snapshot]:
        if not HAS_APPKIT:
            return None

        pasteboard = NSPasteboard.generalPasteboard()
        types = pasteboard.types() or []

        if NSPasteboardTypeString in types:
            result = self._get_text(pasteboard)
            if result:
                return result

        if NSPasteboardTypePNG in types:
            result = self._get_image(pasteboard, NSPasteboardTypePNG, "image/png")
            if result:
                return result

        if NSPasteboardTypeTIFF in types:
            result = self._get_image(pasteboard, NSPasteboardTypeTIFF, "image/tiff")
            if result:
                return result

        return None

    def _get_text(self, pasteboard) -> Optional[Snapshot]:
        try:
            text = pasteboard.stringForType_(NSPasteboardTypeString)
            if text:
                return Snapshot.from_text(str(text))
        except Exception:
            pass
        return None

    def _get_image(self, pasteboard, pb_type: str, mime_type: str) -> Optional[Snapshot]:
        try:
            data = pasteboard.dataForType_(pb_type)
            if data:
                return Snapshot.from_image(bytes(data), mime=mime_type)
        except Exception:
            pass
        return None

    def _write(self, snapshot: Snapshot) -> bool:
        if not HAS_APPKIT:
            return False

        pasteboard = NSPasteboard.generalPasteboard()
        pasteboard.clearContents()

        if snapshot.kind is EntryKind.TEXT:
            text = snapshot.text
            if text is None:
                text = snapshot.payload.decode("utf-8", errors="ignore")
            return bool(pasteboard.setString_forType_(text, NSPasteboardTypeString))

        pb_type = NSPasteboardTypeTIFF if snapshot.mime == "image/tiff" else NSPasteboardTypePNG
        data = NSData.dataWithBytes_length_(snapshot.payload, len(snapshot.payload))
        return bool(pasteboard.setData_forType_(data, pb_type))

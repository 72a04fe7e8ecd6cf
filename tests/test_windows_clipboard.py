import io

import pytest

pytest.importorskip("win32clipboard")

from PIL import Image

from clipstash.clipboard import windows
from clipstash.models.entry import EntryKind, Snapshot


class FakeWin32Clipboard:
    CF_UNICODETEXT = 13

    def __init__(self):
        self.formats = {}
        self.registered = {}
        self.sequence = 0

    def OpenClipboard(self):
        pass

    def CloseClipboard(self):
        pass

    def EmptyClipboard(self):
        self.formats.clear()
        self.sequence += 1

    def RegisterClipboardFormat(self, name):
        return self.registered.setdefault(name, 0xC000 + len(self.registered))

    def SetClipboardData(self, fmt, data):
        self.formats[fmt] = data

    def IsClipboardFormatAvailable(self, fmt):
        return fmt in self.formats

    def GetClipboardData(self, fmt):
        return self.formats[fmt]

    def GetClipboardSequenceNumber(self):
        return self.sequence


def rgba_png():
    image = Image.new("RGBA", (4, 4), (255, 0, 0, 128))
    output = io.BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def fake_wc(monkeypatch):
    fake = FakeWin32Clipboard()
    monkeypatch.setattr(windows, "wc", fake)
    return fake


def test_translucent_image_reads_back_with_same_bytes(fake_wc):
    clipboard = windows.WindowsClipboard()
    payload = rgba_png()

    assert clipboard.write(Snapshot.from_image(payload)) is True

    snapshot = clipboard.read_snapshot()
    assert snapshot.kind is EntryKind.IMAGE
    assert snapshot.payload == payload


def test_image_is_also_offered_as_dib(fake_wc):
    clipboard = windows.WindowsClipboard()
    clipboard.write(Snapshot.from_image(rgba_png()))

    assert windows.win32con.CF_DIB in fake_wc.formats


def test_text_reads_back(fake_wc):
    clipboard = windows.WindowsClipboard()
    clipboard.write(Snapshot.from_text("hello"))

    assert clipboard.read_snapshot() == Snapshot.from_text("hello")

from clipstash.clipboard.base import ClipboardBackend
from clipstash.clipboard.factory import get_clipboard_backend, get_clipboard_class

__all__ = [
    'ClipboardBackend',
    'get_clipboard_class',
    'get_clipboard_backend',
]

from clipstash.models.entry import Entry, EntryKind, EntrySummary, Snapshot
from clipstash.models.hotkey import HotkeyBinding, KeyCode, Modifier
from clipstash.models.settings import Settings

__all__ = [
    'Entry',
    'EntryKind',
    'EntrySummary',
    'Snapshot',
    'HotkeyBinding',
    'KeyCode',
    'Modifier',
    'Settings',
]

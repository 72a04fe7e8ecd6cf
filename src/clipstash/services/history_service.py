"""Bounded, deduplicated, pin-aware clipboard history.

Entries are kept newest first. Observing content that is already recorded
moves it back to the top (as a fresh entry that keeps the old pin). Pinned
entries do not count against ``capacity``: when an insertion leaves more than
``capacity`` unpinned entries, the oldest unpinned one is dropped. At most one
entry is evicted per insertion, so entries unpinned since the last copy are
trimmed one copy at a time. Pinned entries are only ever removed by delete(),
so with pins present the list may be longer than ``capacity``.

The engine does no I/O and no locking. It is meant to be driven from the
single dispatcher thread only.
"""

import logging
from dataclasses import replace
from typing import Callable, List, Optional

from clipstash.models.entry import Entry, EntryKind, EntrySummary, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50

HistoryListener = Callable[[List[EntrySummary]], None]


class HistoryEngine:

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: List[Entry] = []
        self._listeners: List[HistoryListener] = []

    def __len__(self) -> int:
        return len(self._entries)

    def observe(self, snapshot: Snapshot) -> None:
        identity = snapshot.identity

        # Our own write-back of a promoted entry comes round as an echo.
        if self._entries and self._entries[0].identity == identity:
            return

        pinned = False
        index = self._index_of_identity(identity)
        if index is not None:
            pinned = self._entries.pop(index).pinned

        self._entries.insert(0, Entry.from_snapshot(snapshot, pinned=pinned))

        if self._unpinned_count() > self.capacity:
            self._evict_one()

        self._notify()

    def toggle_pin(self, entry_id: str) -> None:
        index = self._index_of_id(entry_id)
        if index is None:
            logger.debug(f"toggle_pin: no entry {entry_id}")
            return
        entry = self._entries[index]
        self._entries[index] = replace(entry, pinned=not entry.pinned)
        self._notify()

    def delete(self, entry_id: str) -> None:
        index = self._index_of_id(entry_id)
        if index is None:
            logger.debug(f"delete: no entry {entry_id}")
            return
        del self._entries[index]
        self._notify()

    def promote(self, entry_id: str) -> Optional[Snapshot]:
        """Payload to put back on the clipboard; the list itself is untouched."""
        entry = self.get(entry_id)
        if entry is None:
            return None
        return entry.to_snapshot()

    def clear_unpinned(self) -> None:
        remaining = [entry for entry in self._entries if entry.pinned]
        if len(remaining) == len(self._entries):
            return
        self._entries = remaining
        self._notify()

    def get(self, entry_id: str) -> Optional[Entry]:
        index = self._index_of_id(entry_id)
        if index is None:
            return None
        return self._entries[index]

    def image_bytes(self, entry_id: str) -> Optional[bytes]:
        entry = self.get(entry_id)
        if entry is None or entry.kind is not EntryKind.IMAGE:
            return None
        return entry.payload

    def entries(self) -> List[EntrySummary]:
        return [entry.summary() for entry in self._entries]

    def subscribe(self, listener: HistoryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _unpinned_count(self) -> int:
        return sum(1 for entry in self._entries if not entry.pinned)

    def _evict_one(self) -> None:
        for index in range(len(self._entries) - 1, -1, -1):
            if not self._entries[index].pinned:
                evicted = self._entries.pop(index)
                logger.debug(f"Evicted {evicted.entry_id} (capacity {self.capacity})")
                return

    def _index_of_id(self, entry_id: str) -> Optional[int]:
        for index, entry in enumerate(self._entries):
            if entry.entry_id == entry_id:
                return index
        return None

    def _index_of_identity(self, identity) -> Optional[int]:
        for index, entry in enumerate(self._entries):
            if entry.identity == identity:
                return index
        return None

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.entries()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"History listener failed: {e}")

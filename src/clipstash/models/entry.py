from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from ulid import ULID


class EntryKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


ContentIdentity = Tuple[EntryKind, Union[str, bytes]]


@dataclass(frozen=True)
class Snapshot:
    """One reading of the system clipboard."""
    kind: EntryKind
    payload: bytes
    text: Optional[str] = None
    mime: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "Snapshot":
        return cls(kind=EntryKind.TEXT, payload=text.encode("utf-8"), text=text)

    @classmethod
    def from_image(cls, payload: bytes, mime: str = "image/png") -> "Snapshot":
        return cls(kind=EntryKind.IMAGE, payload=payload, mime=mime)

    @property
    def identity(self) -> ContentIdentity:
        # Text dedups on the decoded string, images on the full byte content.
        if self.kind is EntryKind.TEXT:
            text = self.text
            if text is None:
                text = self.payload.decode("utf-8", errors="ignore")
            return self.kind, text
        return self.kind, self.payload


def new_entry_id() -> str:
    return f"i_{ULID.from_datetime(datetime.now())}"


@dataclass(frozen=True)
class Entry:
    """A recorded history item. Only ``pinned`` ever changes, via replace()."""
    entry_id: str
    kind: EntryKind
    payload: bytes
    text: Optional[str]
    created_at: datetime
    pinned: bool = False
    mime: Optional[str] = None

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, pinned: bool = False) -> "Entry":
        text = snapshot.text
        if snapshot.kind is EntryKind.TEXT and text is None:
            text = snapshot.payload.decode("utf-8", errors="ignore")
        return cls(
            entry_id=new_entry_id(),
            kind=snapshot.kind,
            payload=snapshot.payload,
            text=text if snapshot.kind is EntryKind.TEXT else None,
            created_at=datetime.now(),
            pinned=pinned,
            mime=snapshot.mime,
        )

    @property
    def identity(self) -> ContentIdentity:
        if self.kind is EntryKind.TEXT:
            return self.kind, self.text or ""
        return self.kind, self.payload

    def to_snapshot(self) -> Snapshot:
        return Snapshot(kind=self.kind, payload=self.payload, text=self.text, mime=self.mime)

    def summary(self) -> "EntrySummary":
        return EntrySummary(
            entry_id=self.entry_id,
            kind=self.kind,
            text=self.text,
            created_at=self.created_at,
            pinned=self.pinned,
        )

    def preview(self, max_length: int = 100) -> str:
        if self.kind is EntryKind.TEXT:
            text = self.text or ""
            if len(text) > max_length:
                return text[:max_length] + "..."
            return text
        return f"[image {len(self.payload)} bytes]"


@dataclass(frozen=True)
class EntrySummary:
    """List-view row: everything but the payload bytes."""
    entry_id: str
    kind: EntryKind
    text: Optional[str]
    created_at: datetime
    pinned: bool

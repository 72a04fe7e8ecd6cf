from abc import ABC, abstractmethod
from typing import Optional

from clipstash.models.entry import Snapshot


class ClipboardBackend(ABC):
    """Reads and writes the shared system clipboard.

    ``current_generation`` must be cheap; it is called on every poll tick.
    ``read_snapshot`` returns ``None`` when nothing usable is on the
    clipboard, ``write`` returns ``False`` when the platform refused.
    """

    @abstractmethod
    def current_generation(self) -> int:
        pass

    @abstractmethod
    def _read(self) -> Optional[Snapshot]:
        pass

    @abstractmethod
    def _write(self, snapshot: Snapshot) -> bool:
        pass

    def read_snapshot(self) -> Optional[Snapshot]:
        try:
            return self._read()
        except Exception:
            return None

    def write(self, snapshot: Snapshot) -> bool:
        try:
            return self._write(snapshot)
        except Exception:
            return False

"""Back/forward navigation history."""

import threading
from dataclasses import dataclass

from .registry import Protocol
from .url import Url


@dataclass(frozen=True)
class HistoryEntry:
    """A visited URL and the protocol hint it was opened with."""

    url: Url
    protocol: Protocol


class History:
    """Linear history with a cursor naming the current entry.

    Entries and cursor are guarded by one lock so no reader can observe a
    truncated list together with a stale cursor.
    """

    def __init__(self):
        self._entries: list[HistoryEntry] = []
        self._cursor = 0
        self._lock = threading.Lock()

    def push(self, url: Url, protocol: Protocol) -> bool:
        """Add an entry after the cursor. Returns False if it duplicated the tail."""
        with self._lock:
            # Drop forward history
            del self._entries[self._cursor + 1:]

            if self._entries and self._entries[-1].url == url:
                return False

            self._entries.append(HistoryEntry(url, protocol))
            self._cursor = len(self._entries) - 1
            return True

    def back(self) -> HistoryEntry | None:
        """Move the cursor back one entry and return it."""
        with self._lock:
            if self._cursor > 0:
                self._cursor -= 1
                return self._entries[self._cursor]
            return None

    def forward(self) -> HistoryEntry | None:
        """Move the cursor forward one entry and return it."""
        with self._lock:
            if self._cursor + 1 < len(self._entries):
                self._cursor += 1
                return self._entries[self._cursor]
            return None

    def remove_latest_entry(self) -> HistoryEntry | None:
        """Pop the tail entry, keeping the cursor within bounds."""
        with self._lock:
            if not self._entries:
                return None
            entry = self._entries.pop()
            self._cursor = min(self._cursor, max(len(self._entries) - 1, 0))
            return entry

    def can_go_back(self) -> bool:
        with self._lock:
            return self._cursor > 0

    def can_go_forward(self) -> bool:
        with self._lock:
            return self._cursor + 1 < len(self._entries)

    def current(self) -> HistoryEntry | None:
        with self._lock:
            if not self._entries:
                return None
            return self._entries[self._cursor]

    def entries(self) -> list[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    @property
    def cursor(self) -> int:
        with self._lock:
            return self._cursor

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

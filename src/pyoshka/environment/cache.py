"""Dispatch cache shared by every rendering of an environment.

Maps a symbol name to the handler it was classified as. Entries are
populated on first use and never invalidated while rendering; ``clear()``
exists for test isolation and explicit environment resets.

Thread-Safety:
- Reads are lock-free dict lookups
- Inserts take a single lock and keep the first handler stored for a name,
  so concurrent first-time classifications converge on one result

"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pyoshka.rendering.dispatch import Handler


class DispatchCache:
    """Insert-if-absent mapping of symbol name → Handler."""

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        self._entries: dict[str, Handler] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Handler | None:
        return self._entries.get(name)

    def setdefault(self, name: str, handler: Handler) -> Handler:
        """Store ``handler`` unless ``name`` is already classified.

        Returns:
            The handler now cached for ``name`` (the existing one if another
            rendering got there first).
        """
        with self._lock:
            existing = self._entries.get(name)
            if existing is not None:
                return existing
            self._entries[name] = handler
            return handler

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def snapshot(self) -> dict[str, Handler]:
        """Return a copy of the current entries."""
        return self._entries.copy()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

"""Per-key mutual exclusion.

Serializes the check-then-write-then-commit sequence of model mutations so
that two writers for the same model cannot both pass an existence check.
Writers for different models proceed independently.

Entries are reference counted and dropped once no thread holds or waits on
them, so the table only grows with the number of concurrently touched keys.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator


@dataclass
class _LockEntry:
    """Lock plus the number of threads holding or waiting on it."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    refs: int = 0


class KeyedLock:
    """A mapping from key to mutex, created on demand."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[str, _LockEntry] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            entry.refs += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.refs -= 1
                if entry.refs == 0:
                    del self._entries[key]

    def is_held(self, key: str) -> bool:
        """Check whether any thread currently holds or waits on ``key``."""
        with self._guard:
            return key in self._entries

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

# app/core/locks.py
"""
In-process keyed locks.

Allocation writes are serialised per room and per student by holding one
lock per key for the whole check-and-write transaction. Keys are always
acquired in sorted order so two requests touching the same pair of rooms
(e.g. opposite moves) cannot deadlock.
"""

from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterator, List, Optional

from app.config.logging import get_logger

logger = get_logger(__name__)


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = Lock()
        self.holders = 0


class KeyedLockRegistry:
    """
    Registry of named mutexes created on demand.

    Entries are reference counted and dropped once no caller holds or
    waits on them, so the registry does not grow with the number of rooms.
    """

    def __init__(self) -> None:
        self._guard = RLock()
        self._entries: Dict[str, _Entry] = {}

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.holders += 1
            return entry

    def _checkin(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                self._entries.pop(key, None)

    @contextmanager
    def hold(self, *keys: Optional[str]) -> Iterator[List[str]]:
        """
        Acquire every given key for the duration of the block.

        Args:
            *keys: Lock names; ``None`` and duplicates are ignored

        Yields:
            The ordered list of keys that were acquired
        """
        ordered = sorted({key for key in keys if key})
        acquired: List[tuple] = []
        try:
            for key in ordered:
                entry = self._checkout(key)
                try:
                    entry.lock.acquire()
                except BaseException:
                    self._checkin(key, entry)
                    raise
                acquired.append((key, entry))
            logger.debug(f"Acquired locks: {ordered}")
            yield ordered
        finally:
            for key, entry in reversed(acquired):
                entry.lock.release()
                self._checkin(key, entry)

    def active_keys(self) -> List[str]:
        """Keys currently held or awaited."""
        with self._guard:
            return sorted(self._entries)


def room_key(room_id: Optional[str]) -> Optional[str]:
    return f"room:{room_id}" if room_id else None


def student_key(student_id: Optional[str]) -> Optional[str]:
    return f"student:{student_id}" if student_id else None


# Shared by every AllocationService instance in the process
allocation_locks = KeyedLockRegistry()

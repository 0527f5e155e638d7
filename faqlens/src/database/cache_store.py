"""
FAQLens - FAQ Embedding Cache Store
====================================
Storage backend for embedded FAQ lists.

Design decisions:
  • **Single slot** — capacity is exactly one ``FaqCacheEntry``.  Storing
    a new entry discards the previous one wholesale; there is no
    eviction policy and no expiry.
  • **Dependency Injection** — ``FaqEmbeddingCache`` takes any
    ``CacheStore``, so tests can hand it a fresh in-memory store and
    inspect it directly.
  • **Process-wide default** — ``get_process_store()`` returns one
    shared instance that lives until the process exits.

Concurrent refreshes are tolerated: the last writer wins, and readers
always re-check the key before trusting an entry.

Usage:
    from faqlens.src.database.cache_store import get_process_store
    store = get_process_store()
    entry = store.get(key)
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from faqlens.src.core.models import FaqCacheEntry
from faqlens.src.utils.logger import get_logger

logger = get_logger(__name__)


# ── Store Protocol ────────────────────────────────────────────────────

@runtime_checkable
class CacheStore(Protocol):
    """Structural type for any FAQ embedding cache backend."""

    def get(self, key: str) -> FaqCacheEntry | None: ...

    def put(self, entry: FaqCacheEntry) -> None: ...

    def peek(self) -> FaqCacheEntry | None: ...

    def clear(self) -> None: ...


class SingleSlotCacheStore:
    """
    In-memory store holding at most one ``FaqCacheEntry``.

    The slot is swapped with a single reference assignment under
    ``_lock``; a reader sees either the old entry or the new one,
    never a partially built one.
    """

    __slots__ = ("_slot", "_lock")

    def __init__(self) -> None:
        self._slot: FaqCacheEntry | None = None
        self._lock = threading.Lock()


    def get(self, key: str) -> FaqCacheEntry | None:
        """Return the cached entry if its key equals *key*, else ``None``."""
        entry = self._slot
        if entry is not None and entry.key == key:
            return entry
        return None


    def put(self, entry: FaqCacheEntry) -> None:
        """Replace the slot with *entry*."""
        with self._lock:
            replaced = self._slot is not None
            self._slot = entry
        logger.debug("[CACHE] Slot %s (%d entries).", "replaced" if replaced else "filled", len(entry.entries))


    def peek(self) -> FaqCacheEntry | None:
        """Return whatever the slot holds, regardless of key."""
        return self._slot


    def clear(self) -> None:
        with self._lock:
            self._slot = None


    def __repr__(self) -> str:
        entry = self._slot
        return f"SingleSlotCacheStore(entries={len(entry.entries) if entry else 0})"


# ── Process-wide singleton ────────────────────────────────────────────
_STORE_LOCK = threading.Lock()
_process_store: SingleSlotCacheStore | None = None


def get_process_store() -> SingleSlotCacheStore:
    """
    Return the **singleton** store shared by every request in this process.

    Thread-safe via ``_STORE_LOCK``.
    """
    global _process_store
    if _process_store is None:
        with _STORE_LOCK:
            if _process_store is None:
                logger.info("Creating process-wide FAQ embedding cache.")
                _process_store = SingleSlotCacheStore()
    return _process_store

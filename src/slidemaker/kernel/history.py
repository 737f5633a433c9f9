from __future__ import annotations

import threading
from typing import List, Optional

from slidemaker.core.logging import get_logger

from .models import Deck, HistoryEntry

log = get_logger(__name__)

DEFAULT_CAPACITY = 20


class DeckHistory:
    """
    Most-recent-first list of generated decks, capped at `capacity`.
    Recording a deck inserts at the front and evicts the oldest entries in
    one locked step, so concurrent generations never lose or duplicate entries.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, entries: Optional[List[HistoryEntry]] = None):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._entries: List[HistoryEntry] = list(entries or [])[:capacity]

    def record(self, deck: Deck) -> HistoryEntry:
        entry = HistoryEntry(
            title=deck.presentation_title,
            theme=deck.theme,
            slides=list(deck.slides),
        )
        with self._lock:
            self._entries.insert(0, entry)
            evicted = self._entries[self.capacity:]
            del self._entries[self.capacity:]
        for old in evicted:
            log.info("history evicted id=%s", old.id)
        return entry

    def entries(self) -> List[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        with self._lock:
            return next((e for e in self._entries if e.id == entry_id), None)

    def remove(self, entry_id: str) -> bool:
        with self._lock:
            for i, e in enumerate(self._entries):
                if e.id == entry_id:
                    del self._entries[i]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

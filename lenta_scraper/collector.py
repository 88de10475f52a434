"""
Dedup Collector - the single shared store of a scraping run.

Payloads are processed concurrently (one task per captured response, the
extraction itself in worker threads), and overlapping API responses return
the same products again and again. Every extracted Item goes through
offer(); the collector keeps the first copy of each (name, price, url)
and silently drops the rest.

    task 1 ──┐
    task 2 ──┼──> offer(item) ──> [lock] seen? ─ no ─> add key, append
    task N ──┘                          └─ yes ─> drop

The seen-set and the item list are only touched under one lock, and nothing
is awaited or called back while it is held.
"""

import threading
from typing import Iterable, List, Set, Tuple

from .models import Item
from .logger import get_logger

log = get_logger('collector')


class DedupCollector:
    """Thread- and task-safe accumulator of unique Items."""

    def __init__(self):
        self._lock = threading.Lock()
        self._seen: Set[Tuple[str, str, str]] = set()
        self._items: List[Item] = []
        self._offered = 0

    def offer(self, item: Item) -> bool:
        """
        Add item unless an identical one was already accepted.

        Returns:
            True if accepted, False if it was a duplicate

        Raises:
            ValueError: item has an empty name, price or url
        """
        item.validate()
        key = item.key

        with self._lock:
            self._offered += 1
            if key in self._seen:
                return False
            self._seen.add(key)
            self._items.append(item)
            return True

    def offer_many(self, items: Iterable[Item]) -> int:
        """Offer each item; returns how many were accepted."""
        accepted = 0
        for item in items:
            if self.offer(item):
                accepted += 1
        return accepted

    def snapshot(self) -> List[Item]:
        """Independent copy of the accepted items (no ordering guarantee)."""
        with self._lock:
            return list(self._items)

    @property
    def offered_count(self) -> int:
        with self._lock:
            return self._offered

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def log_summary(self):
        with self._lock:
            accepted, offered = len(self._items), self._offered
        log.info(f"Collected {accepted} unique item(s) from {offered} offered")

"""
Helios Intel - Collection Sync

A CollectionView keeps a local copy of one store's list in step with every
writer in the process: on each broadcast for that store it calls list()
again and replaces its items wholesale. No diffing, no partial invalidation.

Cross-writer ordering is last-write-wins at collection granularity.

Usage:
    with CollectionView(workspace.notifications, workspace.bus) as view:
        ...
        unread = [n for n in view.items if not n.is_read]
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class CollectionView:
    """Live, read-only snapshot of a store's collection."""

    def __init__(self, store, bus, on_change: Optional[Callable[[List], None]] = None):
        self.store = store
        self.bus = bus
        self.on_change = on_change
        self.refresh_count = 0
        self.items: List = store.list()
        self._unsubscribe = bus.on_every(store.event_name, self._handle_event)

    def _handle_event(self, event_name: str):
        self.refresh()

    def refresh(self) -> List:
        """Re-read the whole collection from the store."""
        self.items = self.store.list()
        self.refresh_count += 1
        if self.on_change is not None:
            self.on_change(self.items)
        return self.items

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def close(self):
        """Stop listening. Safe to call twice."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

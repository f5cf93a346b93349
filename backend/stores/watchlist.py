"""
Helios Intel - Watchlist Store

Two keys under one broadcast event: watched items and the alerts raised
for them. Alerts are de-duplicated by (watchlist item, title).
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from constants import WATCHLIST_ITEMS_KEY, WATCHLIST_ALERTS_KEY, WATCHLIST_UPDATED_EVENT
from schemas.workspace import WatchlistAlert, WatchlistItem
from stores.base import CollectionStore

logger = logging.getLogger(__name__)


class WatchlistAlertStore(CollectionStore[WatchlistAlert]):
    storage_key = WATCHLIST_ALERTS_KEY
    event_name = WATCHLIST_UPDATED_EVENT
    model = WatchlistAlert
    timestamp_field = "timestamp"

    def _sort(self, items: List[WatchlistAlert]) -> List[WatchlistAlert]:
        return sorted(items, key=lambda a: a.timestamp, reverse=True)


class WatchlistStore(CollectionStore[WatchlistItem]):
    storage_key = WATCHLIST_ITEMS_KEY
    event_name = WATCHLIST_UPDATED_EVENT
    model = WatchlistItem

    def __init__(self, storage, bus):
        super().__init__(storage, bus)
        self.alerts = WatchlistAlertStore(storage, bus)

    def find_by_name(self, name: str) -> Optional[WatchlistItem]:
        wanted = name.strip().lower()
        for item in self._load():
            if item.name.strip().lower() == wanted:
                return item
        return None

    def add(self, partial: Union[BaseModel, Dict[str, Any]]) -> WatchlistItem:
        """Watch a prospect or competitor. Re-adding a watched name is a no-op."""
        data = self._to_stored_keys(partial)
        existing = self.find_by_name(data.get("name", ""))
        if existing is not None:
            logger.info(f"Watchlist already contains {existing.name}")
            return existing
        return super().add(data)

    def list_alerts(self) -> List[WatchlistAlert]:
        return self.alerts.list()

    def add_alert(self, partial: Union[BaseModel, Dict[str, Any]]) -> Optional[WatchlistAlert]:
        """Store an alert unless one with the same item and title exists."""
        data = self.alerts._to_stored_keys(partial)
        item_id = data.get("watchlistItemId")
        title = (data.get("title") or "").strip().lower()
        for alert in self.alerts.list():
            if alert.watchlist_item_id == item_id and alert.title.strip().lower() == title:
                logger.debug(f"Duplicate watchlist alert skipped: {alert.title}")
                return None
        return self.alerts.add(data)

    def clear_alerts(self):
        self.storage.delete(WATCHLIST_ALERTS_KEY)
        self.bus.emit(self.event_name)

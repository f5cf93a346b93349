"""
Helios Intel - Notification Store

Only is_read ever changes after creation; there is no user-facing delete.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from constants import NOTIFICATION_STORE_KEY, NOTIFICATIONS_UPDATED_EVENT
from schemas.collaboration import Notification
from stores.base import CollectionStore

logger = logging.getLogger(__name__)


class NotificationStore(CollectionStore[Notification]):
    storage_key = NOTIFICATION_STORE_KEY
    event_name = NOTIFICATIONS_UPDATED_EVENT
    model = Notification

    def _sort(self, items: List[Notification]) -> List[Notification]:
        return sorted(items, key=lambda n: n.created_at, reverse=True)

    def add(self, partial: Union[BaseModel, Dict[str, Any]]) -> Notification:
        data = self._to_stored_keys(partial)
        data["isRead"] = False
        return super().add(data)

    def mark_as_read(self, notification_id: str) -> Optional[List[Notification]]:
        return self.update(notification_id, {"is_read": True})

    def mark_all_as_read(self) -> List[Notification]:
        items = self._load()
        if not any(not n.is_read for n in items):
            return self._sort(items)
        updated = [n.model_copy(update={"is_read": True}) for n in items]
        self._persist(updated)
        return self._sort(updated)

    def unread_count(self) -> int:
        return sum(1 for n in self._load() if not n.is_read)

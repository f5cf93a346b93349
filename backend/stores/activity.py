"""
Helios Intel - Activity Log

Insert-only record of generations and outreach drafts, newest first.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from constants import ACTIVITY_LOG_KEY, ACTIVITY_UPDATED_EVENT
from schemas.collaboration import ActivityEvent, ActivityType
from stores.base import CollectionStore

logger = logging.getLogger(__name__)


class ActivityLog(CollectionStore[ActivityEvent]):
    storage_key = ACTIVITY_LOG_KEY
    event_name = ACTIVITY_UPDATED_EVENT
    model = ActivityEvent
    timestamp_field = "timestamp"

    def record(self, activity_type: ActivityType, module: str, primary: str,
               secondary: Optional[str] = None) -> ActivityEvent:
        details = {"primary": primary}
        if secondary:
            details["secondary"] = secondary
        return self.add({"type": activity_type, "module": module, "details": details})

    def update(self, entity_id: str, partial) -> Optional[List[ActivityEvent]]:
        logger.warning(f"Update skipped: activity log is insert-only ({entity_id})")
        return None

    def remove(self, entity_id: str) -> Optional[List[ActivityEvent]]:
        logger.warning(f"Remove skipped: activity log is insert-only ({entity_id})")
        return None

    def summary(self) -> Dict[str, Any]:
        """Counts by type and by module, plus the most common prospects."""
        events = self._load()
        by_type = Counter(e.type.value for e in events)
        by_module = Counter(e.module for e in events)
        by_prospect = Counter(e.details.primary for e in events)
        return {
            "total": len(events),
            "by_type": dict(by_type),
            "by_module": dict(by_module),
            "top_prospects": by_prospect.most_common(5),
        }

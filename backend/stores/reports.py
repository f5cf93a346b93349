"""
Helios Intel - Report Store

Saved prospect profiles, SWOT analyses and template reports.
"""

import logging
from typing import List, Optional

from constants import REPORT_STORE_KEY, REPORTS_UPDATED_EVENT
from schemas.reports import SavedReport
from stores.base import CollectionStore

logger = logging.getLogger(__name__)


class ReportStore(CollectionStore[SavedReport]):
    storage_key = REPORT_STORE_KEY
    event_name = REPORTS_UPDATED_EVENT
    model = SavedReport
    timestamp_field = "saved_at"

    def find_by_title(self, title: str) -> Optional[SavedReport]:
        """Most recent report whose title matches case-insensitively."""
        wanted = title.strip().lower()
        for report in self.list():
            if report.title.strip().lower() == wanted:
                return report
        return None

    def save_extension(self, report_id: str, field: str, value) -> Optional[List[SavedReport]]:
        """Write a single extension slot (e.g. a domain briefing)."""
        return self.update(report_id, {field: value})

"""
Helios Intel - Deal Playbook Store

Playbooks are persisted as a JSON object keyed by the lower-cased prospect
name, like prospect books. A playbook is created empty by name or seeded
once from a prospect profile report; seeding never overwrites an existing
playbook.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from constants import (
    DEAL_PLAYBOOK_STORE_KEY,
    DEAL_PLAYBOOKS_UPDATED_EVENT,
    PROSPECT_PROFILE_TITLE_PREFIX,
)
from schemas.reports import ReportData
from schemas.workspace import DealPlaybook
from stores.base import CollectionStore, utc_now_iso
from stores.prospect_books import book_key

logger = logging.getLogger(__name__)


def prospect_name_from_title(title: str) -> str:
    return title.replace(PROSPECT_PROFILE_TITLE_PREFIX, "", 1).strip()


class DealPlaybookStore(CollectionStore[DealPlaybook]):
    storage_key = DEAL_PLAYBOOK_STORE_KEY
    event_name = DEAL_PLAYBOOKS_UPDATED_EVENT
    model = DealPlaybook
    id_field = "prospect_name"
    timestamp_field = "created_at"

    def _decode(self, data: Any) -> List[DealPlaybook]:
        if not isinstance(data, dict):
            raise ValueError(f"expected JSON object, got {type(data).__name__}")
        return [self.model.model_validate(playbook) for playbook in data.values()]

    def _encode(self, items: List[DealPlaybook]) -> Any:
        return {book_key(p.prospect_name): self._serialize(p) for p in items}

    def _id_of(self, entity: DealPlaybook) -> str:
        return book_key(entity.prospect_name)

    def _sort(self, items: List[DealPlaybook]) -> List[DealPlaybook]:
        return sorted(items, key=lambda p: p.updated_at, reverse=True)

    def get(self, prospect_name: str) -> Optional[DealPlaybook]:
        return super().get(book_key(prospect_name))

    def create(self, prospect_name: str,
               fields: Optional[Dict[str, Any]] = None) -> Optional[DealPlaybook]:
        """
        Create a playbook for prospect_name.

        Returns None for a blank name or when the prospect already has a
        playbook.
        """
        prospect_name = (prospect_name or "").strip()
        if not prospect_name:
            return None

        playbooks = self._load()
        key = book_key(prospect_name)
        if any(self._id_of(p) == key for p in playbooks):
            logger.info(f"Deal playbook already exists: {prospect_name}")
            return None

        now = utc_now_iso()
        data = self._to_stored_keys(fields or {})
        data.update({"prospectName": prospect_name, "createdAt": now, "updatedAt": now})
        playbook = self.model.model_validate(data)
        self._persist([playbook] + playbooks)
        logger.info(f"Deal playbook created: {prospect_name}")
        return playbook

    def seed_from_report(self, report: ReportData) -> Optional[DealPlaybook]:
        """Start a playbook with the report's challenges as pain points and initiatives as goals."""
        items = report.challenges_and_initiatives or []
        return self.create(prospect_name_from_title(report.title), {
            "pain_points": "\n".join(c.description for c in items if c.type == "challenge"),
            "client_goals": "\n".join(c.description for c in items if c.type == "initiative"),
        })

    def add(self, partial: Union[BaseModel, Dict[str, Any]]) -> Optional[DealPlaybook]:
        data = self._to_stored_keys(partial)
        return self.create(data.pop("prospectName", ""), data)

    def update(self, prospect_name: str,
               partial: Union[BaseModel, Dict[str, Any]]) -> Optional[List[DealPlaybook]]:
        changes = self._to_stored_keys(partial)
        changes["updatedAt"] = utc_now_iso()
        return super().update(book_key(prospect_name), changes)

    def update_field(self, prospect_name: str, field_name: str, value: str) -> Optional[DealPlaybook]:
        if field_name not in self.model.model_fields or field_name in ("prospect_name", "created_at"):
            raise ValueError(f"Not a playbook field: {field_name}")
        if self.update(prospect_name, {field_name: value}) is None:
            return None
        return self.get(prospect_name)

    def remove(self, prospect_name: str) -> Optional[List[DealPlaybook]]:
        return super().remove(book_key(prospect_name))

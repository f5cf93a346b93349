"""
Helios Intel - Report Template Store

Default templates are seeded once per storage, guarded by a flag key, so a
user who deletes a default never sees it come back.
"""

import logging
from typing import Any, Dict, List, Union

from pydantic import BaseModel

from constants import (
    TEMPLATE_STORE_KEY,
    TEMPLATES_UPDATED_EVENT,
    SEED_TEMPLATES_INITIALIZED_KEY,
)
from schemas.workspace import ReportTemplate
from stores.base import CollectionStore, generate_id, utc_now_iso
from stores.seed_templates import SEED_TEMPLATES

logger = logging.getLogger(__name__)


class TemplateStore(CollectionStore[ReportTemplate]):
    storage_key = TEMPLATE_STORE_KEY
    event_name = TEMPLATES_UPDATED_EVENT
    model = ReportTemplate

    def _sort(self, items: List[ReportTemplate]) -> List[ReportTemplate]:
        # Defaults first, then newest custom templates
        by_date = sorted(items, key=lambda t: t.created_at, reverse=True)
        return sorted(by_date, key=lambda t: 0 if t.is_default else 1)

    def ensure_seeded(self) -> bool:
        """Insert the default templates if this storage has never been seeded."""
        if self.storage.get(SEED_TEMPLATES_INITIALIZED_KEY):
            return False

        existing = self._load()
        default_names = {t.name for t in existing if t.is_default}
        now = utc_now_iso()
        seeds = [
            self.model.model_validate({**seed, "id": generate_id(), "createdAt": now})
            for seed in SEED_TEMPLATES
            if seed["name"] not in default_names
        ]
        # Flag first: persisting broadcasts, and listeners call list() again
        self.storage.set(SEED_TEMPLATES_INITIALIZED_KEY, "true")
        try:
            self._persist(seeds + existing)
        except Exception:
            self.storage.delete(SEED_TEMPLATES_INITIALIZED_KEY)
            raise
        logger.info(f"Seeded {len(seeds)} default report templates")
        return True

    def list(self) -> List[ReportTemplate]:
        self.ensure_seeded()
        return super().list()

    def add(self, partial: Union[BaseModel, Dict[str, Any]]) -> ReportTemplate:
        """Save a custom template. Custom templates are never defaults."""
        data = self._to_stored_keys(partial)
        data["isDefault"] = False
        return super().add(data)

    @staticmethod
    def render_prompt(template: ReportTemplate, prospect_name: str, user_criteria: str = "") -> str:
        return (
            template.prompt
            .replace("{{prospectName}}", prospect_name)
            .replace("{{userCriteria}}", user_criteria or "")
        )

    @staticmethod
    def needs_criteria(template: ReportTemplate) -> bool:
        return "{{userCriteria}}" in template.prompt

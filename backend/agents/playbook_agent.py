"""
Helios Intel - Deal Playbook Agent
==================================

AI assist for deal playbook fields. Each assistable field drafts from a
fixed set of other fields on the same playbook and writes the draft back.
"""

import logging
from typing import Any, Dict, List, Tuple

from ai_router import TaskType

from .base_agent import BaseAgent, AgentResponse
from .prompts import playbook_assist_prompt

logger = logging.getLogger(__name__)

# field -> (label shown to the model, fields used as context)
ASSIST_FIELDS: Dict[str, Tuple[str, List[str]]] = {
    "pain_points": ("Prospect pain points", ["prospect_name", "opportunity_identified"]),
    "business_case": ("Problem statement / business case", ["prospect_name", "pain_points"]),
    "competitors": ("Competitor analysis", ["prospect_name"]),
    "story_telling": ("Storytelling to win", ["prospect_name", "pain_points", "business_case"]),
}


def field_label(field_name: str) -> str:
    return field_name.replace("_", " ").title()


def assist_context(playbook, context_fields: List[str]) -> str:
    lines = [f"Prospect: {playbook.prospect_name}"]
    for name in context_fields:
        lines.append(f"{field_label(name)}: {getattr(playbook, name) or 'Not specified'}")
    return "\n".join(lines)


class PlaybookAgent(BaseAgent):
    """Playbook Agent - drafts one playbook field at a time."""

    failure_message = "AI assist failed. Please try again."

    def __init__(self, ai_router=None, deal_playbooks=None):
        super().__init__(agent_type="playbook", ai_router=ai_router)
        self.deal_playbooks = deal_playbooks

    async def assist(self, prospect_name: str, field_name: str) -> AgentResponse:
        """Draft field_name for the prospect's playbook and save it."""
        if field_name not in ASSIST_FIELDS:
            raise ValueError(f"AI assist not available for field: {field_name}")
        return await self.process_request(prospect_name, {"field": field_name})

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        field_name = context["field"]
        playbook = self.deal_playbooks.get(user_input)
        if playbook is None:
            return self.error_response(f"No deal playbook for {user_input}.")

        label, context_fields = ASSIST_FIELDS[field_name]
        result = await self._generate(
            playbook_assist_prompt(assist_context(playbook, context_fields), label),
            TaskType.PLAYBOOK_ASSIST
        )
        draft = result.text.strip()
        if not draft:
            return self.error_response(self.failure_message)

        updated = self.deal_playbooks.update_field(playbook.prospect_name, field_name, draft)
        logger.info(f"Drafted {field_name} for {playbook.prospect_name}")
        return self._response_from(result, text=draft, data=updated, field=field_name)

"""
Helios Intel - Lead Generation Agent
====================================

Search-grounded list of companies matching an ideal customer profile.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ai_router import TaskType
from extraction import parse_json_payload
from schemas.ai import LeadGenerationResult
from schemas.collaboration import ActivityType
from schemas.reports import ModuleType

from .base_agent import BaseAgent, AgentResponse
from .prompts import lead_generation_prompt

logger = logging.getLogger(__name__)


def search_summary(vertical: str, location: str = "", keywords: str = "") -> str:
    """Activity description, e.g. "Search: Payers in Ohio for risk adjustment"."""
    text = f"Search: {vertical}"
    if location:
        text += f" in {location}"
    if keywords:
        text += f" for {keywords}"
    return text


class LeadGenerationAgent(BaseAgent):
    """Lead Generation Agent - 5 to 10 prospects with a one-line reason each."""

    failure_message = "An error occurred while finding prospects. Please try again."

    def __init__(self, ai_router=None, activity_log=None):
        super().__init__(agent_type="leads", ai_router=ai_router, activity_log=activity_log)

    async def find_leads(self, vertical: str, location: str = "", keywords: str = "") -> AgentResponse:
        vertical = (vertical or "").strip()
        if not vertical:
            return self.error_response("Please choose an industry vertical.")
        return await self.process_request(vertical, {
            "location": (location or "").strip(),
            "keywords": (keywords or "").strip(),
        })

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        location = context.get("location", "")
        keywords = context.get("keywords", "")
        result = await self._generate(
            lead_generation_prompt(user_input, location, keywords),
            TaskType.LEAD_GENERATION,
            use_search=True,
            json_response=True
        )

        if not result.text.strip():
            logger.warning(f"Empty lead generation answer for {user_input}")
            leads = LeadGenerationResult()
        else:
            parsed = parse_json_payload(result.text)
            if not isinstance(parsed, dict):
                return self.error_response(self.failure_message, raw_text=result.text)
            try:
                leads = LeadGenerationResult.model_validate({"leads": parsed.get("leads") or []})
            except ValidationError as e:
                logger.warning(f"Lead list invalid: {e.error_count()} errors")
                return self.error_response(self.failure_message, raw_text=result.text)
            leads.citations = list(result.sources)

        self._record_activity(
            ActivityType.GENERATION,
            ModuleType.LEAD_GENERATION.value,
            search_summary(user_input, location, keywords)
        )
        return self._response_from(result, text=f"{len(leads.leads)} prospects found.", data=leads)

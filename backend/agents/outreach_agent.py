"""
Helios Intel - Outreach Agent
=============================

Personalized outreach emails and pre-meeting briefings built from a saved
prospect report.

Outreach drafts are logged as OUTREACH activity with
"<persona> / <tone>" as the secondary detail.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ai_router import TaskType
from errors import AITransportError
from extraction import parse_json_payload
from schemas.ai import EmailDraft
from schemas.collaboration import ActivityType

from .base_agent import BaseAgent, AgentResponse
from .prompts import meeting_briefing_prompt, outreach_email_prompt

logger = logging.getLogger(__name__)

OUTREACH_MODULE = "Outreach Email"


class OutreachAgent(BaseAgent):
    """
    Outreach Agent - email drafts and meeting briefings.

    Usage:
        response = await agent.draft_email("Acme Health", report.content,
                                           persona="CIO", tone="Consultative")
        response.data  # EmailDraft
    """

    failure_message = "Failed to generate email. Please try again."

    def __init__(self, ai_router=None, activity_log=None):
        super().__init__(agent_type="outreach", ai_router=ai_router, activity_log=activity_log)

    async def draft_email(self, prospect_name: str, report_content: str,
                          persona: str, tone: str) -> AgentResponse:
        return await self.process_request(prospect_name, {
            "report_content": report_content,
            "persona": persona,
            "tone": tone,
        })

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        persona = context.get("persona", "")
        tone = context.get("tone", "")
        result = await self._generate(
            outreach_email_prompt(user_input, context.get("report_content", ""), persona, tone),
            TaskType.OUTREACH,
            json_response=True
        )

        parsed = parse_json_payload(result.text)
        try:
            draft = EmailDraft.model_validate(parsed) if isinstance(parsed, dict) else None
        except ValidationError as e:
            logger.warning(f"Email draft missing fields: {e.error_count()} errors")
            draft = None

        if draft is None:
            return self.error_response(self.failure_message, raw_text=result.text)

        self._record_activity(ActivityType.OUTREACH, OUTREACH_MODULE, user_input, f"{persona} / {tone}")
        return self._response_from(result, text=f"Subject: {draft.subject}\n\n{draft.body}", data=draft)

    async def meeting_briefing(self, prospect_name: str, report_content: str,
                               attendees: str, objective: str) -> AgentResponse:
        """Markdown briefing note for an upcoming meeting."""
        try:
            result = await self._generate(
                meeting_briefing_prompt(prospect_name, report_content, attendees, objective),
                TaskType.MEETING_BRIEFING
            )
        except AITransportError as e:
            logger.error(f"Meeting briefing failed for {prospect_name}: {e}")
            return self.error_response("Failed to generate briefing. Please try again.")

        if not result.text.strip():
            return self.error_response("Failed to generate briefing. Please try again.")
        return self._response_from(result)

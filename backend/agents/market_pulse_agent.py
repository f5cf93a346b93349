"""
Helios Intel - Market Pulse Agent
=================================

Per-vertical market intelligence:
- trends(): 3-5 search-grounded trends with a source link each
- summary(): bullet points per time horizon (this year through looking ahead)
- insights(): a "What You Need to Know" briefing for one sales persona

Nothing here is persisted.
"""

import json
import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from ai_router import TaskType
from errors import AITransportError
from extraction import parse_json_payload
from schemas.ai import MarketPulseSummary, MarketTrend
from schemas.collaboration import ActivityType
from schemas.reports import ModuleType

from .base_agent import BaseAgent, AgentResponse
from .prompts import (
    PERSONA_INSTRUCTIONS,
    market_pulse_summary_prompt,
    market_trends_prompt,
    personalized_insights_prompt,
)

logger = logging.getLogger(__name__)

PERSONAS: List[str] = list(PERSONA_INSTRUCTIONS)


class MarketPulseAgent(BaseAgent):
    """Market Pulse Agent - trends, time-horizon summary and persona insights."""

    failure_message = "Failed to generate market summary. Please try again."

    def __init__(self, ai_router=None, activity_log=None):
        super().__init__(agent_type="market_pulse", ai_router=ai_router, activity_log=activity_log)

    async def trends(self, vertical: str) -> AgentResponse:
        """Trends missing a uri borrow the citation at the same position."""
        vertical = (vertical or "").strip()
        if not vertical:
            return self.error_response("Please choose a vertical.")
        try:
            result = await self._generate(
                market_trends_prompt(vertical),
                TaskType.MARKET_PULSE,
                use_search=True,
                json_response=True
            )
        except AITransportError as e:
            logger.error(f"Market trends failed for {vertical}: {e}")
            return self.error_response("Failed to fetch market trends. Please try again.")

        if not result.text.strip():
            logger.warning(f"Empty market trends answer for {vertical}")
            return self._response_from(result, text="", data=[])

        parsed = parse_json_payload(result.text)
        raw_trends = parsed.get("trends") if isinstance(parsed, dict) else None
        if not isinstance(raw_trends, list):
            return self.error_response("Failed to fetch market trends. Please try again.", raw_text=result.text)

        trends: List[MarketTrend] = []
        for index, raw in enumerate(raw_trends):
            try:
                trend = MarketTrend.model_validate(raw)
            except ValidationError:
                logger.warning(f"Skipping malformed market trend {index} for {vertical}")
                continue
            if not trend.uri and index < len(result.sources):
                trend.uri = result.sources[index].uri
            trends.append(trend)

        return self._response_from(result, text="\n".join(f"- {t.title}" for t in trends), data=trends)

    async def summary(self, vertical: str) -> AgentResponse:
        vertical = (vertical or "").strip()
        if not vertical:
            return self.error_response("Please choose a vertical.")
        return await self.process_request(vertical)

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        result = await self._generate(
            market_pulse_summary_prompt(user_input),
            TaskType.MARKET_PULSE,
            use_search=True,
            json_response=True
        )

        parsed = parse_json_payload(result.text)
        try:
            pulse = MarketPulseSummary.model_validate(parsed) if isinstance(parsed, dict) else None
        except ValidationError as e:
            logger.warning(f"Market pulse summary invalid: {e.error_count()} errors")
            pulse = None
        if pulse is None:
            return self.error_response(self.failure_message, raw_text=result.text)

        self._record_activity(ActivityType.GENERATION, ModuleType.MARKET_PULSE.value, user_input)
        return self._response_from(result, data=pulse)

    async def insights(self, pulse: MarketPulseSummary, persona: str) -> AgentResponse:
        if persona not in PERSONA_INSTRUCTIONS:
            raise ValueError(f"Unknown persona: {persona}")

        summary_json = json.dumps(pulse.to_store(), indent=2)
        try:
            result = await self._generate(
                personalized_insights_prompt(summary_json, persona),
                TaskType.MARKET_PULSE
            )
        except AITransportError as e:
            logger.error(f"Persona insights failed for {persona}: {e}")
            return self.error_response("Failed to generate insights. Please try again.")

        if not result.text.strip():
            return self.error_response("Failed to generate insights. Please try again.")
        return self._response_from(result, persona=persona)

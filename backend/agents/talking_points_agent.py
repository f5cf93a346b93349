"""
Helios Intel - Talking Points Agent
===================================

Maps a prospect challenge or initiative onto the Helios product suite.

Produces sales talking points for every challenge and, when no product
fits, a gap analysis and new solution idea that can be saved to the
product gap report.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ai_router import TaskType
from errors import StorageError
from extraction import parse_json_payload
from schemas.ai import TalkingPointsResult
from schemas.workspace import ProductGap

from .base_agent import BaseAgent, AgentResponse
from .prompts import talking_points_prompt

logger = logging.getLogger(__name__)


class TalkingPointsAgent(BaseAgent):
    """Talking Points Agent - fit analysis plus product gap capture."""

    failure_message = "Failed to generate talking points. Please try again."

    def __init__(self, ai_router=None, product_gaps=None):
        super().__init__(agent_type="talking_points", ai_router=ai_router)
        self.product_gaps = product_gaps

    async def analyze(self, challenge: str, prospect_name: str, prospect_context: str) -> AgentResponse:
        return await self.process_request(challenge, {
            "prospect_name": prospect_name,
            "prospect_context": prospect_context,
        })

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        result = await self._generate(
            talking_points_prompt(user_input, context.get("prospect_name", ""),
                                  context.get("prospect_context", "")),
            TaskType.TALKING_POINTS,
            json_response=True
        )

        parsed = parse_json_payload(result.text)
        if not isinstance(parsed, dict):
            return self.error_response(self.failure_message, raw_text=result.text)
        try:
            points = TalkingPointsResult.model_validate(parsed)
        except ValidationError as e:
            logger.warning(f"Talking points response invalid: {e.error_count()} errors")
            return self.error_response(self.failure_message, raw_text=result.text)

        return self._response_from(result, text=points.talking_points, data=points)

    def save_gap(self, prospect_name: str, challenge: str,
                 result: TalkingPointsResult) -> Optional[ProductGap]:
        """
        Persist a product gap. Only gaps with a solution idea are saved.

        Returns None when nothing was saved, including on a storage failure.
        """
        if not result.is_gap or not (result.new_solution_idea or "").strip():
            logger.info(f"Not a saveable product gap for {prospect_name}: {challenge[:60]}")
            return None
        if self.product_gaps is None:
            raise RuntimeError("TalkingPointsAgent has no product gap store configured")
        try:
            return self.product_gaps.add({
                "prospect_name": prospect_name,
                "challenge_description": challenge,
                "gap_analysis": result.gap_analysis,
                "new_solution_idea": result.new_solution_idea,
            })
        except StorageError as e:
            logger.error(f"Could not save product gap for {prospect_name}: {e}")
            return None

"""
Helios Intel - SWOT Agent
=========================

Search-grounded SWOT analysis, saved to the report library.
"""

import logging
from typing import Any, Dict, Optional

from ai_router import TaskType
from constants import SWOT_TITLE_PREFIX
from schemas.collaboration import ActivityType
from schemas.reports import ModuleType, ReportData, SwotSections
from section_parser import parse_swot

from .base_agent import BaseAgent, AgentResponse
from .prompts import swot_prompt

logger = logging.getLogger(__name__)


class SwotAgent(BaseAgent):
    """SWOT Agent - four bounded sections, missing ones read "Not available."."""

    failure_message = "Failed to generate SWOT analysis. Please try again."

    def __init__(self, ai_router=None, reports=None, activity_log=None):
        super().__init__(agent_type="swot", ai_router=ai_router, activity_log=activity_log)
        self.reports = reports

    async def generate(self, company_name: str) -> AgentResponse:
        """Generate, parse and persist a SWOT analysis."""
        company_name = (company_name or "").strip()
        if not company_name:
            return self.error_response("Please enter a company name.")
        return await self.process_request(company_name)

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        result = await self._generate(swot_prompt(user_input), TaskType.SWOT, use_search=True)
        sections = SwotSections(**parse_swot(result.text))

        saved: Optional[Any] = None
        if self.reports is not None:
            saved = self.reports.add(ReportData(
                title=f"{SWOT_TITLE_PREFIX}{user_input}",
                content=result.text,
                citations=result.sources,
                module_type=ModuleType.SWOT_ANALYSIS.value,
            ))
            logger.info(f"SWOT analysis saved: {saved.title} ({saved.id})")

        self._record_activity(ActivityType.GENERATION, ModuleType.SWOT_ANALYSIS.value, user_input)

        response = self._response_from(result, data=sections)
        if saved is not None:
            response.metadata["report_id"] = saved.id
        return response

"""
Helios Intel - RFP Agent
========================

Breaks an RFP, RFI or security questionnaire into requirements with a
suggested answer and an ANSWERED/GAP status, and saves the breakdown to
the report library as a markdown table.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ai_router import TaskType
from constants import RFP_REPORT_TITLE
from extraction import parse_json_payload
from schemas.ai import RfpAnalysisResult
from schemas.collaboration import ActivityType
from schemas.reports import ModuleType, ReportData

from .base_agent import BaseAgent, AgentResponse
from .prompts import rfp_analysis_prompt

logger = logging.getLogger(__name__)

RFP_INTRO = (
    "Based on the provided document, here is a breakdown of the requirements, "
    "suggested answers, and identified gaps.\n\n"
)


def _cell(text: str) -> str:
    return text.replace("\n", "<br />").replace("|", "\\|")


def format_rfp_table(analysis: RfpAnalysisResult) -> str:
    lines = [
        "| # | Status | Requirement | Suggested Answer |",
        "|---|---|---|---|",
    ]
    for index, item in enumerate(analysis.analysis, 1):
        lines.append(
            f"| {index} | {item.status.value} | {_cell(item.requirement)} | {_cell(item.suggested_answer)} |"
        )
    return RFP_INTRO + "\n".join(lines) + "\n"


class RfpAgent(BaseAgent):
    """RFP Agent - requirement extraction and gap flagging."""

    failure_message = "Failed to analyze the document. Please try again."

    def __init__(self, ai_router=None, reports=None, activity_log=None):
        super().__init__(agent_type="rfp", ai_router=ai_router, activity_log=activity_log)
        self.reports = reports

    async def analyze(self, rfp_text: str) -> AgentResponse:
        if not rfp_text or not rfp_text.strip():
            return self.error_response("Please paste the content of the RFP or questionnaire.")
        return await self.process_request(rfp_text.strip())

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        result = await self._generate(rfp_analysis_prompt(user_input), TaskType.RFP_ANALYSIS, json_response=True)

        parsed = parse_json_payload(result.text)
        if not isinstance(parsed, dict) or not isinstance(parsed.get("analysis"), list):
            logger.warning("RFP analysis returned no analysis list")
            return self.error_response(self.failure_message, raw_text=result.text)

        rows = [
            {**row, "status": str(row.get("status", "")).strip().upper()}
            for row in parsed["analysis"] if isinstance(row, dict)
        ]
        try:
            analysis = RfpAnalysisResult.model_validate({"analysis": rows})
        except ValidationError as e:
            logger.warning(f"RFP analysis invalid: {e.error_count()} errors")
            return self.error_response(self.failure_message, raw_text=result.text)

        content = format_rfp_table(analysis)
        saved = None
        if self.reports is not None:
            saved = self.reports.add(ReportData(
                title=RFP_REPORT_TITLE,
                content=content,
                module_type=ModuleType.RFP_ANALYZER.value,
            ))
            logger.info(f"RFP analysis saved: {len(analysis.analysis)} requirements ({saved.id})")

        self._record_activity(ActivityType.GENERATION, ModuleType.RFP_ANALYZER.value, "RFP Analysis")

        response = self._response_from(result, text=content, data=analysis)
        if saved is not None:
            response.metadata["report_id"] = saved.id
        return response

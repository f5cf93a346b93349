"""
Helios Intel - Template Report Agent
====================================

Runs a saved report template against a prospect and files the result in
the report library as "<template name>: <prospect>".
"""

import logging
from typing import Any, Dict, Optional

from ai_router import TaskType
from schemas.collaboration import ActivityType
from schemas.reports import ModuleType, ReportData

from .base_agent import BaseAgent, AgentResponse
from .prompts import template_report_prompt

logger = logging.getLogger(__name__)


class TemplateReportAgent(BaseAgent):
    """
    Template Report Agent.

    Usage:
        response = await agent.generate(template.id, "Acme Health",
                                        user_criteria="Over 500 employees")
        reports.get(response.metadata["report_id"])
    """

    failure_message = "Failed to generate report from template. Please try again."

    def __init__(self, ai_router=None, templates=None, reports=None, activity_log=None):
        super().__init__(agent_type="template", ai_router=ai_router, activity_log=activity_log)
        self.templates = templates
        self.reports = reports

    async def generate(self, template_id: str, prospect_name: str,
                       user_criteria: Optional[str] = None) -> AgentResponse:
        prospect_name = (prospect_name or "").strip()
        if not prospect_name:
            return self.error_response("Please enter a prospect name.")

        template = self.templates.get(template_id)
        if template is None:
            return self.error_response("Template not found.")
        user_criteria = (user_criteria or "").strip()
        if self.templates.needs_criteria(template) and not user_criteria:
            return self.error_response("This template needs criteria. Please describe what to look for.")

        return await self.process_request(prospect_name, {
            "template": template,
            "user_criteria": user_criteria,
        })

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        template = context["template"]
        prompt = self.templates.render_prompt(template, user_input, context.get("user_criteria", ""))
        result = await self._generate(
            template_report_prompt(prompt),
            TaskType.TEMPLATE_REPORT,
            use_search=True
        )
        if not result.text.strip():
            return self.error_response(self.failure_message)

        saved = None
        if self.reports is not None:
            saved = self.reports.add(ReportData(
                title=f"{template.name}: {user_input}",
                content=result.text,
                citations=result.sources,
                module_type=ModuleType.REPORT_TEMPLATES.value,
            ))
            logger.info(f"Template report saved: {saved.title} ({saved.id})")

        self._record_activity(ActivityType.GENERATION, ModuleType.REPORT_TEMPLATES.value, user_input, template.name)

        response = self._response_from(result)
        if saved is not None:
            response.metadata["report_id"] = saved.id
        return response

"""
Helios Intel - Domain Intelligence Agent
========================================

Lazily generated per-domain briefings for a saved prospect profile.

Each domain tab maps to one extension slot on the report. The slot's
content is the cache key: when it is present the stored text is parsed and
returned with no AI call; otherwise the briefing is generated, written back
into the slot, and every later visit is served from storage. There is no
expiry.

The write-back happens on completion even if nobody is still waiting for
the result.
"""

import logging
from collections import Counter
from typing import Any, Dict, Optional

from ai_router import TaskType
from errors import AITransportError, StorageError
from schemas.ai import DomainBriefing, DomainSection
from section_parser import DOMAIN_KEYWORDS, split_sections

from .base_agent import BaseAgent, AgentResponse
from .profile_agent import PipelineState
from .prompts import domain_intelligence_prompt

logger = logging.getLogger(__name__)


# Domain tab -> report extension slot
DOMAIN_SLOTS: Dict[str, str] = {
    "Quality": "quality_intelligence",
    "Risk": "risk_intelligence",
    "Care Models": "care_models_intelligence",
    "Pharmacy": "pharmacy_intelligence",
    "Hospital Networks": "hospital_networks_intelligence",
    "Employer Groups": "employer_groups_intelligence",
}


def parse_briefing(domain: str, report_id: str, raw_text: str, state: PipelineState,
                   cached: bool = False, citations=None) -> DomainBriefing:
    """Split briefing text into overview / pain / opportunity cards."""
    sections = split_sections(raw_text, DOMAIN_KEYWORDS)

    def card(group: str) -> Optional[DomainSection]:
        section = sections.get(group)
        if section is None:
            return None
        return DomainSection(title=section.title, content=section.content)

    return DomainBriefing(
        domain=domain,
        report_id=report_id,
        state=state.value,
        raw_text=raw_text,
        overview=card("overview"),
        pain=card("pain"),
        opportunity=card("opportunity"),
        cached=cached,
        citations=list(citations or []),
    )


class DomainIntelligenceAgent(BaseAgent):
    """
    Domain Intelligence Agent - one lazily loaded tab per domain.

    Usage:
        briefing = await agent.load(report_id, "Pharmacy")
        briefing.overview, briefing.pain, briefing.opportunity
    """

    def __init__(self, ai_router=None, reports=None):
        super().__init__(agent_type="domain_intelligence", ai_router=ai_router)
        self.reports = reports
        self._loading = Counter()  # (report_id, domain) -> loads in flight

    def is_loading(self, report_id: str, domain: str) -> bool:
        return self._loading[(report_id, domain)] > 0

    def _failed(self, domain: str, report_id: str, message: str) -> DomainBriefing:
        return DomainBriefing(
            domain=domain,
            report_id=report_id,
            state=PipelineState.FAILED.value,
            error=message,
        )

    async def load(self, report_id: str, domain: str) -> DomainBriefing:
        """
        Return the domain briefing for a report, generating it on first view.

        Never raises for unknown domains, missing reports, transport or
        storage failures; those come back with state FAILED.
        """
        slot = DOMAIN_SLOTS.get(domain)
        if slot is None:
            logger.warning(f"Unknown intelligence domain: {domain}")
            return self._failed(domain, report_id, f"Unknown domain: {domain}")

        report = self.reports.get(report_id)
        if report is None:
            logger.warning(f"Domain briefing requested for missing report {report_id}")
            return self._failed(domain, report_id, "Report not found.")

        cached_text = getattr(report, slot)
        if cached_text:
            logger.debug(f"{domain} briefing for {report_id} served from storage")
            return parse_briefing(domain, report_id, cached_text, PipelineState.DOMAIN_PERSISTED, cached=True)

        prospect_name = report.title.split(":", 1)[-1].strip()
        logger.info(f"Generating {domain} briefing for {prospect_name}")
        self._loading[(report_id, domain)] += 1
        try:
            result = await self._generate(
                domain_intelligence_prompt(prospect_name, domain, report.content),
                TaskType.DOMAIN_INTELLIGENCE,
                use_search=True
            )
        except AITransportError as e:
            logger.error(f"{domain} briefing failed for {prospect_name}: {e}")
            return self._failed(domain, report_id, f"Failed to generate {domain} Intelligence. Please try again later.")
        finally:
            self._loading[(report_id, domain)] -= 1
            if self._loading[(report_id, domain)] <= 0:
                del self._loading[(report_id, domain)]

        try:
            saved = self.reports.save_extension(report_id, slot, result.text)
        except StorageError as e:
            logger.error(f"Could not save {domain} briefing for {prospect_name}: {e}")
            briefing = parse_briefing(domain, report_id, result.text, PipelineState.FAILED,
                                      citations=result.sources)
            briefing.error = "Briefing could not be saved. Please free up storage and try again."
            return briefing

        if saved is None:
            # Report deleted while the briefing was generating
            briefing = parse_briefing(domain, report_id, result.text, PipelineState.FAILED,
                                      citations=result.sources)
            briefing.error = "Report no longer exists; briefing was not saved."
            return briefing

        return parse_briefing(domain, report_id, result.text, PipelineState.DOMAIN_PERSISTED,
                              citations=result.sources)

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        """user_input is the domain; context["report_id"] names the report."""
        briefing = await self.load(context.get("report_id", ""), user_input)
        if briefing.state == PipelineState.FAILED.value and not briefing.raw_text:
            return self.error_response(briefing.error or self.failure_message, briefing=briefing)
        return AgentResponse(
            text=briefing.raw_text,
            citations=list(briefing.citations),
            agent_type=self.agent_type,
            data=briefing,
            metadata={"cached": briefing.cached, "state": briefing.state},
        )

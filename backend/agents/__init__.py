"""
Helios Intel - AI Agents Package
================================

Specialized agents for sales intelligence.

Agents:
    - ProspectProfileAgent: Report Assembly Pipeline for prospect profiles
    - DomainIntelligenceAgent: Lazily generated per-domain briefings
    - SwotAgent: Search-grounded SWOT analyses
    - OutreachAgent: Outreach emails and meeting briefings
    - TalkingPointsAgent: Talking points and product gap capture
    - WatchlistAgent: News scan across watched prospects and competitors
    - LeadGenerationAgent: Search-grounded prospect lists
    - RfpAgent: RFP and security questionnaire breakdowns
    - MarketPulseAgent: Vertical trends, summaries and persona insights
    - PlaybookAgent: AI assist for deal playbook fields
    - TemplateReportAgent: Reports from saved templates

Usage:
    from agents import ProspectProfileAgent

    run = await agent.start("acme health")
"""

from .base_agent import (
    BaseAgent,
    AgentResponse
)

from .profile_agent import (
    PipelineState,
    ProfileRun,
    ProspectProfileAgent,
    build_report_data
)
from .domain_agent import DOMAIN_SLOTS, DomainIntelligenceAgent
from .swot_agent import SwotAgent
from .outreach_agent import OutreachAgent
from .talking_points_agent import TalkingPointsAgent
from .watchlist_agent import ScanSummary, WatchlistAgent
from .lead_agent import LeadGenerationAgent
from .rfp_agent import RfpAgent, format_rfp_table
from .market_pulse_agent import PERSONAS, MarketPulseAgent
from .playbook_agent import ASSIST_FIELDS, PlaybookAgent
from .template_agent import TemplateReportAgent

__all__ = [
    # Base
    "BaseAgent",
    "AgentResponse",

    # Report Assembly Pipeline
    "PipelineState",
    "ProfileRun",
    "ProspectProfileAgent",
    "build_report_data",
    "DOMAIN_SLOTS",
    "DomainIntelligenceAgent",

    # Other agents
    "SwotAgent",
    "OutreachAgent",
    "TalkingPointsAgent",
    "ScanSummary",
    "WatchlistAgent",
    "LeadGenerationAgent",
    "RfpAgent",
    "format_rfp_table",
    "PERSONAS",
    "MarketPulseAgent",
    "ASSIST_FIELDS",
    "PlaybookAgent",
    "TemplateReportAgent",
]

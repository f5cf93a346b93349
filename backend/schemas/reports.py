"""
Helios Intel - Report Pydantic Schemas
"""

from enum import Enum
from typing import List, Optional

from schemas.base import CamelModel


class ModuleType(str, Enum):
    PROSPECT_PROFILE = "Prospect Profile Generator"
    SWOT_ANALYSIS = "SWOT Analysis"
    LEAD_GENERATION = "Lead Generation"
    DEAL_PLAYBOOK = "Deal Playbook"
    DISCOVERY_QUESTIONS = "Discovery Questions"
    MARKET_PULSE = "Market Pulse"
    RFP_ANALYZER = "RFP & Security Analyzer"
    PRODUCT_GAP_ANALYSIS = "Product Gap Analysis"
    REPORT_TEMPLATES = "Report Templates"
    REPORT_LIBRARY = "Report Library"
    PROSPECT_BOOK = "Prospect Book"


class Citation(CamelModel):
    uri: str
    title: str = ""


class TeamMember(CamelModel):
    name: str
    title: str = ""
    bio: str = ""
    linkedin: Optional[str] = None


class KeyStats(CamelModel):
    company_size: Optional[str] = None
    annual_revenue: Optional[str] = None
    primary_focus: Optional[str] = None


class ChallengeOrInitiative(CamelModel):
    type: str  # "challenge" | "initiative"
    description: str


class NewsItem(CamelModel):
    date: str
    headline: str
    uri: Optional[str] = None
    is_impactful: Optional[bool] = None


class ReportData(CamelModel):
    """
    A generated report. Every optional extension that is None means
    "not yet generated", never an error.
    """
    title: str
    content: str
    citations: List[Citation] = []
    module_type: Optional[str] = None

    # Structured extensions from the delimited JSON block
    executive_summary: Optional[str] = None
    financial_summary: Optional[str] = None
    key_stats: Optional[KeyStats] = None
    org_chart_data: Optional[List[TeamMember]] = None
    challenges_and_initiatives: Optional[List[ChallengeOrInitiative]] = None
    technology_footprint: Optional[List[str]] = None
    recent_news: Optional[List[NewsItem]] = None

    # Domain intelligence slots, filled lazily on first view
    quality_intelligence: Optional[str] = None
    risk_intelligence: Optional[str] = None
    care_models_intelligence: Optional[str] = None
    pharmacy_intelligence: Optional[str] = None
    hospital_networks_intelligence: Optional[str] = None
    employer_groups_intelligence: Optional[str] = None


class SavedReport(ReportData):
    id: str
    saved_at: str


class SwotSections(CamelModel):
    strengths: str
    weaknesses: str
    opportunities: str
    threats: str

"""
Helios Intel - AI Result Pydantic Schemas

Shapes parsed out of JSON-mode AI responses.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from schemas.base import CamelModel
from schemas.reports import Citation


class EmailDraft(CamelModel):
    subject: str
    body: str


class TalkingPointsResult(CamelModel):
    is_gap: bool = False
    talking_points: str = ""
    gap_analysis: str = ""
    new_solution_idea: Optional[str] = None


class WatchlistScanResult(CamelModel):
    has_alert: bool = False
    title: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None
    uri: Optional[str] = None


class DomainSection(BaseModel):
    title: str
    content: str


class DomainBriefing(BaseModel):
    """Domain intelligence split into overview/pain/opportunity cards."""
    domain: str
    report_id: str
    state: str
    raw_text: str = ""
    overview: Optional[DomainSection] = None
    pain: Optional[DomainSection] = None
    opportunity: Optional[DomainSection] = None
    cached: bool = False
    error: Optional[str] = None
    citations: List[Citation] = []


class Lead(CamelModel):
    company_name: str
    reason: str = ""


class LeadGenerationResult(CamelModel):
    leads: List[Lead] = []
    citations: List[Citation] = []


class RfpStatus(str, Enum):
    ANSWERED = "ANSWERED"
    GAP = "GAP"


class RfpRequirement(CamelModel):
    requirement: str
    suggested_answer: str
    status: RfpStatus


class RfpAnalysisResult(CamelModel):
    analysis: List[RfpRequirement] = []


class MarketTrend(CamelModel):
    title: str
    summary: str = ""
    uri: Optional[str] = None


class MarketPulseSummary(CamelModel):
    """Bullet points per time horizon for one vertical."""
    this_year: List[str] = []
    last_quarter: List[str] = []
    last_month: List[str] = []
    last_week: List[str] = []
    looking_ahead: List[str] = []

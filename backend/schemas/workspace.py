"""
Helios Intel - Templates, Product Gaps and Watchlist Pydantic Schemas
"""

from enum import Enum
from typing import Optional

from schemas.base import CamelModel


class ReportTemplate(CamelModel):
    id: str
    name: str
    prompt: str
    created_at: str
    is_default: Optional[bool] = None
    job: Optional[str] = None
    icon: Optional[str] = None


class ProductGap(CamelModel):
    id: str
    saved_at: str
    prospect_name: str
    challenge_description: str
    gap_analysis: str
    new_solution_idea: str


class WatchlistItemType(str, Enum):
    PROSPECT = "PROSPECT"
    COMPETITOR = "COMPETITOR"


class WatchlistItem(CamelModel):
    id: str
    name: str
    type: WatchlistItemType = WatchlistItemType.PROSPECT
    created_at: str


class WatchlistAlert(CamelModel):
    id: str
    watchlist_item_id: str
    watchlist_item_name: str
    title: str
    summary: str
    category: Optional[str] = None
    uri: Optional[str] = None
    timestamp: str


class DealPlaybook(CamelModel):
    """Free-text deal plan for one prospect. Every field but the name is optional."""
    prospect_name: str
    created_at: str
    updated_at: str
    current_client: Optional[str] = None  # "yes" | "no"
    opportunity_identified: Optional[str] = None
    pain_points: Optional[str] = None
    client_goals: Optional[str] = None
    business_case: Optional[str] = None
    competitors: Optional[str] = None
    story_telling: Optional[str] = None
    key_takeaways: Optional[str] = None
    questions_asked: Optional[str] = None
    wow_factors: Optional[str] = None
    follow_up_communication: Optional[str] = None
    next_steps: Optional[str] = None

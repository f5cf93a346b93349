"""
Helios Intel - Pydantic Schema Models

Organized by domain for use across stores, agents and services.
"""

from schemas.base import CamelModel  # noqa: F401
from schemas.reports import (  # noqa: F401
    ModuleType,
    Citation,
    TeamMember,
    KeyStats,
    ChallengeOrInitiative,
    NewsItem,
    ReportData,
    SavedReport,
    SwotSections,
)
from schemas.collaboration import (  # noqa: F401
    User,
    SharedUser,
    Comment,
    ProspectBook,
    NotificationType,
    NotificationLink,
    Notification,
    ActivityType,
    ActivityDetails,
    ActivityEvent,
)
from schemas.workspace import (  # noqa: F401
    ReportTemplate,
    ProductGap,
    WatchlistItemType,
    WatchlistItem,
    WatchlistAlert,
    DealPlaybook,
)
from schemas.ai import (  # noqa: F401
    EmailDraft,
    TalkingPointsResult,
    WatchlistScanResult,
    DomainSection,
    DomainBriefing,
    Lead,
    LeadGenerationResult,
    RfpStatus,
    RfpRequirement,
    RfpAnalysisResult,
    MarketTrend,
    MarketPulseSummary,
)

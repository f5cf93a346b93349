"""
Helios Intel - Workspace

Composition root: one storage backend, one event bus, the eight Local
Object Stores, the AI router and every agent that writes to the stores.

Usage:
    from workspace import Workspace
    ws = Workspace.from_env()
    run = await ws.profiles.start("acme health")

    with ws.watch(ws.reports) as view:
        ...  # view.items is re-listed on every reports-updated signal
"""
import logging
from typing import Callable, List, Optional

from ai_router import AIRouter
from config import Settings
from event_bus import EventBus
from services.collaboration import CollaborationService
from storage import InMemoryStorage, create_storage
from stores import (
    ActivityLog,
    DealPlaybookStore,
    NotificationStore,
    ProductGapStore,
    ProspectBookStore,
    ReportStore,
    TemplateStore,
    WatchlistStore,
)
from sync import CollectionView
from agents import (
    DomainIntelligenceAgent,
    LeadGenerationAgent,
    MarketPulseAgent,
    OutreachAgent,
    PlaybookAgent,
    ProspectProfileAgent,
    RfpAgent,
    SwotAgent,
    TalkingPointsAgent,
    TemplateReportAgent,
    WatchlistAgent,
)

logger = logging.getLogger(__name__)


class Workspace:
    """All stores and agents sharing one storage backend and one bus."""

    def __init__(self, storage=None, bus: Optional[EventBus] = None,
                 ai_router: Optional[AIRouter] = None):
        self.storage = storage if storage is not None else InMemoryStorage()
        self.bus = bus or EventBus()
        self.ai_router = ai_router

        self.reports = ReportStore(self.storage, self.bus)
        self.notifications = NotificationStore(self.storage, self.bus)
        self.prospect_books = ProspectBookStore(self.storage, self.bus)
        self.templates = TemplateStore(self.storage, self.bus)
        self.watchlist = WatchlistStore(self.storage, self.bus)
        self.activity = ActivityLog(self.storage, self.bus)
        self.product_gaps = ProductGapStore(self.storage, self.bus)
        self.deal_playbooks = DealPlaybookStore(self.storage, self.bus)

        self.profiles = ProspectProfileAgent(
            ai_router=ai_router,
            reports=self.reports,
            prospect_books=self.prospect_books,
            activity_log=self.activity,
        )
        self.domains = DomainIntelligenceAgent(ai_router=ai_router, reports=self.reports)
        self.swot = SwotAgent(ai_router=ai_router, reports=self.reports, activity_log=self.activity)
        self.outreach = OutreachAgent(ai_router=ai_router, activity_log=self.activity)
        self.talking_points = TalkingPointsAgent(ai_router=ai_router, product_gaps=self.product_gaps)
        self.watchlist_scanner = WatchlistAgent(ai_router=ai_router, watchlist=self.watchlist)
        self.leads = LeadGenerationAgent(ai_router=ai_router, activity_log=self.activity)
        self.rfp = RfpAgent(ai_router=ai_router, reports=self.reports, activity_log=self.activity)
        self.market_pulse = MarketPulseAgent(ai_router=ai_router, activity_log=self.activity)
        self.playbook_assist = PlaybookAgent(ai_router=ai_router, deal_playbooks=self.deal_playbooks)
        self.template_reports = TemplateReportAgent(
            ai_router=ai_router,
            templates=self.templates,
            reports=self.reports,
            activity_log=self.activity,
        )
        self.collaboration = CollaborationService(self.prospect_books, self.notifications)

    @classmethod
    def from_env(cls, settings: Optional[Settings] = None) -> "Workspace":
        settings = settings or Settings.from_env()
        storage = create_storage(
            backend=settings.storage_backend,
            file_path=settings.storage_file,
            redis_url=settings.redis_url,
            max_bytes=settings.storage_max_bytes,
        )
        router = AIRouter(
            daily_budget_usd=settings.ai_daily_budget_usd,
            fallback_enabled=settings.ai_fallback_enabled,
            timeout_seconds=settings.ai_timeout_seconds,
            default_model=settings.ai_default_model,
        )
        logger.info(f"Workspace ready ({settings.storage_backend} storage)")
        return cls(storage=storage, ai_router=router)

    def watch(self, store, on_change: Optional[Callable[[List], None]] = None) -> CollectionView:
        """Live view over one store, re-listed on each of its change signals."""
        return CollectionView(store, self.bus, on_change=on_change)

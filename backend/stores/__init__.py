"""
Helios Intel - Local Object Stores

One persisted collection per entity type, each announcing changes on its
own broadcast event.
"""

from stores.base import CollectionStore, generate_id, utc_now_iso  # noqa: F401
from stores.reports import ReportStore  # noqa: F401
from stores.notifications import NotificationStore  # noqa: F401
from stores.prospect_books import ProspectBookStore, book_key  # noqa: F401
from stores.templates import TemplateStore  # noqa: F401
from stores.watchlist import WatchlistStore, WatchlistAlertStore  # noqa: F401
from stores.activity import ActivityLog  # noqa: F401
from stores.product_gaps import ProductGapStore  # noqa: F401
from stores.deal_playbooks import DealPlaybookStore  # noqa: F401

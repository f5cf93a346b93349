"""
Helios Intel - Shared Constants

Centralizes version string, storage keys, broadcast event names, extraction
markers and prompt fragments used across multiple modules.
"""

__version__ = "1.4.0"

# =============================================================================
# EXTRACTION MARKERS
# The profile prompt asks the model to append its structured payload between
# these markers, after the markdown body.
# =============================================================================
JSON_START_MARKER = "[START_JSON_DATA]"
JSON_END_MARKER = "[END_JSON_DATA]"

# =============================================================================
# STORAGE KEYS (one key per collection)
# =============================================================================
REPORT_STORE_KEY = "helios_report_store"
NOTIFICATION_STORE_KEY = "helios_notification_store"
PROSPECT_BOOK_STORE_KEY = "helios_prospect_books_store"
TEMPLATE_STORE_KEY = "helios_template_store"
SEED_TEMPLATES_INITIALIZED_KEY = "helios_seed_templates_initialized"
WATCHLIST_ITEMS_KEY = "helios_watchlist_items"
WATCHLIST_ALERTS_KEY = "helios_watchlist_alerts"
ACTIVITY_LOG_KEY = "helios_activity_log"
GAP_STORE_KEY = "helios_gap_store"
DEAL_PLAYBOOK_STORE_KEY = "helios_deal_playbook_db"

# =============================================================================
# BROADCAST EVENTS (payload-free "re-read me" signals)
# =============================================================================
REPORTS_UPDATED_EVENT = "reports-updated"
NOTIFICATIONS_UPDATED_EVENT = "notifications-updated"
PROSPECT_BOOKS_UPDATED_EVENT = "prospect-books-updated"
TEMPLATES_UPDATED_EVENT = "templates-updated"
WATCHLIST_UPDATED_EVENT = "watchlist-updated"
ACTIVITY_UPDATED_EVENT = "activity-updated"
PRODUCT_GAPS_UPDATED_EVENT = "product-gaps-updated"
DEAL_PLAYBOOKS_UPDATED_EVENT = "deal-playbooks-updated"

# =============================================================================
# REPORT TITLES
# =============================================================================
PROSPECT_PROFILE_TITLE_PREFIX = "Prospect Profile: "
SWOT_TITLE_PREFIX = "SWOT Analysis: "
RFP_REPORT_TITLE = "RFP / Security Questionnaire Analysis"

NOT_AVAILABLE_TEXT = "Not available."

# =============================================================================
# NO-FABRICATION INSTRUCTION
# Appended to prompts that must stay grounded in public sources.
# =============================================================================
PUBLIC_SOURCES_INSTRUCTION = (
    "\n\nOnly use information that can be found in public sources. If a data "
    "point is not available, say so instead of estimating it."
)

# Company profile used by talking-point and gap analysis prompts
PRODUCT_SUITE_DESCRIPTION = """Your product suite includes:
- **Helios Data Platform:** A foundational product for data integration and management.
- **Helios Analytics Suite:** A tool for advanced analytics, predictive modeling, and data visualization.
- **Helios Compliance Engine:** A solution for regulatory reporting and compliance monitoring (e.g., HEDIS, Stars)."""

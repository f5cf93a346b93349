"""
Helios Intel - Services

Workflows that span more than one store.
"""

from services.collaboration import CollaborationService, DEFAULT_TEAM  # noqa: F401

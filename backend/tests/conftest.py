"""
Helios Intel - Test Configuration and Fixtures

Shared fixtures: isolated storage and event bus per test, the eight
stores wired together, and a scripted AI router.
"""
import os
import sys
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ai_router import GenerationResult  # noqa: E402
from event_bus import EventBus  # noqa: E402
from schemas.reports import Citation  # noqa: E402
from storage import InMemoryStorage, reset_storage  # noqa: E402


def make_result(text: str, sources: Optional[List[Citation]] = None,
                model: str = "gemini-3-flash-preview") -> GenerationResult:
    """A GenerationResult as the router would return it."""
    return GenerationResult(
        text=text,
        sources=list(sources or []),
        model=model,
        latency_ms=12,
        tokens_input=100,
        tokens_output=200,
        cost_usd=0.001,
    )


# ==============================================================================
# Storage Fixtures
# ==============================================================================

@pytest.fixture
def storage():
    """Fresh in-memory storage for each test."""
    reset_storage()
    return InMemoryStorage()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    """Records every event emitted on the bus, in order."""
    events = []
    bus.on_every("*", events.append)
    return events


# ==============================================================================
# Store Fixtures
# ==============================================================================

@pytest.fixture
def reports(storage, bus):
    from stores import ReportStore
    return ReportStore(storage, bus)


@pytest.fixture
def notifications(storage, bus):
    from stores import NotificationStore
    return NotificationStore(storage, bus)


@pytest.fixture
def prospect_books(storage, bus):
    from stores import ProspectBookStore
    return ProspectBookStore(storage, bus)


@pytest.fixture
def templates(storage, bus):
    from stores import TemplateStore
    return TemplateStore(storage, bus)


@pytest.fixture
def watchlist(storage, bus):
    from stores import WatchlistStore
    return WatchlistStore(storage, bus)


@pytest.fixture
def activity(storage, bus):
    from stores import ActivityLog
    return ActivityLog(storage, bus)


@pytest.fixture
def product_gaps(storage, bus):
    from stores import ProductGapStore
    return ProductGapStore(storage, bus)


@pytest.fixture
def deal_playbooks(storage, bus):
    from stores import DealPlaybookStore
    return DealPlaybookStore(storage, bus)


# ==============================================================================
# AI Router Fixtures
# ==============================================================================

@pytest.fixture
def fake_router():
    """
    Router stand-in. Tests script answers with
    fake_router.generate.side_effect = [make_result(...), ...].
    """
    router = MagicMock()
    router.generate = AsyncMock(return_value=make_result(""))
    return router


@pytest.fixture
def workspace(storage, bus, fake_router):
    from workspace import Workspace
    return Workspace(storage=storage, bus=bus, ai_router=fake_router)

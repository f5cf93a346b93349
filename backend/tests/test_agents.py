"""
Helios Intel - Agent Tests
==========================

SWOT, outreach, talking points and watchlist agents against a scripted
router.

Run:
    pytest tests/test_agents.py -v
"""
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agents import OutreachAgent, SwotAgent, TalkingPointsAgent, WatchlistAgent  # noqa: E402
from conftest import make_result  # noqa: E402
from errors import AITransportError  # noqa: E402
from schemas.ai import TalkingPointsResult  # noqa: E402
from schemas.reports import Citation  # noqa: E402

pytestmark = pytest.mark.timeout(10)

SWOT_TEXT = """**Strengths**
Strong brand.
**Weaknesses**
High costs.
**Opportunities**
Value-based care.
**Threats**
New entrants."""


# =============================================================================
# TEST: SWOT Agent
# =============================================================================

class TestSwotAgent:

    @pytest.fixture
    def agent(self, fake_router, reports, activity):
        return SwotAgent(ai_router=fake_router, reports=reports, activity_log=activity)

    @pytest.mark.asyncio
    async def test_generate_parses_and_saves(self, agent, fake_router, reports, activity):
        fake_router.generate.return_value = make_result(SWOT_TEXT)
        response = await agent.generate("Acme Health")

        assert response.success
        assert response.data.strengths == "Strong brand."
        assert response.data.threats == "New entrants."
        saved = reports.get(response.metadata["report_id"])
        assert saved.title == "SWOT Analysis: Acme Health"
        assert saved.module_type == "SWOT Analysis"
        assert saved.content == SWOT_TEXT
        assert activity.list()[0].module == "SWOT Analysis"
        assert fake_router.generate.call_args.kwargs["use_search"] is True

    @pytest.mark.asyncio
    async def test_missing_sections(self, agent, fake_router):
        fake_router.generate.return_value = make_result("**Strengths**\nOnly this.")
        response = await agent.generate("Acme Health")
        assert response.data.weaknesses == "Not available."

    @pytest.mark.asyncio
    async def test_blank_company(self, agent, fake_router):
        response = await agent.generate("  ")
        assert not response.success
        fake_router.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transport_failure(self, agent, fake_router, reports, activity):
        fake_router.generate.side_effect = AITransportError("down")
        response = await agent.generate("Acme Health")
        assert not response.success
        assert response.error == agent.failure_message
        assert reports.list() == []
        assert activity.list() == []

    @pytest.mark.asyncio
    async def test_storage_full_returns_error(self, fake_router, bus, activity):
        from storage import InMemoryStorage
        from stores import ReportStore
        agent = SwotAgent(ai_router=fake_router, reports=ReportStore(InMemoryStorage(max_bytes=50), bus),
                          activity_log=activity)
        fake_router.generate.return_value = make_result(SWOT_TEXT)
        response = await agent.generate("Acme Health")
        assert not response.success
        assert response.error == agent.storage_failure_message
        assert activity.list() == []


# =============================================================================
# TEST: Outreach Agent
# =============================================================================

class TestOutreachAgent:

    @pytest.fixture
    def agent(self, fake_router, activity):
        return OutreachAgent(ai_router=fake_router, activity_log=activity)

    @pytest.mark.asyncio
    async def test_draft_email(self, agent, fake_router, activity):
        fake_router.generate.return_value = make_result(
            '```json\n{"subject": "Quick idea", "body": "Hi Jane,\\nThoughts?"}\n```'
        )
        response = await agent.draft_email("Acme Health", "# Acme", persona="CIO", tone="Consultative")

        assert response.success
        assert response.data.subject == "Quick idea"
        assert response.text == "Subject: Quick idea\n\nHi Jane,\nThoughts?"
        assert fake_router.generate.call_args.kwargs["json_response"] is True

        event = activity.list()[0]
        assert event.type.value == "OUTREACH"
        assert event.module == "Outreach Email"
        assert event.details.primary == "Acme Health"
        assert event.details.secondary == "CIO / Consultative"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["Sorry, I cannot help.", '{"subject": "Only subject"}'])
    async def test_invalid_draft(self, agent, fake_router, activity, text):
        fake_router.generate.return_value = make_result(text)
        response = await agent.draft_email("Acme Health", "# Acme", "CIO", "Formal")
        assert not response.success
        assert response.metadata["raw_text"] == text
        assert activity.list() == []

    @pytest.mark.asyncio
    async def test_meeting_briefing(self, agent, fake_router, activity):
        fake_router.generate.return_value = make_result("## Agenda\n- Intros")
        response = await agent.meeting_briefing("Acme Health", "# Acme", "CFO", "Discovery")
        assert response.success
        assert response.text == "## Agenda\n- Intros"
        assert activity.list() == []

    @pytest.mark.asyncio
    async def test_meeting_briefing_failures(self, agent, fake_router):
        fake_router.generate.side_effect = [AITransportError("down"), make_result("  ")]
        first = await agent.meeting_briefing("Acme Health", "# Acme", "CFO", "Discovery")
        second = await agent.meeting_briefing("Acme Health", "# Acme", "CFO", "Discovery")
        assert not first.success
        assert not second.success


# =============================================================================
# TEST: Talking Points Agent
# =============================================================================

class TestTalkingPointsAgent:

    GAP = {
        "isGap": True,
        "talkingPoints": "Lead with automation.",
        "gapAnalysis": "No prior authorization product.",
        "newSolutionIdea": "Prior auth copilot",
    }

    @pytest.fixture
    def agent(self, fake_router, product_gaps):
        return TalkingPointsAgent(ai_router=fake_router, product_gaps=product_gaps)

    @pytest.mark.asyncio
    async def test_analyze_gap(self, agent, fake_router):
        fake_router.generate.return_value = make_result(json.dumps(self.GAP))
        response = await agent.analyze("Manual prior auth", "Acme Health", "# Acme")
        assert response.success
        assert response.text == "Lead with automation."
        assert response.data.is_gap is True

    @pytest.mark.asyncio
    async def test_invalid_response(self, agent, fake_router):
        fake_router.generate.return_value = make_result("no json")
        response = await agent.analyze("Manual prior auth", "Acme Health", "# Acme")
        assert not response.success

    def test_save_gap(self, agent, product_gaps):
        result = TalkingPointsResult.model_validate(self.GAP)
        gap = agent.save_gap("Acme Health", "Manual prior auth", result)
        assert gap.new_solution_idea == "Prior auth copilot"
        assert product_gaps.list() == [gap]

    def test_fit_is_not_saved(self, agent, product_gaps):
        result = TalkingPointsResult(is_gap=False, talking_points="Use our analytics.")
        assert agent.save_gap("Acme Health", "Reporting", result) is None
        assert product_gaps.list() == []

    def test_save_gap_without_store(self, fake_router):
        agent = TalkingPointsAgent(ai_router=fake_router)
        result = TalkingPointsResult.model_validate(self.GAP)
        with pytest.raises(RuntimeError):
            agent.save_gap("Acme Health", "Manual prior auth", result)

    def test_save_gap_storage_full(self, fake_router, bus):
        from storage import InMemoryStorage
        from stores import ProductGapStore
        agent = TalkingPointsAgent(ai_router=fake_router,
                                   product_gaps=ProductGapStore(InMemoryStorage(max_bytes=50), bus))
        result = TalkingPointsResult.model_validate(self.GAP)
        assert agent.save_gap("Acme Health", "Manual prior auth", result) is None
        assert agent.product_gaps.list() == []


# =============================================================================
# TEST: Watchlist Agent
# =============================================================================

class TestWatchlistAgent:

    @pytest.fixture
    def agent(self, fake_router, watchlist):
        return WatchlistAgent(ai_router=fake_router, watchlist=watchlist)

    @pytest.fixture
    def scripted(self, fake_router):
        async def generate(prompt, **kwargs):
            if '"Acme Health"' in prompt:
                return make_result(
                    '{"hasAlert": true, "title": "Acme names new CEO", "summary": "Jane Roe takes over."}',
                    sources=[Citation(uri="https://news.example.com/acme")],
                )
            if '"Beta Care"' in prompt:
                return make_result('{"hasAlert": false}')
            raise AITransportError("quota")

        fake_router.generate.side_effect = generate
        return fake_router

    @pytest.mark.asyncio
    async def test_scan(self, agent, scripted, watchlist):
        watchlist.add({"name": "Acme Health"})
        watchlist.add({"name": "Beta Care", "type": "COMPETITOR"})
        watchlist.add({"name": "Gamma Health"})

        summary = await agent.scan()

        assert summary.scanned == 3
        assert [a.title for a in summary.alerts] == ["Acme names new CEO"]
        assert summary.alerts[0].uri == "https://news.example.com/acme"
        assert summary.alerts[0].watchlist_item_name == "Acme Health"
        assert summary.failed == ["Gamma Health"]
        assert len(watchlist.list_alerts()) == 1

    @pytest.mark.asyncio
    async def test_rescan_dedupes(self, agent, scripted, watchlist):
        watchlist.add({"name": "Acme Health"})
        await agent.scan()
        summary = await agent.scan()
        assert summary.alerts == []
        assert summary.duplicates == 1
        assert len(watchlist.list_alerts()) == 1

    @pytest.mark.asyncio
    async def test_empty_watchlist(self, agent, fake_router):
        summary = await agent.scan()
        assert summary.scanned == 0
        fake_router.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_process(self, agent, scripted, watchlist):
        watchlist.add({"name": "Acme Health"})
        response = await agent.process_request("scan")
        assert response.text == "1 new alerts from 1 watched names."
        assert response.metadata["failed"] == []

    @pytest.mark.asyncio
    async def test_alert_storage_full_counts_as_failed(self, agent, scripted, watchlist, storage):
        watchlist.add({"name": "Acme Health"})
        storage._max_bytes = storage.size_bytes()
        summary = await agent.scan()
        assert summary.alerts == []
        assert summary.failed == ["Acme Health"]

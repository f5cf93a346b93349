"""
Helios Intel - AI Router Tests
==============================

Tests for the multi-model AI routing layer.

Coverage:
- Model selection based on task type
- Budget enforcement
- Provider calls with injected clients
- Fallback chain and timeouts (every failure is an AITransportError)
- Search grounding citations

Run:
    pytest tests/test_ai_router.py -v
"""
import asyncio
import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import ai_router  # noqa: E402
from ai_router import (  # noqa: E402
    FALLBACK_CHAIN,
    MODELS,
    TASK_TO_DEFAULT_MODEL,
    AIRouter,
    CostTracker,
    TaskType,
    dedupe_citations,
)
from errors import AITransportError, BudgetExceededError  # noqa: E402
from schemas.reports import Citation  # noqa: E402

pytestmark = pytest.mark.timeout(10)


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    """No real API keys and a fixed token estimate."""
    for env_var in ("GOOGLE_AI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(ai_router, "estimate_tokens", lambda *texts: 100)


def openai_client(text="openai says", side_effect=None):
    client = MagicMock()
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(completion_tokens=5),
    )
    client.chat.completions.create = AsyncMock(return_value=response, side_effect=side_effect)
    return client


def anthropic_client(text="claude says"):
    client = MagicMock()
    response = SimpleNamespace(
        content=[SimpleNamespace(text=text)],
        usage=SimpleNamespace(output_tokens=7),
    )
    client.messages.create = AsyncMock(return_value=response)
    return client


def google_client(text="gemini says", uris=()):
    chunks = [SimpleNamespace(web=SimpleNamespace(uri=uri, title=f"Title {uri}")) for uri in uris]
    response = SimpleNamespace(
        text=text,
        usage_metadata=SimpleNamespace(candidates_token_count=3),
        candidates=[SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))],
    )
    client = MagicMock()
    client.models.generate_content = MagicMock(return_value=response)
    return client


# =============================================================================
# TEST: Model Configuration
# =============================================================================

class TestModelConfiguration:
    """Test model configuration and registry."""

    def test_all_task_types_have_default_model(self):
        """Every task type should have a default model assigned."""
        for task_type in TaskType:
            assert TASK_TO_DEFAULT_MODEL[task_type] in MODELS

    def test_fallback_chain_models_exist(self):
        for name in FALLBACK_CHAIN:
            assert name in MODELS

    def test_grounded_tasks_use_search_models(self):
        """Profiles and SWOT need Google Search grounding."""
        for task_type in (TaskType.PROSPECT_PROFILE, TaskType.SWOT, TaskType.DOMAIN_INTELLIGENCE):
            assert MODELS[TASK_TO_DEFAULT_MODEL[task_type]].supports_search


# =============================================================================
# TEST: Task Routing
# =============================================================================

class TestTaskRouting:
    """Test model selection based on task type."""

    def test_routes_to_task_default(self):
        router = AIRouter()
        model = router.route_request(TaskType.NAME_NORMALIZATION, 100, 64)
        assert model == "gemini-3-flash-preview"

    def test_preferred_model_wins(self):
        router = AIRouter()
        assert router.route_request(TaskType.SWOT, 100, 100, preferred_model="gpt-4o") == "gpt-4o"

    def test_unknown_preferred_model_ignored(self):
        router = AIRouter()
        model = router.route_request(TaskType.SWOT, 100, 100, preferred_model="not-a-model")
        assert model == TASK_TO_DEFAULT_MODEL[TaskType.SWOT]

    def test_default_model_override(self):
        router = AIRouter(default_model="claude-sonnet-4.5")
        assert router.route_request(TaskType.SWOT, 100, 100) == "claude-sonnet-4.5"

    def test_cheapest_model_when_default_exceeds_budget(self):
        """A request too big for the remaining budget goes to the cheapest model."""
        router = AIRouter(daily_budget_usd=0.01)
        model = router.route_request(TaskType.PROSPECT_PROFILE, 1_000_000, 1000)
        assert model == "gpt-4o-mini"

    def test_budget_exceeded_raises(self):
        router = AIRouter(daily_budget_usd=1.0)
        router.cost_tracker.record_usage("gpt-4o", TaskType.SWOT, 1_000_000, 1_000_000)
        with pytest.raises(BudgetExceededError):
            router.route_request(TaskType.SWOT, 100, 100)


# =============================================================================
# TEST: Budget Enforcement
# =============================================================================

class TestBudgetEnforcement:
    """Test daily budget enforcement."""

    def test_budget_starts_at_zero(self):
        tracker = CostTracker(daily_budget_usd=50.0)
        assert tracker.get_today_spend() == 0.0

    def test_remaining_budget_calculation(self):
        tracker = CostTracker(daily_budget_usd=50.0)
        tracker.record_usage(
            model="gemini-3-flash-preview",
            task_type=TaskType.PROSPECT_PROFILE,
            tokens_input=1_000_000,
            tokens_output=100_000
        )
        assert tracker.get_today_spend() == pytest.approx(0.8)
        assert tracker.get_today_spend() + tracker.get_remaining_budget() == pytest.approx(50.0)

    def test_usage_summary(self):
        tracker = CostTracker()
        for _ in range(3):
            tracker.record_usage("gpt-4o", TaskType.OUTREACH, 1000, 500, agent_type="outreach")
        summary = tracker.get_usage_summary()
        assert summary["total_requests"] == 3
        assert summary["by_model"]["gpt-4o"]["count"] == 3
        assert summary["by_task"]["outreach"]["count"] == 3

    def test_unknown_model_uses_conservative_estimate(self):
        tracker = CostTracker()
        record = tracker.record_usage("mystery-model", TaskType.SWOT, 1_000_000, 0)
        assert record.cost_usd == pytest.approx(5.0)


# =============================================================================
# TEST: Generation
# =============================================================================

class TestGeneration:
    """Provider calls through injected clients."""

    @pytest.mark.asyncio
    async def test_openai_generation(self):
        router = AIRouter()
        client = openai_client("hello")
        router._clients["openai"] = client

        result = await router.generate("Say hello", TaskType.OUTREACH, model_override="gpt-4o")

        assert result.text == "hello"
        assert result.model == "gpt-4o"
        assert result.tokens_output == 5
        assert result.cost_usd > 0
        assert result.sources == []
        assert router.cost_tracker.get_usage_summary()["total_requests"] == 1

    @pytest.mark.asyncio
    async def test_json_mode_adds_system_instruction(self):
        router = AIRouter()
        client = openai_client('{"a": 1}')
        router._clients["openai"] = client

        await router.generate("Give JSON", TaskType.OUTREACH, json_response=True, model_override="gpt-4o")

        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert "valid JSON" in messages[0]["content"]

    @pytest.mark.asyncio
    async def test_anthropic_generation(self):
        router = AIRouter()
        router._clients["anthropic"] = anthropic_client("claude says")
        result = await router.generate("Hi", TaskType.SWOT, model_override="claude-sonnet-4.5")
        assert result.text == "claude says"
        assert result.tokens_output == 7

    @pytest.mark.asyncio
    async def test_google_search_grounding(self):
        router = AIRouter()
        client = google_client(
            "grounded",
            uris=["https://a.example.com", "https://b.example.com", "https://a.example.com"],
        )
        router._clients["google"] = client

        result = await router.generate("SWOT for Acme", TaskType.SWOT, use_search=True)

        assert result.model == "gemini-3-pro-preview"
        assert [c.uri for c in result.sources] == ["https://a.example.com", "https://b.example.com"]
        config = client.models.generate_content.call_args.kwargs["config"]
        assert config.tools
        assert config.response_mime_type is None

    @pytest.mark.asyncio
    async def test_google_json_mode_without_search(self):
        router = AIRouter()
        client = google_client('{"hasAlert": false}')
        router._clients["google"] = client

        await router.generate("Check", TaskType.TALKING_POINTS, json_response=True)

        config = client.models.generate_content.call_args.kwargs["config"]
        assert config.response_mime_type == "application/json"
        assert not config.tools


# =============================================================================
# TEST: Fallback Behavior
# =============================================================================

class TestFallback:
    """Failures fall through the chain and surface as AITransportError."""

    @pytest.mark.asyncio
    async def test_falls_back_to_configured_provider(self):
        router = AIRouter()
        router._clients["openai"] = openai_client(side_effect=RuntimeError("500"))
        router._clients["anthropic"] = anthropic_client("rescued")

        result = await router.generate("Hi", TaskType.OUTREACH, model_override="gpt-4o")

        assert result.text == "rescued"
        assert result.model == "claude-sonnet-4.5"

    @pytest.mark.asyncio
    async def test_fallback_disabled(self):
        router = AIRouter(fallback_enabled=False)
        router._clients["openai"] = openai_client(side_effect=RuntimeError("500"))
        backup = anthropic_client()
        router._clients["anthropic"] = backup

        with pytest.raises(AITransportError):
            await router.generate("Hi", TaskType.OUTREACH, model_override="gpt-4o")
        backup.messages.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_providers_fail(self):
        router = AIRouter()
        router._clients["openai"] = openai_client(side_effect=RuntimeError("openai down"))

        with pytest.raises(AITransportError) as exc_info:
            await router.generate("Hi", TaskType.OUTREACH, model_override="gpt-4o")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        router = AIRouter(timeout_seconds=0.05, fallback_enabled=False)

        async def slow(**kwargs):
            await asyncio.sleep(1)

        router._clients["openai"] = openai_client(side_effect=slow)

        with pytest.raises(AITransportError):
            await router.generate("Hi", TaskType.OUTREACH, model_override="gpt-4o")

    @pytest.mark.asyncio
    async def test_budget_exceeded_is_transport_error(self):
        router = AIRouter(daily_budget_usd=0.5)
        router.cost_tracker.record_usage("gpt-4o", TaskType.SWOT, 1_000_000, 0)
        router._clients["openai"] = openai_client()

        with pytest.raises(AITransportError):
            await router.generate("Hi", TaskType.OUTREACH, model_override="gpt-4o")


# =============================================================================
# TEST: Helpers and Singleton
# =============================================================================

class TestHelpers:

    def test_dedupe_citations(self):
        citations = [
            Citation(uri="https://a", title="A"),
            Citation(uri="https://a", title="A again"),
            Citation(uri="", title="blank"),
            Citation(uri="https://b", title="B"),
        ]
        assert [c.title for c in dedupe_citations(citations)] == ["A", "B"]

    def test_is_configured(self, monkeypatch):
        router = AIRouter()
        assert not router.is_configured("openai")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert router.is_configured("openai")

    def test_get_ai_router_reads_env(self, monkeypatch):
        monkeypatch.setenv("AI_DAILY_BUDGET_USD", "12.5")
        monkeypatch.setenv("AI_FALLBACK_ENABLED", "false")
        monkeypatch.setenv("AI_TIMEOUT_SECONDS", "30")
        ai_router.reset_ai_router()
        try:
            router = ai_router.get_ai_router()
            assert router is ai_router.get_ai_router()
            assert router.cost_tracker.daily_budget_usd == 12.5
            assert router.fallback_enabled is False
            assert router.timeout_seconds == 30.0
        finally:
            ai_router.reset_ai_router()

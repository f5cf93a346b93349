"""
Helios Intel - AI Router with Cost Tracking
===========================================

Multi-model AI routing for the sales-intelligence agents.

Features:
- Task-based model selection
- Daily budget enforcement ($50 default limit)
- Cost tracking per request
- Google Search grounding for Gemini, with citations de-duplicated by URI
- Per-request timeout
- Automatic fallback on errors (Gemini -> GPT-4o -> Claude, when configured)

Callers only distinguish success from failure: every provider, timeout or
budget problem surfaces as AITransportError.

Model Strategy:
- Gemini 3 Flash: name normalization, domain briefings, JSON tasks
- Gemini 3 Pro: grounded prospect profiles and SWOT analyses
- GPT-4o / Claude Sonnet 4.5: fallback only
"""

import os
import logging
import asyncio
import time
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime, date, timezone
from enum import Enum

from errors import AITransportError, BudgetExceededError, ModelUnavailableError
from schemas.reports import Citation

logger = logging.getLogger(__name__)


# =============================================================================
# MODEL CONFIGURATION
# =============================================================================

class TaskType(str, Enum):
    """Task types for model routing."""
    NAME_NORMALIZATION = "name_normalization"   # Canonical organization name
    PROSPECT_PROFILE = "prospect_profile"       # Full grounded profile report
    DOMAIN_INTELLIGENCE = "domain_intelligence" # Lazy per-domain briefings
    SWOT = "swot"                               # SWOT analysis
    OUTREACH = "outreach"                       # Email drafts
    MEETING_BRIEFING = "meeting_briefing"       # Pre-meeting briefing
    TALKING_POINTS = "talking_points"           # Talking points / gap analysis
    WATCHLIST_SCAN = "watchlist_scan"           # News checks for watched names
    TEMPLATE_REPORT = "template_report"         # Report from a saved template
    LEAD_GENERATION = "lead_generation"         # Search-grounded lead lists
    RFP_ANALYSIS = "rfp_analysis"               # RFP / questionnaire breakdown
    MARKET_PULSE = "market_pulse"               # Trends, summaries, persona insights
    PLAYBOOK_ASSIST = "playbook_assist"         # Deal playbook field drafts


@dataclass
class ModelConfig:
    """Configuration for an AI model."""
    name: str                           # Model identifier
    provider: str                       # openai, anthropic, google
    input_cost_per_1m: float           # Cost per 1M input tokens
    output_cost_per_1m: float          # Cost per 1M output tokens
    context_window: int                 # Maximum context size
    best_for: List[TaskType]           # Task types this model excels at
    max_output_tokens: int = 8192      # Default max output
    supports_search: bool = False       # Google Search grounding
    api_model_id: Optional[str] = None  # Actual API model ID if different


# Model registry
MODELS: Dict[str, ModelConfig] = {
    # Cheap: normalization, JSON tasks, briefings
    "gemini-3-flash-preview": ModelConfig(
        name="gemini-3-flash-preview",
        provider="google",
        input_cost_per_1m=0.50,
        output_cost_per_1m=3.00,
        context_window=1_000_000,
        best_for=[
            TaskType.NAME_NORMALIZATION, TaskType.DOMAIN_INTELLIGENCE,
            TaskType.OUTREACH, TaskType.MEETING_BRIEFING,
            TaskType.TALKING_POINTS, TaskType.WATCHLIST_SCAN,
            TaskType.LEAD_GENERATION, TaskType.MARKET_PULSE, TaskType.PLAYBOOK_ASSIST,
        ],
        supports_search=True,
        api_model_id="gemini-3-flash-preview"
    ),

    # Quality: grounded research reports
    "gemini-3-pro-preview": ModelConfig(
        name="gemini-3-pro-preview",
        provider="google",
        input_cost_per_1m=2.00,
        output_cost_per_1m=12.00,
        context_window=1_000_000,
        best_for=[TaskType.PROSPECT_PROFILE, TaskType.SWOT, TaskType.TEMPLATE_REPORT, TaskType.RFP_ANALYSIS],
        supports_search=True,
        api_model_id="gemini-3-pro-preview"
    ),

    # OpenAI fallback
    "gpt-4o": ModelConfig(
        name="gpt-4o",
        provider="openai",
        input_cost_per_1m=2.50,
        output_cost_per_1m=10.00,
        context_window=128_000,
        best_for=[],  # Fallback only
        api_model_id="gpt-4o"
    ),

    "gpt-4o-mini": ModelConfig(
        name="gpt-4o-mini",
        provider="openai",
        input_cost_per_1m=0.15,
        output_cost_per_1m=0.60,
        context_window=128_000,
        best_for=[],  # Use model_override to select
        api_model_id="gpt-4o-mini"
    ),

    # Anthropic fallback
    "claude-sonnet-4.5": ModelConfig(
        name="claude-sonnet-4.5",
        provider="anthropic",
        input_cost_per_1m=3.00,
        output_cost_per_1m=15.00,
        context_window=200_000,
        best_for=[],  # Fallback only
        api_model_id="claude-sonnet-4-5-20250929"
    ),
}

# Default routing rules
TASK_TO_DEFAULT_MODEL: Dict[TaskType, str] = {
    TaskType.NAME_NORMALIZATION: "gemini-3-flash-preview",
    TaskType.PROSPECT_PROFILE: "gemini-3-pro-preview",
    TaskType.DOMAIN_INTELLIGENCE: "gemini-3-flash-preview",
    TaskType.SWOT: "gemini-3-pro-preview",
    TaskType.OUTREACH: "gemini-3-flash-preview",
    TaskType.MEETING_BRIEFING: "gemini-3-flash-preview",
    TaskType.TALKING_POINTS: "gemini-3-flash-preview",
    TaskType.WATCHLIST_SCAN: "gemini-3-flash-preview",
    TaskType.TEMPLATE_REPORT: "gemini-3-pro-preview",
    TaskType.LEAD_GENERATION: "gemini-3-flash-preview",
    TaskType.RFP_ANALYSIS: "gemini-3-pro-preview",
    TaskType.MARKET_PULSE: "gemini-3-flash-preview",
    TaskType.PLAYBOOK_ASSIST: "gemini-3-flash-preview",
}

# Order in which providers are tried after a failure
FALLBACK_CHAIN: List[str] = ["gemini-3-flash-preview", "gpt-4o", "claude-sonnet-4.5"]

PROVIDER_API_KEYS: Dict[str, str] = {
    "google": "GOOGLE_AI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

JSON_INSTRUCTION = ("You MUST respond with valid JSON only. No markdown fencing, "
                    "no explanation, no text outside the JSON object.")


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class GenerationResult:
    """Text plus grounding sources from one AI call."""
    text: str
    sources: List[Citation] = field(default_factory=list)
    model: str = ""
    latency_ms: int = 0
    tokens_input: int = 0
    tokens_output: int = 0
    cost_usd: float = 0.0


def dedupe_citations(citations: List[Citation]) -> List[Citation]:
    """Keep the first citation for each URI, in order."""
    seen = set()
    unique = []
    for citation in citations:
        if not citation.uri or citation.uri in seen:
            continue
        seen.add(citation.uri)
        unique.append(citation)
    return unique


# =============================================================================
# COST TRACKER
# =============================================================================

@dataclass
class UsageRecord:
    """Record of a single AI usage."""
    model: str
    task_type: TaskType
    tokens_input: int
    tokens_output: int
    cost_usd: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    latency_ms: Optional[int] = None
    agent_type: Optional[str] = None


class CostTracker:
    """
    Track AI usage and costs.

    Maintains daily totals and enforces budget limits.
    """

    def __init__(self, daily_budget_usd: float = 50.0):
        self.daily_budget_usd = daily_budget_usd
        self._usage_records: List[UsageRecord] = []
        self._daily_totals: Dict[date, float] = {}

    def record_usage(
        self,
        model: str,
        task_type: TaskType,
        tokens_input: int,
        tokens_output: int,
        latency_ms: Optional[int] = None,
        agent_type: Optional[str] = None
    ) -> UsageRecord:
        """Record a usage event and calculate cost."""
        config = MODELS.get(model)
        if not config:
            logger.warning(f"Unknown model: {model}, using estimated cost")
            # Conservative estimate
            cost = (tokens_input / 1_000_000) * 5.0 + (tokens_output / 1_000_000) * 15.0
        else:
            cost = (
                (tokens_input / 1_000_000) * config.input_cost_per_1m +
                (tokens_output / 1_000_000) * config.output_cost_per_1m
            )

        record = UsageRecord(
            model=model,
            task_type=task_type,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            cost_usd=cost,
            latency_ms=latency_ms,
            agent_type=agent_type
        )

        self._usage_records.append(record)

        # Cap usage records to prevent unbounded memory growth
        if len(self._usage_records) > 10_000:
            self._usage_records = self._usage_records[-5_000:]

        today = date.today()
        self._daily_totals[today] = self._daily_totals.get(today, 0.0) + cost

        return record

    def get_today_spend(self) -> float:
        """Get total spend for today."""
        return self._daily_totals.get(date.today(), 0.0)

    def get_remaining_budget(self) -> float:
        """Get remaining budget for today."""
        return self.daily_budget_usd - self.get_today_spend()

    def check_budget(self, estimated_cost: float = 0.0) -> bool:
        """Check if budget allows a request."""
        return self.get_today_spend() + estimated_cost <= self.daily_budget_usd

    def get_usage_summary(self) -> Dict[str, Any]:
        """Get usage summary."""
        records = self._usage_records
        by_model: Dict[str, Dict] = {}
        by_task: Dict[str, Dict] = {}

        for r in records:
            if r.model not in by_model:
                by_model[r.model] = {"cost": 0.0, "count": 0, "tokens": 0}
            by_model[r.model]["cost"] += r.cost_usd
            by_model[r.model]["count"] += 1
            by_model[r.model]["tokens"] += r.tokens_input + r.tokens_output

            task_name = r.task_type.value if isinstance(r.task_type, TaskType) else str(r.task_type)
            if task_name not in by_task:
                by_task[task_name] = {"cost": 0.0, "count": 0}
            by_task[task_name]["cost"] += r.cost_usd
            by_task[task_name]["count"] += 1

        return {
            "total_cost_usd": sum(r.cost_usd for r in records),
            "total_requests": len(records),
            "total_tokens_input": sum(r.tokens_input for r in records),
            "total_tokens_output": sum(r.tokens_output for r in records),
            "by_model": by_model,
            "by_task": by_task
        }


def estimate_tokens(*texts: Optional[str]) -> int:
    """Token estimate for budgeting. Falls back to a word count heuristic."""
    import tiktoken

    joined = "\n".join(t for t in texts if t)
    try:
        enc = tiktoken.get_encoding("cl100k_base")
        return len(enc.encode(joined))
    except Exception as e:
        logger.debug(f"tiktoken unavailable, estimating tokens from words: {e}")
        return len(joined.split()) * 2


# =============================================================================
# AI ROUTER
# =============================================================================

class AIRouter:
    """
    Route AI requests to a model based on task type and budget.

    Usage:
        router = AIRouter()
        result = await router.generate(
            prompt="Generate a prospect profile for Acme Health...",
            task_type=TaskType.PROSPECT_PROFILE,
            use_search=True
        )
        result.text, result.sources
    """

    def __init__(
        self,
        daily_budget_usd: float = 50.0,
        fallback_enabled: bool = True,
        timeout_seconds: float = 120.0,
        default_model: Optional[str] = None
    ):
        self.cost_tracker = CostTracker(daily_budget_usd)
        self.fallback_enabled = fallback_enabled
        self.timeout_seconds = timeout_seconds
        self.default_model = default_model if default_model in MODELS else None

        # Client cache
        self._clients: Dict[str, Any] = {}

    def _get_client(self, provider: str):
        """Get or create API client for provider."""
        if provider in self._clients:
            return self._clients[provider]

        if provider == "openai":
            try:
                from openai import AsyncOpenAI
                client = AsyncOpenAI(api_key=os.getenv("OPENAI_API_KEY"))
                self._clients[provider] = client
                return client
            except ImportError:
                raise ModelUnavailableError("OpenAI client not installed")

        elif provider == "anthropic":
            try:
                from anthropic import AsyncAnthropic
                client = AsyncAnthropic(api_key=os.getenv("ANTHROPIC_API_KEY"))
                self._clients[provider] = client
                return client
            except ImportError:
                raise ModelUnavailableError("Anthropic client not installed")

        elif provider == "google":
            try:
                from google import genai
                client = genai.Client(api_key=os.getenv("GOOGLE_AI_API_KEY"))
                self._clients[provider] = client
                return client
            except ImportError:
                raise ModelUnavailableError("Google GenAI SDK not installed. Run: pip install google-genai")

        raise ModelUnavailableError(f"Unknown provider: {provider}")

    def is_configured(self, provider: str) -> bool:
        """True when the provider's API key is present (or a client is injected)."""
        if provider in self._clients:
            return True
        env_var = PROVIDER_API_KEYS.get(provider)
        return bool(env_var and os.getenv(env_var))

    def estimate_cost(
        self,
        model: str,
        prompt_tokens: int,
        expected_output_tokens: int
    ) -> float:
        """Estimate cost for a request."""
        config = MODELS.get(model)
        if not config:
            return 0.0

        return (
            (prompt_tokens / 1_000_000) * config.input_cost_per_1m +
            (expected_output_tokens / 1_000_000) * config.output_cost_per_1m
        )

    def route_request(
        self,
        task_type: TaskType,
        prompt_tokens: int,
        expected_output_tokens: int,
        preferred_model: Optional[str] = None
    ) -> str:
        """
        Pick the model for a request.

        Raises:
            BudgetExceededError: today's spend already exceeds the budget
        """
        if not self.cost_tracker.check_budget():
            raise BudgetExceededError(
                f"Daily budget ${self.cost_tracker.daily_budget_usd} exceeded. "
                f"Today's spend: ${self.cost_tracker.get_today_spend():.4f}"
            )

        if preferred_model and preferred_model in MODELS:
            return preferred_model

        if self.default_model:
            return self.default_model

        default_model = TASK_TO_DEFAULT_MODEL.get(task_type, "gemini-3-flash-preview")
        estimated = self.estimate_cost(default_model, prompt_tokens, expected_output_tokens)
        if self.cost_tracker.check_budget(estimated):
            return default_model

        # Fall back to cheapest model that still fits
        options = sorted(
            MODELS,
            key=lambda name: self.estimate_cost(name, prompt_tokens, expected_output_tokens)
        )
        logger.warning(f"{default_model} exceeds remaining budget, using {options[0]}")
        return options[0]

    def _next_fallback(self, failed_models: List[str]) -> Optional[str]:
        for name in FALLBACK_CHAIN:
            if name in failed_models:
                continue
            if self.is_configured(MODELS[name].provider):
                return name
        return None

    async def generate(
        self,
        prompt: str,
        task_type: TaskType,
        use_search: bool = False,
        system_prompt: Optional[str] = None,
        json_response: bool = False,
        max_tokens: int = 8192,
        temperature: float = 0.7,
        model_override: Optional[str] = None,
        agent_type: Optional[str] = None
    ) -> GenerationResult:
        """
        Generate a response with automatic model selection and fallback.

        Args:
            prompt: User prompt
            task_type: Task type for routing
            use_search: Ground the answer with Google Search (Gemini only)
            system_prompt: Optional system prompt
            json_response: Ask the model for a JSON-only answer
            max_tokens: Maximum output tokens
            temperature: Generation temperature
            model_override: Force specific model
            agent_type: Agent type for tracking

        Returns:
            GenerationResult with text, de-duplicated sources and usage

        Raises:
            AITransportError: every failure, after the fallback chain
        """
        if json_response:
            system_prompt = f"{system_prompt}\n\n{JSON_INSTRUCTION}" if system_prompt else JSON_INSTRUCTION

        prompt_tokens = estimate_tokens(prompt, system_prompt)
        model = self.route_request(
            task_type=task_type,
            prompt_tokens=prompt_tokens,
            expected_output_tokens=max_tokens,
            preferred_model=model_override
        )

        failed: List[str] = []
        last_error: Optional[Exception] = None
        while model is not None:
            try:
                return await self._generate_with(
                    model, prompt, task_type, use_search, system_prompt,
                    json_response, max_tokens, temperature, prompt_tokens, agent_type
                )
            except Exception as e:
                logger.error(f"Generation failed with {model}: {e}")
                failed.append(model)
                last_error = e
                if not self.fallback_enabled:
                    break
                model = self._next_fallback(failed)
                if model is not None:
                    logger.info(f"Falling back to {model}")

        raise AITransportError(f"AI generation failed: {last_error}") from last_error

    async def _generate_with(
        self,
        model: str,
        prompt: str,
        task_type: TaskType,
        use_search: bool,
        system_prompt: Optional[str],
        json_response: bool,
        max_tokens: int,
        temperature: float,
        prompt_tokens: int,
        agent_type: Optional[str]
    ) -> GenerationResult:
        config = MODELS.get(model)
        if not config:
            raise ModelUnavailableError(f"Unknown model: {model}")

        start_time = time.time()
        if config.provider == "google":
            call = self._generate_google(
                config, prompt, system_prompt, max_tokens, temperature,
                use_search and config.supports_search, json_response
            )
        elif config.provider == "openai":
            call = self._generate_openai(config, prompt, system_prompt, max_tokens, temperature)
        elif config.provider == "anthropic":
            call = self._generate_anthropic(config, prompt, system_prompt, max_tokens, temperature)
        else:
            raise ModelUnavailableError(f"Unsupported provider: {config.provider}")

        try:
            text, output_tokens, sources = await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise AITransportError(f"{model} timed out after {self.timeout_seconds}s")

        latency_ms = int((time.time() - start_time) * 1000)

        record = self.cost_tracker.record_usage(
            model=model,
            task_type=task_type,
            tokens_input=prompt_tokens,
            tokens_output=output_tokens,
            latency_ms=latency_ms,
            agent_type=agent_type
        )

        return GenerationResult(
            text=text,
            sources=dedupe_citations(sources),
            model=model,
            latency_ms=latency_ms,
            tokens_input=prompt_tokens,
            tokens_output=output_tokens,
            cost_usd=record.cost_usd,
        )

    async def _generate_openai(
        self,
        config: ModelConfig,
        prompt: str,
        system_prompt: Optional[str],
        max_tokens: int,
        temperature: float
    ) -> tuple:
        """Generate with OpenAI API."""
        client = self._get_client(config.provider)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = await client.chat.completions.create(
            model=config.api_model_id or config.name,
            messages=messages,
            max_tokens=min(max_tokens, 16_384),
            temperature=temperature
        )

        text = response.choices[0].message.content or ""
        tokens = response.usage.completion_tokens if response.usage else len(text.split())

        return text, tokens, []

    async def _generate_anthropic(
        self,
        config: ModelConfig,
        prompt: str,
        system_prompt: Optional[str],
        max_tokens: int,
        temperature: float
    ) -> tuple:
        """Generate with Anthropic API."""
        client = self._get_client(config.provider)

        kwargs = {
            "model": config.api_model_id or config.name,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}]
        }

        if system_prompt:
            kwargs["system"] = system_prompt

        response = await client.messages.create(**kwargs)

        text = response.content[0].text if response.content else ""
        tokens = response.usage.output_tokens if response.usage else len(text.split())

        return text, tokens, []

    async def _generate_google(
        self,
        config: ModelConfig,
        prompt: str,
        system_prompt: Optional[str],
        max_tokens: int,
        temperature: float,
        use_search: bool,
        json_response: bool
    ) -> tuple:
        """Generate with Google Gemini API (using google-genai unified SDK)."""
        from google.genai import types as genai_types

        client = self._get_client(config.provider)
        model_name = config.api_model_id or config.name

        config_kwargs: Dict[str, Any] = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt
        if use_search:
            config_kwargs["tools"] = [genai_types.Tool(google_search=genai_types.GoogleSearch())]
        elif json_response:
            # JSON mime type cannot be combined with the search tool
            config_kwargs["response_mime_type"] = "application/json"

        # Use Client API via asyncio.to_thread for sync-to-async
        response = await asyncio.to_thread(
            client.models.generate_content,
            model=model_name,
            contents=prompt,
            config=genai_types.GenerateContentConfig(**config_kwargs),
        )

        text = getattr(response, "text", None) or ""
        usage = getattr(response, "usage_metadata", None)
        tokens = getattr(usage, "candidates_token_count", None) or len(text.split()) * 2

        return text, tokens, self._google_sources(response)

    @staticmethod
    def _google_sources(response) -> List[Citation]:
        """Pull web citations out of Gemini grounding metadata."""
        sources: List[Citation] = []
        for candidate in getattr(response, "candidates", None) or []:
            metadata = getattr(candidate, "grounding_metadata", None)
            for chunk in getattr(metadata, "grounding_chunks", None) or []:
                web = getattr(chunk, "web", None)
                uri = getattr(web, "uri", None)
                if uri:
                    sources.append(Citation(uri=uri, title=getattr(web, "title", None) or uri))
        return sources


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_router: Optional[AIRouter] = None


def get_ai_router() -> AIRouter:
    """Get or create the AI router instance."""
    global _router

    if _router is None:
        daily_budget = float(os.getenv("AI_DAILY_BUDGET_USD", "50.0"))
        fallback = os.getenv("AI_FALLBACK_ENABLED", "true").lower() == "true"
        timeout = float(os.getenv("AI_TIMEOUT_SECONDS", "120"))
        _router = AIRouter(
            daily_budget_usd=daily_budget,
            fallback_enabled=fallback,
            timeout_seconds=timeout,
            default_model=os.getenv("AI_DEFAULT_MODEL") or None,
        )

    return _router


def reset_ai_router():
    """Reset the singleton (used in tests)."""
    global _router
    _router = None

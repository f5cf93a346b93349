"""
Helios Intel - Base Agent Class
===============================

Abstract base class for the AI-backed sales-intelligence agents.

Enforces:
- One place where transport and storage failures are caught and turned
  into an error AgentResponse with a generic message (never retried here;
  the router owns model fallback)
- Cost and latency captured from the AI router result
- Activity logging for generations and outreach

All agents inherit from this class to ensure consistent behavior.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

from ai_router import GenerationResult, TaskType
from errors import AITransportError, StorageError
from schemas.collaboration import ActivityType
from schemas.reports import Citation

logger = logging.getLogger(__name__)


@dataclass
class AgentResponse:
    """Structured response from an agent."""
    text: str
    citations: List[Citation] = field(default_factory=list)
    agent_type: str = ""
    data: Optional[Any] = None
    success: bool = True
    error: Optional[str] = None
    cost_usd: float = 0.0
    latency_ms: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)
    model_used: str = ""
    tokens_input: int = 0
    tokens_output: int = 0


class BaseAgent(ABC):
    """
    Abstract base class for all Helios Intel agents.

    All agents must implement:
    - process(): Core agent logic

    The base class provides:
    - _generate(): AI call that records cost/model on the response
    - process_request(): transport-failure handling and timing
    - _record_activity(): activity log entry when a log is wired in
    """

    # Shown to the user on any transport failure
    failure_message = "An error occurred while generating the response. Please try again."
    storage_failure_message = "The result could not be saved. Please free up storage and try again."

    def __init__(
        self,
        agent_type: str,
        ai_router: Optional[Any] = None,
        activity_log: Optional[Any] = None
    ):
        """
        Initialize base agent.

        Args:
            agent_type: Agent identifier (profile, swot, outreach, etc.)
            ai_router: AIRouter instance (anything with an async generate())
            activity_log: ActivityLog store for GENERATION/OUTREACH events
        """
        self.agent_type = agent_type
        self.ai_router = ai_router
        self.activity_log = activity_log

    @abstractmethod
    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        """
        Process user input and generate response.

        Must be implemented by each agent. May raise AITransportError;
        process_request() converts it into an error response.
        """
        pass

    async def process_request(
        self,
        user_input: str,
        context: Optional[Dict[str, Any]] = None
    ) -> AgentResponse:
        """
        Public entry point for agent requests.

        Never raises for transport or storage failures: returns an
        AgentResponse with success=False and a generic message instead.
        """
        start_time = time.time()
        try:
            response = await self.process(user_input, context or {})
        except AITransportError as e:
            logger.error(f"Agent {self.agent_type} transport failure: {e}")
            response = self.error_response(self.failure_message)
        except StorageError as e:
            logger.error(f"Agent {self.agent_type} storage failure: {e}")
            response = self.error_response(self.storage_failure_message)

        response.latency_ms = int((time.time() - start_time) * 1000)
        return response

    async def _generate(
        self,
        prompt: str,
        task_type: TaskType,
        **kwargs
    ) -> GenerationResult:
        """Call the AI router. Raises AITransportError on failure."""
        if self.ai_router is None:
            raise AITransportError(f"Agent {self.agent_type} has no AI router configured")
        return await self.ai_router.generate(
            prompt=prompt,
            task_type=task_type,
            agent_type=self.agent_type,
            **kwargs
        )

    def _response_from(self, result: GenerationResult, text: Optional[str] = None,
                       data: Any = None, **metadata) -> AgentResponse:
        return AgentResponse(
            text=result.text if text is None else text,
            citations=list(result.sources),
            agent_type=self.agent_type,
            data=data,
            cost_usd=result.cost_usd,
            model_used=result.model,
            tokens_input=result.tokens_input,
            tokens_output=result.tokens_output,
            metadata=metadata,
        )

    def error_response(self, message: str, **metadata) -> AgentResponse:
        return AgentResponse(
            text=message,
            agent_type=self.agent_type,
            success=False,
            error=message,
            metadata=metadata,
        )

    def _record_activity(self, activity_type: ActivityType, module: str,
                         primary: str, secondary: Optional[str] = None):
        if self.activity_log is None:
            return None
        return self.activity_log.record(activity_type, module, primary, secondary)


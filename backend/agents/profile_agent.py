"""
Helios Intel - Prospect Profile Agent
=====================================

Report Assembly Pipeline for prospect profiles.

States:
    IDLE -> NORMALIZING -> CONFIRMING (optional) -> GENERATING
         -> EXTRACTING -> PERSISTED

- NORMALIZING asks the AI for the organization's canonical name.
- CONFIRMING is entered only when the canonical name differs from what the
  user typed, or a profile with that name already exists. The caller must
  confirm() or cancel.
- EXTRACTING splits the markdown body from the delimited JSON block. Any
  extraction problem leaves the body verbatim and the extensions absent;
  it never fails the run.
- Transport failures end the run in FAILED with nothing written. So does a
  storage failure while saving the report.

Domain tabs continue the same state machine per tab (DOMAIN_LOADING ->
DOMAIN_PERSISTED); see domain_agent.py.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ai_router import GenerationResult, TaskType
from constants import PROSPECT_PROFILE_TITLE_PREFIX
from errors import AITransportError, StorageError
from extraction import extract_json_block
from schemas.collaboration import ActivityType
from schemas.reports import ModuleType, ReportData, SavedReport

from .base_agent import BaseAgent, AgentResponse
from .prompts import name_normalization_prompt, prospect_profile_prompt

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "IDLE"
    NORMALIZING = "NORMALIZING"
    CONFIRMING = "CONFIRMING"
    GENERATING = "GENERATING"
    EXTRACTING = "EXTRACTING"
    PERSISTED = "PERSISTED"
    DOMAIN_LOADING = "DOMAIN_LOADING"
    DOMAIN_PERSISTED = "DOMAIN_PERSISTED"
    FAILED = "FAILED"


# Structured extension fields accepted from the JSON block (persisted names)
EXTENSION_FIELDS = [
    "executiveSummary",
    "financialSummary",
    "keyStats",
    "orgChartData",
    "challengesAndInitiatives",
    "technologyFootprint",
    "recentNews",
]


@dataclass
class ProfileRun:
    """One pass through the pipeline, from user input to saved report."""
    user_input: str
    state: PipelineState = PipelineState.IDLE
    canonical_name: Optional[str] = None
    existing_report: Optional[SavedReport] = None
    report: Optional[SavedReport] = None
    error: Optional[str] = None
    history: List[PipelineState] = field(default_factory=list)

    def transition(self, state: PipelineState):
        logger.debug(f"Profile run {self.user_input!r}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def fail(self, message: str):
        self.error = message
        self.transition(PipelineState.FAILED)

    @property
    def needs_confirmation(self) -> bool:
        return self.state == PipelineState.CONFIRMING

    @property
    def name_changed(self) -> bool:
        return bool(
            self.canonical_name
            and self.canonical_name.strip().lower() != self.user_input.strip().lower()
        )


def clean_canonical_name(text: str) -> str:
    """First non-empty line of the AI answer with quotes and markup stripped."""
    for line in (text or "").splitlines():
        cleaned = line.strip().strip('"\'`*').strip()
        if cleaned:
            return cleaned
    return ""


def build_report_data(prospect_name: str, result: GenerationResult) -> ReportData:
    """
    Assemble a ReportData from a profile generation.

    The delimited JSON block, when present and valid, is removed from the
    body and its known fields become extensions. Fields that fail
    validation are dropped one by one; the rest are kept.
    """
    body, payload = extract_json_block(result.text)
    base = {
        "title": f"{PROSPECT_PROFILE_TITLE_PREFIX}{prospect_name}",
        "content": body,
        "citations": [c.model_dump() for c in result.sources],
        "moduleType": ModuleType.PROSPECT_PROFILE.value,
    }
    if payload is None:
        return ReportData.model_validate(base)

    extensions: Dict[str, Any] = {}
    for key in EXTENSION_FIELDS:
        if payload.get(key) is None:
            continue
        try:
            ReportData.model_validate({**base, key: payload[key]})
        except ValidationError as e:
            logger.warning(f"Dropping malformed {key} from {prospect_name} profile: {e.error_count()} errors")
            continue
        extensions[key] = payload[key]

    return ReportData.model_validate({**base, **extensions})


class ProspectProfileAgent(BaseAgent):
    """
    Prospect Profile Agent - normalizes, generates, extracts and persists.

    Usage:
        run = await agent.start("acme health")
        if run.needs_confirmation:
            run = await agent.confirm(run, proceed=True)
        run.report  # SavedReport when run.state is PERSISTED
    """

    failure_message = "An error occurred while generating the report. Please try again."
    storage_failure_message = "The report could not be saved. Please free up storage and try again."

    def __init__(
        self,
        ai_router=None,
        reports=None,
        prospect_books=None,
        activity_log=None
    ):
        super().__init__(
            agent_type="prospect_profile",
            ai_router=ai_router,
            activity_log=activity_log
        )
        self.reports = reports
        self.prospect_books = prospect_books

    async def normalize_name(self, user_input: str) -> str:
        """Canonical organization name. Falls back to the input on an empty answer."""
        result = await self._generate(
            name_normalization_prompt(user_input),
            TaskType.NAME_NORMALIZATION,
            temperature=0.0,
            max_tokens=64
        )
        return clean_canonical_name(result.text) or user_input.strip()

    async def start(self, user_input: str) -> ProfileRun:
        """
        Begin a run: validate, normalize, and either ask for confirmation
        or continue straight into generation.
        """
        run = ProfileRun(user_input=user_input or "")
        if not run.user_input.strip():
            run.fail("Please enter a prospect name.")
            return run

        run.transition(PipelineState.NORMALIZING)
        try:
            run.canonical_name = await self.normalize_name(run.user_input)
        except AITransportError as e:
            logger.error(f"Name normalization failed for {run.user_input!r}: {e}")
            run.fail(self.failure_message)
            return run

        run.existing_report = self.reports.find_by_title(
            f"{PROSPECT_PROFILE_TITLE_PREFIX}{run.canonical_name}"
        )
        if run.name_changed or run.existing_report is not None:
            run.transition(PipelineState.CONFIRMING)
            return run

        return await self.generate(run.canonical_name, run=run)

    async def confirm(self, run: ProfileRun, proceed: bool = True,
                      use_canonical: bool = True) -> ProfileRun:
        """Resolve a CONFIRMING run: cancel back to IDLE, or generate."""
        if run.state != PipelineState.CONFIRMING:
            raise ValueError(f"Run is {run.state.value}, not awaiting confirmation")

        if not proceed:
            logger.info(f"Profile generation cancelled for {run.user_input!r}")
            run.transition(PipelineState.IDLE)
            return run

        name = run.canonical_name if use_canonical else run.user_input.strip()
        return await self.generate(name, run=run)

    async def generate(self, prospect_name: str, run: Optional[ProfileRun] = None) -> ProfileRun:
        """GENERATING -> EXTRACTING -> PERSISTED for an already-confirmed name."""
        run = run or ProfileRun(user_input=prospect_name, canonical_name=prospect_name)

        run.transition(PipelineState.GENERATING)
        try:
            result = await self._generate(
                prospect_profile_prompt(prospect_name),
                TaskType.PROSPECT_PROFILE,
                use_search=True
            )
        except AITransportError as e:
            logger.error(f"Profile generation failed for {prospect_name}: {e}")
            run.fail(self.failure_message)
            return run

        run.transition(PipelineState.EXTRACTING)
        report_data = build_report_data(prospect_name, result)

        try:
            run.report = self.reports.add(report_data)
        except StorageError as e:
            logger.error(f"Could not save profile for {prospect_name}: {e}")
            run.fail(self.storage_failure_message)
            return run
        run.transition(PipelineState.PERSISTED)
        logger.info(f"Prospect profile saved: {run.report.title} ({run.report.id})")

        # The report is already saved; follow-up writes only log on failure
        try:
            self._record_activity(ActivityType.GENERATION, ModuleType.PROSPECT_PROFILE.value, prospect_name)
            if self.prospect_books is not None:
                self.prospect_books.create_or_update(prospect_name, {
                    "title": run.report.title,
                    "content": run.report.content,
                    "executive_summary": run.report.executive_summary,
                    "citations": run.report.citations,
                })
        except StorageError as e:
            logger.error(f"Profile for {prospect_name} saved, but follow-up writes failed: {e}")
            run.error = "Report saved, but the activity log or prospect book could not be updated."
        return run

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        """
        Run the whole pipeline in one call.

        context["confirm"] (default True) decides what happens when the run
        stops at CONFIRMING: proceed with the canonical name, or stop there.
        """
        run = await self.start(user_input)
        if run.needs_confirmation and context.get("confirm", True):
            run = await self.confirm(run, proceed=True)

        if run.state == PipelineState.FAILED:
            return self.error_response(run.error or self.failure_message, run=run)

        if run.report is None:
            return AgentResponse(
                text="",
                agent_type=self.agent_type,
                data=run,
                metadata={"state": run.state.value},
            )

        return AgentResponse(
            text=run.report.content,
            citations=list(run.report.citations),
            agent_type=self.agent_type,
            data=run,
            metadata={"state": run.state.value, "report_id": run.report.id},
        )

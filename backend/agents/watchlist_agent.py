"""
Helios Intel - Watchlist Agent
==============================

Checks every watched prospect and competitor for significant recent news
and files de-duplicated alerts.

One AI call per item, run concurrently. A failure on one item is logged
and skipped; it never aborts the scan.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ai_router import TaskType
from errors import AITransportError, StorageError
from extraction import parse_json_payload
from schemas.ai import WatchlistScanResult
from schemas.workspace import WatchlistAlert, WatchlistItem

from .base_agent import BaseAgent, AgentResponse
from .prompts import watchlist_scan_prompt

logger = logging.getLogger(__name__)


@dataclass
class ScanSummary:
    scanned: int = 0
    alerts: List[WatchlistAlert] = field(default_factory=list)
    duplicates: int = 0
    failed: List[str] = field(default_factory=list)


class WatchlistAgent(BaseAgent):
    """Watchlist Agent - concurrent news scan across watched names."""

    def __init__(self, ai_router=None, watchlist=None):
        super().__init__(agent_type="watchlist", ai_router=ai_router)
        self.watchlist = watchlist

    async def _check_item(self, item: WatchlistItem) -> Optional[WatchlistScanResult]:
        try:
            result = await self._generate(
                watchlist_scan_prompt(item.name, item.type.value),
                TaskType.WATCHLIST_SCAN,
                use_search=True,
                json_response=True
            )
        except AITransportError as e:
            logger.warning(f"Watchlist scan failed for {item.name}: {e}")
            raise

        parsed = parse_json_payload(result.text)
        if not isinstance(parsed, dict):
            logger.warning(f"Watchlist scan for {item.name} returned no JSON object")
            return None
        try:
            scan = WatchlistScanResult.model_validate(parsed)
        except ValidationError as e:
            logger.warning(f"Watchlist scan for {item.name} invalid: {e.error_count()} errors")
            return None

        if scan.uri is None and result.sources:
            scan.uri = result.sources[0].uri
        return scan

    async def scan(self) -> ScanSummary:
        """Scan every watchlist item and store new alerts."""
        items = self.watchlist.list()
        summary = ScanSummary(scanned=len(items))
        if not items:
            return summary

        results = await asyncio.gather(
            *(self._check_item(item) for item in items),
            return_exceptions=True
        )

        for item, outcome in zip(items, results):
            if isinstance(outcome, Exception):
                if not isinstance(outcome, AITransportError):
                    logger.error(f"Unexpected watchlist scan error for {item.name}: {outcome}")
                summary.failed.append(item.name)
                continue
            if outcome is None or not outcome.has_alert or not outcome.title:
                continue

            try:
                alert = self.watchlist.add_alert({
                    "watchlist_item_id": item.id,
                    "watchlist_item_name": item.name,
                    "title": outcome.title,
                    "summary": outcome.summary or "",
                    "category": outcome.category,
                    "uri": outcome.uri,
                })
            except StorageError as e:
                logger.error(f"Could not save watchlist alert for {item.name}: {e}")
                summary.failed.append(item.name)
                continue
            if alert is None:
                summary.duplicates += 1
            else:
                summary.alerts.append(alert)

        logger.info(
            f"Watchlist scan: {summary.scanned} items, {len(summary.alerts)} new alerts, "
            f"{summary.duplicates} duplicates, {len(summary.failed)} failed"
        )
        return summary

    async def process(
        self,
        user_input: str,
        context: Dict[str, Any]
    ) -> AgentResponse:
        summary = await self.scan()
        return AgentResponse(
            text=f"{len(summary.alerts)} new alerts from {summary.scanned} watched names.",
            agent_type=self.agent_type,
            data=summary,
            metadata={"failed": summary.failed},
        )

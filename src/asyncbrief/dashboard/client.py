"""Async HTTP client for the AsyncBrief API.

fetch_all() fires the five dashboard requests concurrently and waits for all
of them. Each section falls back independently when its request fails.
In-flight requests are never cancelled; the last snapshot assigned wins.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..llm.schema import ActionItem, FlaggedMessage, Sentiment
from ..pipeline.variants import NO_SUMMARY
from ..schemas.messages import ChatMessage
from .state import Notifier

logger = logging.getLogger("dashboard")


@dataclass
class DashboardSnapshot:
    messages: List[ChatMessage] = field(default_factory=list)
    summary: str = NO_SUMMARY
    sentiment: Optional[Sentiment] = None
    action_items: List[ActionItem] = field(default_factory=list)
    flagged_messages: List[FlaggedMessage] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    def flagged_by_ts(self) -> Dict[str, str]:
        return {f.ts: f.reason for f in self.flagged_messages}


class DashboardClient:
    def __init__(
        self,
        base_url: str,
        notifier: Optional[Notifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.notifier = notifier
        self.transport = transport

    async def _get(self, client: httpx.AsyncClient, path: str, parse: Callable[[Any], Any], fallback: Any, errors: Dict[str, str]):
        try:
            resp = await client.get(path)
            body = resp.json()
            if resp.status_code != 200:
                message = body.get("error") if isinstance(body, dict) else None
                raise RuntimeError(message or f"HTTP {resp.status_code}")
            return parse(body)
        except (httpx.HTTPError, ValueError, RuntimeError, ValidationError, AttributeError, TypeError) as e:
            logger.warning(f"GET {path} failed: {e}")
            errors[path] = str(e)
            if self.notifier is not None:
                self.notifier.notify(f"Could not load {path.lstrip('/')}", str(e), variant="destructive")
            return fallback

    async def fetch_all(self) -> DashboardSnapshot:
        errors: Dict[str, str] = {}
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
            messages, summary, sentiment, action_items, flagged = await asyncio.gather(
                self._get(client, "/messages",
                          lambda body: [ChatMessage.model_validate(m) for m in body],
                          [], errors),
                self._get(client, "/summary",
                          lambda body: body.get("summary") or NO_SUMMARY,
                          NO_SUMMARY, errors),
                self._get(client, "/sentiment",
                          lambda body: Sentiment.model_validate(body["sentiment"]) if body.get("sentiment") else None,
                          None, errors),
                self._get(client, "/actionItems",
                          lambda body: [ActionItem.model_validate(i) for i in body.get("actionItems", [])],
                          [], errors),
                self._get(client, "/miscommunications",
                          lambda body: [FlaggedMessage.model_validate(f) for f in body.get("flaggedMessages", [])],
                          [], errors),
            )
        return DashboardSnapshot(
            messages=messages,
            summary=summary,
            sentiment=sentiment,
            action_items=action_items,
            flagged_messages=flagged,
            errors=errors,
        )

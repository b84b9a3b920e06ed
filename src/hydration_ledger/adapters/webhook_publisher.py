"""Webhook event publisher adapter."""

import logging
from dataclasses import dataclass

import httpx

from hydration_ledger.domain.events import LedgerEvent
from hydration_ledger.services.events import EventPublisher

_logger = logging.getLogger(__name__)


@dataclass
class HttpxWebhookPublisher(EventPublisher):
    """Publisher that POSTs event payloads to a webhook URL."""

    url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, url: str) -> "HttpxWebhookPublisher":
        """Create a publisher with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient())

    async def publish(self, events: list[LedgerEvent]) -> None:
        """Send all events in a single request."""
        if not events:
            return
        payload = {"events": [event.as_payload() for event in events]}
        try:
            response = await self.http_client.post(self.url, json=payload, timeout=10)
            response.raise_for_status()
        except httpx.HTTPError:
            _logger.exception("Failed to deliver %s ledger events", len(events))

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

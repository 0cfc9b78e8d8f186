"""Payments service webhook client with exponential backoff retry logic"""

import asyncio
import logging
import httpx
from typing import Dict, Any, Optional
from arrangement_gateway.config import settings
from arrangement_gateway.domain.exceptions import PaymentsWebhookError
from arrangement_gateway.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter

logger = logging.getLogger(__name__)


class PaymentsClient:
    """Client for announcing accepted arrangements to the payments service"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url or settings.payments_webhook_url
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base
        self.timeout = settings.http_timeout_seconds
        self._transport = transport

    async def send_arrangement_event(self, payload: Dict[str, Any]) -> None:
        """
        Send arrangement event to the payments service with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on 5xx errors and network failures; 4xx fails immediately
        - Tracks latency histogram and failure counter

        Raises:
            PaymentsWebhookError: When delivery fails permanently
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            while True:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except httpx.HTTPStatusError as e:
                    webhook_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise PaymentsWebhookError(
                            f"Payments service rejected event: {e.response.status_code}"
                        ) from e
                    attempt += 1
                    error: Exception = e

                except httpx.RequestError as e:
                    webhook_failure_counter.inc()
                    attempt += 1
                    error = e

                if attempt >= self.max_retries:
                    raise PaymentsWebhookError(
                        f"Payments webhook failed after {attempt} attempts: {error}"
                    ) from error

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.warning(
                    "Payments webhook attempt failed, retrying",
                    extra={"attempt": attempt, "backoff_seconds": backoff, "event": payload.get("event")},
                )
                await asyncio.sleep(backoff)

"""Write-outcome webhook client with exponential backoff retry logic"""

import asyncio
import logging
import httpx
from typing import Any, Dict, Optional
from finplanner.config import settings
from finplanner.domain.exceptions import NotificationError
from finplanner.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class NotificationClient:
    """Client for sending write events to the notification sink"""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.timeout = settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_event(self, payload: Dict[str, Any]) -> None:
        """
        Deliver a write event to the notification webhook with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on HTTP errors and network failures
        - Tracks latency histogram and failure counter

        Raises:
            NotificationError: After the final failed attempt
        """
        if not self.enabled:
            return

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logging.error(
                            f"Notification delivery failed: {e}",
                            extra={"event": payload.get("event"), "attempts": attempt},
                        )
                        raise NotificationError(f"Notification webhook failed after {attempt} attempts") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

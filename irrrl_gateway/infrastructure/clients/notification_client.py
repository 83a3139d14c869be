"""HTTP implementation of NotificationPublisher."""

import asyncio

import httpx
import structlog

from irrrl_gateway.core.config import settings
from irrrl_gateway.core.metrics import (
    record_notification_failure,
    record_notification_retry,
    record_notification_success,
    track_notification_latency,
)
from irrrl_gateway.domain.entities import ApplicationEvent
from irrrl_gateway.domain.exceptions import NotificationDeliveryException
from irrrl_gateway.domain.interfaces import NotificationPublisher

logger = structlog.get_logger(__name__)


class HttpNotificationPublisher(NotificationPublisher):
    """
    Posts application events to the notification webhook.

    Retries with exponential backoff and reports the outcome as a bool;
    delivery failures are logged and counted, never raised to the caller.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float = 0.1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url or settings.notification_webhook_url
        self._timeout = timeout or settings.notification_timeout
        self._max_retries = max_retries or settings.notification_max_retries
        self._backoff_base = backoff_base
        self._transport = transport

    async def publish(self, event: ApplicationEvent) -> bool:
        """
        Deliver an event, retrying on errors and non-2xx/3xx responses.

        Backoff doubles per attempt: base, 2*base, 4*base, ...
        """
        log = logger.bind(
            event_type=event.event_type.value,
            event_id=str(event.id),
            application_id=str(event.application_id),
        )
        payload = event.to_dict()

        for attempt in range(1, self._max_retries + 1):
            try:
                with track_notification_latency():
                    await self._post(payload)
                log.info("notification_sent", attempt=attempt)
                record_notification_success()
                return True
            except NotificationDeliveryException as e:
                log.warning(
                    "notification_rejected",
                    attempt=attempt,
                    status_code=e.status_code,
                    error=e.message,
                )
            except httpx.TimeoutException:
                log.warning("notification_timeout", attempt=attempt)
            except httpx.HTTPError as e:
                log.warning("notification_error", attempt=attempt, error=str(e))

            if attempt < self._max_retries:
                record_notification_retry()
                await asyncio.sleep(self._backoff_base * 2 ** (attempt - 1))

        log.error("notification_exhausted_retries", max_retries=self._max_retries)
        record_notification_failure()
        return False

    async def _post(self, payload: dict) -> None:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(self._url, json=payload)

        if response.status_code >= 400:
            raise NotificationDeliveryException(
                message=response.text[:200] or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

"""Alert publishing to the external alert service.

Alerts are a best-effort side channel: ``publish`` never blocks or raises.
Alerts are queued and posted by a background worker; a full queue drops the
alert and an HTTP failure is logged without retry (at-most-once delivery).
"""

import asyncio
import logging
from typing import Any, ClassVar, Protocol

import httpx

from dblicence_api.config import Settings, get_settings
from dblicence_api.models.domain.alert import Alert
from dblicence_api.utils.secure_logging import log_error, log_warning

logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    """Receiver of alerts raised by the compliance engine."""

    def publish(self, alert: Alert) -> None:
        """Hand an alert over without waiting for delivery."""
        ...


def alert_payload(alert: Alert) -> dict[str, Any]:
    """Build the JSON document expected by the alert service."""
    return {
        "alertCategory": alert.category.value.upper(),
        "alertAffectedTechnology": alert.affected_technology.value if alert.affected_technology else None,
        "alertCode": alert.code.value,
        "alertSeverity": alert.severity.value.upper(),
        "alertStatus": alert.status.value.upper(),
        "description": alert.description,
        "date": alert.date.isoformat(),
        "otherInfo": alert.other_info.model_dump(exclude_none=True),
    }


class AlertPublisher:
    """Queue-backed alert sink posting to ``{alert_service_url}/alerts``."""

    _shared: ClassVar["AlertPublisher | None"] = None

    def __init__(
        self,
        url: str,
        username: str = "",
        password: str = "",
        timeout: float = 10.0,
        queue_size: int = 1000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize publisher.

        Args:
            url: Alert service base URL, empty to disable delivery
            username: Basic auth username
            password: Basic auth password
            timeout: HTTP timeout in seconds
            queue_size: Maximum number of pending alerts
            client: HTTP client to use instead of an owned one
        """
        self.url = url.rstrip("/")
        self.auth = httpx.BasicAuth(username, password) if username else None
        self.timeout = timeout
        self.queue: asyncio.Queue[Alert] = asyncio.Queue(maxsize=queue_size)
        self._client = client
        self._owns_client = client is None
        self._worker: asyncio.Task | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AlertPublisher":
        """Create a publisher from application settings."""
        return cls(
            url=settings.alert_service_url,
            username=settings.alert_service_username,
            password=settings.alert_service_password,
            timeout=settings.alert_timeout_seconds,
            queue_size=settings.alert_queue_size,
        )

    @classmethod
    def shared(cls) -> "AlertPublisher":
        """Get the process-wide publisher, created from settings on first use."""
        if cls._shared is None:
            cls._shared = cls.from_settings(get_settings())
        return cls._shared

    @property
    def enabled(self) -> bool:
        """Check whether an alert service endpoint is configured."""
        return bool(self.url)

    @property
    def running(self) -> bool:
        """Check whether the delivery worker is running."""
        return self._worker is not None and not self._worker.done()

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=5, max_keepalive_connections=2),
            )
            self._owns_client = True
        return self._client

    def publish(self, alert: Alert) -> None:
        """Queue an alert for delivery.

        Args:
            alert: Alert to send
        """
        if not self.enabled:
            logger.debug(f"Alert service not configured, skipping {alert.code}")
            return
        try:
            self.queue.put_nowait(alert)
        except asyncio.QueueFull:
            log_warning(logger, f"Alert queue full, dropping {alert.code} alert")

    async def deliver(self, alert: Alert) -> bool:
        """Post one alert to the alert service.

        Args:
            alert: Alert to send

        Returns:
            True if the alert service accepted it
        """
        client = self._get_http_client()
        try:
            response = await client.post(
                f"{self.url}/alerts",
                json=alert_payload(alert),
                auth=self.auth,
            )
        except httpx.HTTPError as e:
            log_error(logger, f"Can't send {alert.code} alert", e)
            return False

        if not response.is_success:
            logger.error(f"Alert service rejected {alert.code} alert: HTTP {response.status_code}")
            return False
        return True

    async def _run(self) -> None:
        while True:
            alert = await self.queue.get()
            try:
                await self.deliver(alert)
            except Exception as e:
                log_error(logger, f"Unexpected error delivering {alert.code} alert", e)
            finally:
                self.queue.task_done()

    async def start(self) -> None:
        """Start the background delivery worker."""
        if self.running or not self.enabled:
            return
        self._worker = asyncio.create_task(self._run(), name="alert-publisher")
        logger.info(f"Alert publisher started for {self.url}")

    async def flush(self) -> None:
        """Wait until every queued alert has been handled."""
        if self.running:
            await self.queue.join()

    async def stop(self, timeout: float = 5.0) -> None:
        """Deliver pending alerts (up to a timeout), stop the worker and close the client.

        Args:
            timeout: Seconds to wait for pending alerts
        """
        if self.running:
            try:
                await asyncio.wait_for(self.flush(), timeout=timeout)
            except TimeoutError:
                logger.warning(f"Alert publisher stopped with {self.queue.qsize()} undelivered alerts")
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None

        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
        logger.info("Alert publisher stopped")


def get_alert_publisher() -> AlertPublisher:
    """Get the shared alert publisher."""
    return AlertPublisher.shared()

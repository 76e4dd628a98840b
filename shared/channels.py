"""
Event channels: the "send event" side of the mapper.

Two implementations share the same send_event() signature:
- RecordingChannel logs each event and keeps it in memory. Used for dry runs,
  demos and tests. Failures can be simulated.
- BentoHTTPChannel posts events to the Bento batch events endpoint.

Design decisions:
- Channels never retry; a failed HTTP call raises to the caller
- Every send is logged with the event name and recipient
- The mapper only depends on send_event(), so either channel can be injected
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import httpx

from shared.config import Settings, get_settings
from shared.models import GUEST_USER_ID

logger = logging.getLogger("bento")


@dataclass
class EventResult:
    """
    Result of a send attempt.

    Captures the full outbound event so tests can assert on it.
    """
    success: bool
    user_id: int
    event_name: str
    email: str
    details: dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.utcnow)
    error: Optional[str] = None

    def __str__(self) -> str:
        status = "✓" if self.success else "✗"
        return f"{status} {self.event_name} for {self.email} (user={self.user_id})"


def build_event(user_id: int, event_name: str, email: str, details: dict[str, Any]) -> dict[str, Any]:
    """Build a single Bento event object for the batch endpoint."""
    event: dict[str, Any] = {
        "type": event_name,
        "email": email,
        "details": details,
    }
    if user_id != GUEST_USER_ID:
        event["fields"] = {"user_id": user_id}
    return event


class RecordingChannel:
    """
    In-memory channel.

    Logs sends and tracks them for test assertions. Nothing leaves
    the process.
    """

    def __init__(self, fail_rate: float = 0.0):
        """
        Args:
            fail_rate: Probability of send failure (0.0 to 1.0), for testing.
        """
        self.fail_rate = fail_rate
        self.sent_events: list[EventResult] = []

    def send_event(
        self,
        user_id: int,
        event_name: str,
        email: str,
        details: dict[str, Any],
    ) -> EventResult:
        if random.random() < self.fail_rate:
            result = EventResult(
                success=False,
                user_id=user_id,
                event_name=event_name,
                email=email,
                details=details,
                error="Simulated delivery failure",
            )
            logger.error(f"[EVENT FAILED] {event_name} | To: {email} | Error: {result.error}")
        else:
            result = EventResult(
                success=True,
                user_id=user_id,
                event_name=event_name,
                email=email,
                details=details,
            )
            logger.info(f"[EVENT] {event_name} | To: {email} | User: {user_id}")
            logger.debug(f"[EVENT DETAILS] {details}")

        self.sent_events.append(result)
        return result

    def get_sent_count(self) -> int:
        return len(self.sent_events)

    def get_successful_sends(self) -> list[EventResult]:
        return [e for e in self.sent_events if e.success]

    def find_events(self, event_name: str) -> list[EventResult]:
        """All recorded sends of one event name, oldest first."""
        return [e for e in self.sent_events if e.event_name == event_name]

    def clear_history(self):
        self.sent_events.clear()


class BentoHTTPChannel:
    """
    Channel that delivers events to the Bento API.

    Each send is one POST to {api_base_url}/batch/events carrying a single
    event, authenticated with the publishable and secret keys.
    """

    def __init__(
        self,
        site_uuid: str,
        publishable_key: str,
        secret_key: str,
        api_base_url: str = "https://app.bentonow.com/api/v1",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            site_uuid: Bento site identifier, sent as a query parameter
            publishable_key: Basic auth username
            secret_key: Basic auth password
            api_base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            client: Pre-built httpx client (tests pass one with a mock transport)

        Raises:
            ValueError: If any credential is missing
        """
        if not (site_uuid and publishable_key and secret_key):
            raise ValueError("Bento site_uuid, publishable_key and secret_key are required")

        self.site_uuid = site_uuid
        self.endpoint = f"{api_base_url.rstrip('/')}/batch/events"
        self.client = client or httpx.Client(timeout=timeout)
        self.auth = httpx.BasicAuth(publishable_key, secret_key)

    def send_event(
        self,
        user_id: int,
        event_name: str,
        email: str,
        details: dict[str, Any],
    ) -> EventResult:
        """
        Send one event.

        Raises:
            httpx.HTTPStatusError: If Bento answers with a non-2xx status
            httpx.TransportError: If the request could not be made
        """
        body = {"events": [build_event(user_id, event_name, email, details)]}

        response = self.client.post(
            self.endpoint,
            params={"site_uuid": self.site_uuid},
            json=body,
            auth=self.auth,
        )
        response.raise_for_status()

        logger.info(f"[BENTO] {event_name} | To: {email} | Status: {response.status_code}")
        return EventResult(
            success=True,
            user_id=user_id,
            event_name=event_name,
            email=email,
            details=details,
        )

    def close(self) -> None:
        self.client.close()


def get_channel(settings: Optional[Settings] = None):
    """
    Pick the channel for the current settings.

    Dry-run, or missing credentials, gives a RecordingChannel.
    """
    settings = settings or get_settings()
    if settings.dry_run or not settings.has_credentials():
        if not settings.dry_run:
            logger.warning("Bento credentials not configured, recording events only")
        return RecordingChannel()

    return BentoHTTPChannel(
        site_uuid=settings.site_uuid,
        publishable_key=settings.publishable_key,
        secret_key=settings.secret_key,
        api_base_url=settings.api_base_url,
        timeout=settings.timeout_seconds,
    )

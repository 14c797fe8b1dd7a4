"""Delivery of assembled events to a Sentry-compatible endpoint."""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Protocol

import sentry_sdk
import structlog
from sentry_sdk.envelope import Envelope
from sentry_sdk.utils import Dsn

from ..protocol.models import Event

logger = structlog.get_logger(__name__)


class Transport(Protocol):
    """Sends one event and returns its dispatch identifier."""

    def send(self, event: Event, dsn: Dsn) -> str:
        ...


def build_envelope(event: Event) -> Envelope:
    """
    Wrap an event in a Sentry envelope.

    The payload is the event exactly as assembled; only a missing
    timestamp is filled in with the current time.
    """
    payload: Dict[str, Any] = event.to_payload()
    if "timestamp" not in payload:
        payload["timestamp"] = datetime.now(timezone.utc).isoformat()

    envelope = Envelope(headers={"event_id": payload["event_id"]})
    envelope.add_event(payload)
    return envelope


class SentryTransport:
    """
    Transport backed by the HTTP transport of a one-shot ``sentry_sdk.Client``.

    The envelope goes straight to the client's transport, so the client's
    event processing (default environment, PII scrubbing, extra trimming)
    never touches it. Delivery is best-effort: rate limits and network
    errors are logged by the SDK, not raised, and the event id is returned
    either way.
    """

    def __init__(
        self,
        flush_timeout: float = 2.0,
        client_factory: Callable[..., Any] = sentry_sdk.Client,
    ):
        self.flush_timeout = flush_timeout
        self.client_factory = client_factory

    def send(self, event: Event, dsn: Dsn) -> str:
        """
        Send the event and block until the client queue is flushed.

        Args:
            event: Fully assembled event
            dsn: Destination credential

        Returns:
            Event id as 32 hex characters
        """
        event_id = event.event_id.hex
        client = self.client_factory(
            dsn=str(dsn),
            default_integrations=False,
            auto_enabling_integrations=False,
            shutdown_timeout=self.flush_timeout,
        )

        try:
            if client.transport is None:
                logger.warning("event_not_sent_no_transport", event_id=event_id)
            else:
                client.transport.capture_envelope(build_envelope(event))
                logger.info("event_sent", event_id=event_id, host=dsn.host)
            client.flush(timeout=self.flush_timeout)
        finally:
            client.close(timeout=self.flush_timeout)

        return event_id

"""Event contracts and publishing interfaces for Service Bus communication."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from content_notify.events.contracts import EventEnvelope, NotificationDispatch
from content_notify.events.servicebus import ServiceBusPublisher


@runtime_checkable
class EventPublisher(Protocol):
    """Protocol for publishing events to a topic."""

    async def publish(self, event_type: str, data: dict[str, Any] | str) -> None:
        """Send one event."""
        ...


__all__ = [
    "EventEnvelope",
    "EventPublisher",
    "NotificationDispatch",
    "ServiceBusPublisher",
]

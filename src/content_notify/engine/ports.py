"""Collaborator protocols consumed by the dispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from content_notify.models.notification import NotificationEvent
    from content_notify.models.snapshot import ContentSnapshot


@runtime_checkable
class ContentStore(Protocol):
    """Read access to entity snapshots and user queries."""

    async def load(self, entity_id: str) -> ContentSnapshot | None:
        """Load the current snapshot of an entity, or None when it is missing."""
        ...

    async def query_active_users(self, exclude_ids: Iterable[str]) -> list[str]:
        """Return ids of active users not in ``exclude_ids``."""
        ...

    async def query_users_by_role(self, roles: Iterable[str]) -> list[str]:
        """Return ids of active users holding any of ``roles``."""
        ...


@runtime_checkable
class SubscriptionService(Protocol):
    """Subscriber bookkeeping for entities."""

    async def ensure_subscribed(self, user_id: str, entity_id: str) -> bool:
        """Subscribe if not already subscribed. Returns True when a row was created."""
        ...

    async def resolve_subscribers(self, entity_id: str) -> list[str]:
        """Return the user ids subscribed to an entity."""
        ...


@runtime_checkable
class DeliveryService(Protocol):
    """Hands a notification to the transport side."""

    async def send(
        self,
        event: NotificationEvent,
        explicit_recipients: list[str] | None = None,
    ) -> None:
        """Deliver an event to explicit recipients, or to the subject's subscribers."""
        ...


@runtime_checkable
class MessageStore(Protocol):
    """Persistence for emitted notification messages."""

    async def create(self, event: NotificationEvent) -> str:
        """Persist a message for ``event`` and return its id."""
        ...

    async def find_by_subject(self, entity_id: str) -> list[str]:
        """Return ids of messages about ``entity_id``."""
        ...

    async def update_published(self, message_id: str, published: bool) -> None:  # noqa: FBT001
        """Set the ``published`` flag on a message."""
        ...

"""Cosmos-backed implementations of the ContentStore and MessageStore protocols."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from content_notify.models.message import Message

if TYPE_CHECKING:
    from collections.abc import Iterable

    from content_notify.database.repositories.entities import EntityRepository
    from content_notify.database.repositories.messages import MessageRepository
    from content_notify.database.repositories.users import UserRepository
    from content_notify.models.notification import NotificationEvent
    from content_notify.models.snapshot import ContentSnapshot

logger = logging.getLogger(__name__)


class CosmosContentStore:
    """Entity snapshots and user lookups over the entities and users containers."""

    def __init__(self, entities: EntityRepository, users: UserRepository) -> None:
        self._entities = entities
        self._users = users

    async def load(self, entity_id: str) -> ContentSnapshot | None:
        entity = await self._entities.get(entity_id, entity_id)
        return entity.to_snapshot() if entity else None

    async def query_active_users(self, exclude_ids: Iterable[str]) -> list[str]:
        return await self._users.list_active_ids(exclude_ids)

    async def query_users_by_role(self, roles: Iterable[str]) -> list[str]:
        return await self._users.list_ids_by_role(roles)


class CosmosMessageStore:
    """Message persistence keyed by the event's dedupe key."""

    def __init__(self, messages: MessageRepository) -> None:
        self._messages = messages

    async def create(self, event: NotificationEvent) -> str:
        """Persist a message, returning the existing id for a repeated event."""
        existing = await self._messages.get_by_dedupe_key(event.dedupe_key)
        if existing is not None:
            logger.info("Message already recorded — key=%s message=%s", event.dedupe_key, existing.id)
            return existing.id
        message = await self._messages.create(Message.from_event(event))
        return message.id

    async def find_by_subject(self, entity_id: str) -> list[str]:
        return await self._messages.list_ids_by_subject(entity_id)

    async def update_published(self, message_id: str, published: bool) -> None:  # noqa: FBT001
        message = await self._messages.get(message_id, message_id)
        if message is None:
            logger.warning("Message vanished before publish sync — message=%s", message_id)
            return
        if message.published == published:
            return
        message.published = published
        await self._messages.update(message, message_id)

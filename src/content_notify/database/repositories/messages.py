"""Repository for the messages container (partitioned by /id)."""

from __future__ import annotations

from content_notify.database.repositories.base import BaseRepository
from content_notify.models.message import Message


class MessageRepository(BaseRepository[Message]):
    """Provide data access for the messages container."""

    container_name = "messages"
    model_class = Message

    async def get_by_dedupe_key(self, dedupe_key: str) -> Message | None:
        """Fetch the message already recorded for a dedupe key, if any."""
        results = await self.query(
            "SELECT * FROM c WHERE c.dedupe_key = @dedupe_key"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [{"name": "@dedupe_key", "value": dedupe_key}],
        )
        return results[0] if results else None

    async def list_ids_by_subject(self, entity_id: str) -> list[str]:
        """Fetch ids of every active message about an entity."""
        return await self.query_values(
            "SELECT VALUE c.id FROM c WHERE c.subject_entity_id = @entity_id"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [{"name": "@entity_id", "value": entity_id}],
        )

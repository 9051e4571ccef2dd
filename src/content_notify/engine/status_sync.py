"""Keep past message records' ``published`` flag in line with their subject."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from content_notify.errors import CollaboratorError
from content_notify.models.effects import SyncPublishStatus

if TYPE_CHECKING:
    from content_notify.engine.ports import MessageStore
    from content_notify.models.snapshot import ContentSnapshot

logger = logging.getLogger(__name__)


def plan_status_sync(
    previous: ContentSnapshot | None, current: ContentSnapshot
) -> SyncPublishStatus | None:
    """Return a sync request when the publish flag flipped, otherwise None."""
    if previous is None or previous.published == current.published:
        return None
    return SyncPublishStatus(entity_id=current.entity_id, published=current.published)


class StatusMirrorSynchronizer:
    """Applies ``SyncPublishStatus`` requests against the message store."""

    def __init__(self, messages: MessageStore) -> None:
        self._messages = messages

    async def sync(self, request: SyncPublishStatus) -> int:
        """Set ``published`` on every message about the subject. Returns the count."""
        try:
            message_ids = await self._messages.find_by_subject(request.entity_id)
        except Exception as exc:
            raise CollaboratorError("MessageStore.find_by_subject", exc) from exc

        for message_id in message_ids:
            try:
                await self._messages.update_published(message_id, request.published)
            except Exception as exc:
                raise CollaboratorError("MessageStore.update_published", exc) from exc

        logger.info(
            "Message publish status synced — entity=%s published=%s messages=%d",
            request.entity_id,
            request.published,
            len(message_ids),
        )
        return len(message_ids)

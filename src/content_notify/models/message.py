"""Message document model — the tracked record of every emitted notification."""

from __future__ import annotations

from content_notify.models.base import DocumentBase
from content_notify.models.notification import (
    NotificationEvent,
    NotificationTemplate,
    SubscriptionScope,
)
from content_notify.models.snapshot import EntityType


class Message(DocumentBase):
    """A persisted notification whose ``published`` flag mirrors its subject."""

    template: NotificationTemplate
    subject_entity_id: str
    subject_entity_type: EntityType
    owner_id: str
    published: bool
    original_revision_id: int | None = None
    new_revision_id: int | None = None
    subscription_scope: SubscriptionScope
    dedupe_key: str

    @classmethod
    def from_event(cls, event: NotificationEvent) -> Message:
        return cls(
            template=event.template,
            subject_entity_id=event.subject_entity_id,
            subject_entity_type=event.subject_entity_type,
            owner_id=event.owner_id,
            published=event.published,
            original_revision_id=event.original_revision_id,
            new_revision_id=event.new_revision_id,
            subscription_scope=event.subscription_scope,
            dedupe_key=event.dedupe_key,
        )

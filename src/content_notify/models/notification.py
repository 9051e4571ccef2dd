"""Notification event model — the decision engine's output."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from content_notify.models.snapshot import EntityType


class NotificationTemplate(StrEnum):
    """Message templates a lifecycle event can map to."""

    CREATE_CONTENT = "create_content"
    PUBLISH_CONTENT = "publish_content"
    UPDATE_CONTENT = "update_content"
    CREATE_COMMENT = "create_comment"
    REGISTER_USER = "register_user"


class SubscriptionScope(StrEnum):
    """How the delivery side resolves the recipients of an event."""

    ALL_SUBSCRIBERS_OF_SUBJECT = "all_subscribers_of_subject"
    CUSTOM_RECIPIENT_LIST = "custom_recipient_list"


class RecipientHint(BaseModel):
    """Recipient-resolution hint handed to the delivery collaborator.

    ``subject_id`` names the entity whose subscribers receive the event; for
    comments this is the parent content. ``roles`` is used by custom lists.
    """

    model_config = ConfigDict(frozen=True)

    subject_id: str | None = None
    roles: frozenset[str] = Field(default_factory=frozenset)


class NotificationEvent(BaseModel):
    """A notification worth sending, produced for exactly one lifecycle event."""

    model_config = ConfigDict(frozen=True)

    template: NotificationTemplate
    subject_entity_id: str
    subject_entity_type: EntityType
    owner_id: str
    published: bool
    original_revision_id: int | None = None
    new_revision_id: int | None = None
    subscription_scope: SubscriptionScope = SubscriptionScope.ALL_SUBSCRIBERS_OF_SUBJECT
    recipients: RecipientHint = Field(default_factory=RecipientHint)

    @property
    def dedupe_key(self) -> str:
        """Key identifying repeated emissions of the same notification."""
        revision = "none" if self.new_revision_id is None else str(self.new_revision_id)
        return f"{self.template}:{self.subject_entity_id}:{revision}"

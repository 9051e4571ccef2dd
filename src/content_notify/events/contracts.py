"""Typed contracts for lifecycle events, commands and notification messages."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, model_validator

from content_notify.models.notification import NotificationEvent
from content_notify.models.snapshot import ContentSnapshot

CONTENT_CREATED = "content-created"
CONTENT_UPDATED = "content-updated"
COMMENT_CREATED = "comment-created"
USER_REGISTERED = "user-registered"
SUBSCRIBE_FANOUT = "subscribe-fanout"
NOTIFICATION = "notification"


class EventEnvelope(BaseModel):
    """Canonical event envelope used on Service Bus."""

    event: str
    data: dict[str, Any] | str

    @classmethod
    def from_message_body(cls, body: str) -> EventEnvelope:
        """Parse an event envelope from a JSON message body.

        Accepts payloads where ``data`` was sent as stringified JSON.
        """
        payload = json.loads(body)
        envelope = cls.model_validate(payload)
        if isinstance(envelope.data, str):
            try:
                decoded = json.loads(envelope.data)
            except json.JSONDecodeError:
                return envelope
            if isinstance(decoded, dict):
                envelope.data = decoded
        return envelope


class ContentChange(BaseModel):
    """Payload for content-created and content-updated events."""

    previous: ContentSnapshot | None = None
    current: ContentSnapshot

    @model_validator(mode="after")
    def _same_entity(self) -> ContentChange:
        if self.previous is not None and self.previous.entity_id != self.current.entity_id:
            msg = (
                f"previous and current describe different entities: "
                f"{self.previous.entity_id} != {self.current.entity_id}"
            )
            raise ValueError(msg)
        return self


class CommentCreated(BaseModel):
    """Payload for comment-created; ``parent`` is loaded when omitted."""

    comment: ContentSnapshot
    parent: ContentSnapshot | None = None


class UserRegistered(BaseModel):
    user: ContentSnapshot


class NotificationDispatch(BaseModel):
    """Message handed to the transport side for one notification."""

    event: NotificationEvent
    recipients: list[str]

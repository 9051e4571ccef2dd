"""Subscription document model — a user following an entity."""

from __future__ import annotations

from content_notify.models.base import DocumentBase


def subscription_id(user_id: str, entity_id: str) -> str:
    """Deterministic document id so repeated subscribes hit the same row."""
    return f"{entity_id}:{user_id}"


class Subscription(DocumentBase):
    """A (user, entity) subscription and the channel it is delivered through."""

    user_id: str
    entity_id: str
    notifier: str = "email"

"""Data models for snapshots, notifications and Cosmos DB document types."""

from content_notify.models.effects import Decision, SideEffect, SubscribeActiveUsers, SyncPublishStatus
from content_notify.models.entity import Entity
from content_notify.models.message import Message
from content_notify.models.notification import (
    NotificationEvent,
    NotificationTemplate,
    RecipientHint,
    SubscriptionScope,
)
from content_notify.models.snapshot import ContentSnapshot, EntityType, RevisionTransition
from content_notify.models.subscription import Subscription, subscription_id
from content_notify.models.user import User

__all__ = [
    "ContentSnapshot",
    "Decision",
    "Entity",
    "EntityType",
    "Message",
    "NotificationEvent",
    "NotificationTemplate",
    "RecipientHint",
    "RevisionTransition",
    "SideEffect",
    "SubscribeActiveUsers",
    "Subscription",
    "SubscriptionScope",
    "SyncPublishStatus",
    "User",
    "subscription_id",
]

"""Side-effect requests issued by the decision engine and the decision container."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from content_notify.models.notification import NotificationEvent


class SubscribeActiveUsers(BaseModel):
    """Subscribe every active, non-excluded user to a new content item."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["subscribe_active_users"] = "subscribe_active_users"
    entity_id: str
    exclude_user_ids: frozenset[str] = Field(default_factory=frozenset)


class SyncPublishStatus(BaseModel):
    """Mirror a subject's publish flag onto its past message records."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["sync_publish_status"] = "sync_publish_status"
    entity_id: str
    published: bool


SideEffect = SubscribeActiveUsers | SyncPublishStatus


class Decision(BaseModel):
    """Outcome of one lifecycle event: an optional event plus side effects."""

    model_config = ConfigDict(frozen=True)

    event: NotificationEvent | None = None
    effects: tuple[SideEffect, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.event is None and not self.effects

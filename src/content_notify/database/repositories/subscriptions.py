"""Repository for the subscriptions container (partitioned by /entity_id)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from azure.cosmos.exceptions import CosmosResourceExistsError

from content_notify.database.repositories.base import BaseRepository
from content_notify.models.subscription import Subscription, subscription_id

if TYPE_CHECKING:
    from azure.cosmos.aio import ContainerProxy

logger = logging.getLogger(__name__)


def apply_notifier_policy(subscription: Subscription, notifier: str) -> Subscription:
    """Force every subscription onto the configured delivery channel."""
    if subscription.notifier != notifier:
        subscription.notifier = notifier
    return subscription


class SubscriptionRepository(BaseRepository[Subscription]):
    """Subscriber bookkeeping backed by the subscriptions container."""

    container_name = "subscriptions"
    model_class = Subscription

    def __init__(self, container: ContainerProxy, *, forced_notifier: str = "email") -> None:
        super().__init__(container)
        self._forced_notifier = forced_notifier

    async def ensure_subscribed(self, user_id: str, entity_id: str) -> bool:
        """Subscribe a user to an entity unless already subscribed.

        The document id is derived from the pair, so a concurrent duplicate
        insert surfaces as a conflict and is treated as already subscribed.
        """
        doc_id = subscription_id(user_id, entity_id)
        existing = await self.get(doc_id, entity_id)
        if existing is not None:
            if existing.notifier != self._forced_notifier:
                await self.update(apply_notifier_policy(existing, self._forced_notifier), entity_id)
            return False

        subscription = apply_notifier_policy(
            Subscription(id=doc_id, user_id=user_id, entity_id=entity_id),
            self._forced_notifier,
        )
        try:
            await self.create(subscription)
        except CosmosResourceExistsError:
            logger.debug("Subscription already exists — user=%s entity=%s", user_id, entity_id)
            return False
        logger.debug("Subscription created — user=%s entity=%s", user_id, entity_id)
        return True

    async def resolve_subscribers(self, entity_id: str) -> list[str]:
        """Return ids of users subscribed to an entity."""
        return await self.query_values(
            "SELECT VALUE c.user_id FROM c WHERE c.entity_id = @entity_id"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [{"name": "@entity_id", "value": entity_id}],
        )

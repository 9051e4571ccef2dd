"""Delivery adapter — hands notifications to the transport topic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from content_notify.events.contracts import NOTIFICATION, NotificationDispatch

if TYPE_CHECKING:
    from content_notify.engine.ports import SubscriptionService
    from content_notify.events import EventPublisher
    from content_notify.models.notification import NotificationEvent

logger = logging.getLogger(__name__)


class ServiceBusDeliveryService:
    """Resolve recipients and publish one ``notification`` message per event."""

    def __init__(self, publisher: EventPublisher, subscriptions: SubscriptionService) -> None:
        self._publisher = publisher
        self._subscriptions = subscriptions

    async def send(
        self,
        event: NotificationEvent,
        explicit_recipients: list[str] | None = None,
    ) -> None:
        if explicit_recipients is not None:
            recipients = list(explicit_recipients)
        else:
            subject_id = event.recipients.subject_id or event.subject_entity_id
            recipients = await self._subscriptions.resolve_subscribers(subject_id)

        # Never notify the author about their own action.
        recipients = [user_id for user_id in dict.fromkeys(recipients) if user_id != event.owner_id]
        if not recipients:
            logger.info(
                "No recipients for notification — template=%s subject=%s",
                event.template,
                event.subject_entity_id,
            )
            return

        dispatch = NotificationDispatch(event=event, recipients=recipients)
        await self._publisher.publish(NOTIFICATION, dispatch.model_dump(mode="json"))
        logger.info(
            "Notification handed off — template=%s subject=%s recipients=%d",
            event.template,
            event.subject_entity_id,
            len(recipients),
        )

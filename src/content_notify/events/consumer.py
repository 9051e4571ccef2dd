"""Service Bus consumer — receives lifecycle events and drives the dispatcher."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import secrets
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from content_notify.errors import CollaboratorError, SubjectResolutionFailed
from content_notify.events.contracts import (
    COMMENT_CREATED,
    CONTENT_CREATED,
    CONTENT_UPDATED,
    SUBSCRIBE_FANOUT,
    USER_REGISTERED,
    CommentCreated,
    ContentChange,
    EventEnvelope,
    UserRegistered,
)
from content_notify.models.effects import SubscribeActiveUsers

if TYPE_CHECKING:
    from content_notify.config import ServiceBusConfig
    from content_notify.engine.dispatcher import LifecycleDispatcher

logger = logging.getLogger(__name__)
_MAX_DEDUPE_IDS = 10_000
_BASE_RECONNECT_DELAY_SECONDS = 1.0
_MAX_RECONNECT_DELAY_SECONDS = 30.0
_JITTER_SCALE = 1000

_PAYLOAD_TYPES: dict[str, type[BaseModel]] = {
    CONTENT_CREATED: ContentChange,
    CONTENT_UPDATED: ContentChange,
    COMMENT_CREATED: CommentCreated,
    USER_REGISTERED: UserRegistered,
    SUBSCRIBE_FANOUT: SubscribeActiveUsers,
}


def _compute_reconnect_delay_seconds(attempt: int) -> float:
    """Return bounded exponential backoff delay with jitter."""
    base_delay = _BASE_RECONNECT_DELAY_SECONDS * (2 ** min(attempt, 10))
    jitter_ratio = secrets.randbelow(_JITTER_SCALE) / _JITTER_SCALE
    return min(
        _MAX_RECONNECT_DELAY_SECONDS,
        base_delay + (base_delay * jitter_ratio),
    )


class LifecycleEventConsumer:
    """Consume lifecycle events from Service Bus and dispatch them."""

    def __init__(self, config: ServiceBusConfig, dispatcher: LifecycleDispatcher) -> None:
        self._config = config
        self._dispatcher = dispatcher
        self._task: asyncio.Task | None = None
        self._running = False
        self._disabled = not config.connection_string
        self._processed_message_ids: set[str] = set()
        if self._disabled:
            logger.warning(
                "AZURE_SERVICEBUS_CONNECTION_STRING is not set — "
                "lifecycle events will not be consumed"
            )

    async def start(self) -> None:
        """Start the background consumer task."""
        if self._disabled:
            return
        self._running = True
        self._task = asyncio.create_task(self._consume())
        logger.info(
            "Lifecycle consumer started — topic=%s subscription=%s",
            self._config.lifecycle_topic_name,
            self._config.worker_subscription_name,
        )

    async def stop(self) -> None:
        """Stop the background consumer task."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        logger.info("Lifecycle consumer stopped")

    def _remember_message_id(self, message_id: str) -> None:
        """Remember processed message IDs for at-least-once delivery deduplication."""
        self._processed_message_ids.add(message_id)
        if len(self._processed_message_ids) > _MAX_DEDUPE_IDS:
            self._processed_message_ids.clear()

    async def _handle_event(self, envelope: EventEnvelope, *, message_id: str | None) -> bool:
        """Handle a decoded envelope. Returns True when the event type is known.

        ``CollaboratorError`` propagates so the caller can abandon the message.
        """
        payload_type = _PAYLOAD_TYPES.get(envelope.event)
        if payload_type is None:
            return False
        if not isinstance(envelope.data, dict):
            logger.warning("Ignoring invalid %s payload (non-object data)", envelope.event)
            return True

        try:
            payload = payload_type.model_validate(envelope.data)
        except ValidationError:
            logger.warning("Ignoring invalid %s payload", envelope.event, exc_info=True)
            return True

        if message_id and message_id in self._processed_message_ids:
            logger.info("Ignoring duplicate lifecycle message id=%s", message_id)
            return True

        try:
            await self._dispatch(envelope.event, payload)
        except SubjectResolutionFailed as exc:
            logger.warning("Dropping %s event — %s", envelope.event, exc)

        if message_id:
            self._remember_message_id(message_id)
        return True

    async def _dispatch(self, event_type: str, payload: BaseModel) -> None:
        if isinstance(payload, ContentChange):
            if event_type == CONTENT_CREATED:
                await self._dispatcher.content_created(payload.current)
            else:
                await self._dispatcher.content_updated(payload.previous, payload.current)
        elif isinstance(payload, CommentCreated):
            await self._dispatcher.comment_created(payload.comment, payload.parent)
        elif isinstance(payload, UserRegistered):
            await self._dispatcher.user_registered(payload.user)
        elif isinstance(payload, SubscribeActiveUsers):
            await self._dispatcher.subscribe_active_users(payload)

    async def _consume(self) -> None:
        """Consume messages from the Service Bus subscription with reconnect backoff."""
        from azure.servicebus.exceptions import (  # noqa: PLC0415
            ServiceBusConnectionError,
        )

        attempt = 0
        while self._running:
            try:
                await self._consume_once()
                attempt = 0
            except asyncio.CancelledError:
                raise
            except ServiceBusConnectionError as exc:
                if not self._running:
                    break
                delay = _compute_reconnect_delay_seconds(attempt)
                attempt += 1
                logger.warning(
                    "Lifecycle consumer connection failed — %s; retrying in %.1fs",
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)
            except Exception:  # noqa: BLE001
                if not self._running:
                    break
                delay = _compute_reconnect_delay_seconds(attempt)
                attempt += 1
                logger.warning(
                    "Lifecycle consumer error; retrying in %.1fs",
                    delay,
                    exc_info=True,
                )
                await asyncio.sleep(delay)

    async def _consume_once(self) -> None:
        """Run a single Service Bus receive session."""
        from azure.servicebus.aio import ServiceBusClient  # noqa: PLC0415

        client = ServiceBusClient.from_connection_string(self._config.connection_string)
        async with client:
            receiver = client.get_subscription_receiver(
                topic_name=self._config.lifecycle_topic_name,
                subscription_name=self._config.worker_subscription_name,
            )
            async with receiver:
                while self._running:
                    messages = await receiver.receive_messages(
                        max_message_count=10,
                        max_wait_time=5,
                    )
                    for message in messages:
                        try:
                            envelope = EventEnvelope.from_message_body(str(message))
                            handled = await self._handle_event(
                                envelope,
                                message_id=str(message.message_id) if message.message_id else None,
                            )
                            await receiver.complete_message(message)
                            if not handled:
                                logger.debug("Ignored unknown lifecycle event: %s", envelope.event)
                        except asyncio.CancelledError:
                            raise
                        except json.JSONDecodeError:
                            logger.warning("Invalid Service Bus message payload, abandoning message")
                            await receiver.abandon_message(message)
                        except CollaboratorError as exc:
                            logger.warning(
                                "Collaborator failure, abandoning message for redelivery — operation=%s",
                                exc.operation,
                                exc_info=True,
                            )
                            await receiver.abandon_message(message)
                        except Exception:  # noqa: BLE001
                            logger.warning(
                                "Failed to process lifecycle message",
                                exc_info=True,
                            )
                            await receiver.abandon_message(message)

"""Lifecycle dispatcher — runs engine decisions against the collaborators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from content_notify.engine.status_sync import StatusMirrorSynchronizer
from content_notify.errors import CollaboratorError, SubjectResolutionFailed
from content_notify.models.effects import SubscribeActiveUsers, SyncPublishStatus
from content_notify.models.notification import SubscriptionScope

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from content_notify.engine.decision import NotificationDecisionEngine
    from content_notify.engine.ports import (
        ContentStore,
        DeliveryService,
        MessageStore,
        SubscriptionService,
    )
    from content_notify.models.effects import Decision, SideEffect
    from content_notify.models.notification import NotificationEvent
    from content_notify.models.snapshot import ContentSnapshot

logger = logging.getLogger(__name__)


async def _call(operation: str, coro: Awaitable[Any]) -> Any:
    """Await a collaborator call, re-raising failures as ``CollaboratorError``."""
    try:
        return await coro
    except CollaboratorError:
        raise
    except Exception as exc:
        raise CollaboratorError(operation, exc) from exc


class LifecycleDispatcher:
    """Entry point for lifecycle events: decide, persist, deliver, apply effects.

    Nothing is retried here. A failure part-way through leaves earlier steps
    applied; message creation is keyed on the event's dedupe key so a redelivered
    lifecycle event does not produce a second message.
    """

    def __init__(
        self,
        engine: NotificationDecisionEngine,
        content_store: ContentStore,
        subscriptions: SubscriptionService,
        delivery: DeliveryService,
        messages: MessageStore,
        *,
        enqueue_fanout: Callable[[SubscribeActiveUsers], Awaitable[None]] | None = None,
    ) -> None:
        self._engine = engine
        self._content_store = content_store
        self._subscriptions = subscriptions
        self._delivery = delivery
        self._messages = messages
        self._enqueue_fanout = enqueue_fanout
        self._status_sync = StatusMirrorSynchronizer(messages)

    async def content_created(self, current: ContentSnapshot) -> Decision:
        decision = self._engine.on_content_created(current)
        await self._execute(decision)
        return decision

    async def content_updated(
        self,
        previous: ContentSnapshot | None,
        current: ContentSnapshot,
    ) -> Decision:
        decision = self._engine.on_content_updated(previous, current)
        await self._execute(decision)
        return decision

    async def comment_created(
        self,
        comment: ContentSnapshot,
        parent: ContentSnapshot | None = None,
    ) -> Decision:
        """Handle a new comment, loading its parent when the caller did not pass it."""
        if parent is None:
            # Comment eligibility depends on the parent bundle, so the parent is loaded before filtering.
            if not comment.parent_id:
                raise SubjectResolutionFailed(comment.entity_id, "comment has no parent_id")
            parent = await _call("ContentStore.load", self._content_store.load(comment.parent_id))
            if parent is None:
                raise SubjectResolutionFailed(comment.parent_id)
        decision = self._engine.on_comment_created(comment, parent)
        await self._execute(decision)
        return decision

    async def user_registered(self, user: ContentSnapshot) -> Decision:
        decision = self._engine.on_user_registered(user)
        await self._execute(decision)
        return decision

    async def subscribe_active_users(self, request: SubscribeActiveUsers) -> int:
        """Subscribe every active user to the entity. Returns the number newly subscribed."""
        user_ids: list[str] = await _call(
            "ContentStore.query_active_users",
            self._content_store.query_active_users(request.exclude_user_ids),
        )
        created = 0
        for user_id in user_ids:
            if user_id in request.exclude_user_ids:
                continue
            was_created = await _call(
                "SubscriptionService.ensure_subscribed",
                self._subscriptions.ensure_subscribed(user_id, request.entity_id),
            )
            if was_created:
                created += 1
        logger.info(
            "Auto-subscription complete — entity=%s users=%d new=%d",
            request.entity_id,
            len(user_ids),
            created,
        )
        return created

    async def _execute(self, decision: Decision) -> None:
        if decision.event is not None:
            await self._emit(decision.event)
        for effect in decision.effects:
            await self._apply(effect)

    async def _emit(self, event: NotificationEvent) -> None:
        message_id = await _call("MessageStore.create", self._messages.create(event))

        recipients: list[str] | None = None
        if event.subscription_scope == SubscriptionScope.CUSTOM_RECIPIENT_LIST:
            recipients = await _call(
                "ContentStore.query_users_by_role",
                self._content_store.query_users_by_role(event.recipients.roles),
            )

        await _call("DeliveryService.send", self._delivery.send(event, recipients))
        logger.info(
            "Notification emitted — template=%s subject=%s message=%s",
            event.template,
            event.subject_entity_id,
            message_id,
        )

    async def _apply(self, effect: SideEffect) -> None:
        if isinstance(effect, SyncPublishStatus):
            await self._status_sync.sync(effect)
        elif isinstance(effect, SubscribeActiveUsers):
            if self._enqueue_fanout is not None:
                await _call("enqueue_fanout", self._enqueue_fanout(effect))
                logger.info("Auto-subscription queued — entity=%s", effect.entity_id)
            else:
                await self.subscribe_active_users(effect)

"""Tests for LifecycleDispatcher — decisions executed against collaborators."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest

from content_notify.engine.decision import NotificationDecisionEngine
from content_notify.engine.dispatcher import LifecycleDispatcher
from content_notify.errors import CollaboratorError, SubjectResolutionFailed
from content_notify.models.effects import SubscribeActiveUsers
from content_notify.models.notification import NotificationTemplate, SubscriptionScope
from content_notify.models.snapshot import ContentSnapshot, EntityType

SnapshotFactory = Callable[..., ContentSnapshot]


class TestContentCreated:
    """Dispatching content creation."""

    async def test_persists_delivers_and_subscribes(
        self, dispatcher, snapshot: SnapshotFactory, content_store, subscriptions, delivery, messages
    ) -> None:
        """Creation records a message, delivers it and subscribes active users."""
        content_store.users = {"0": set(), "1": {"admin"}, "user-2": set(), "user-3": {"editor"}}

        decision = await dispatcher.content_created(snapshot(entity_id="node-1"))

        assert decision.event is not None
        assert len(messages.messages) == 1
        assert delivery.sent == [(decision.event, None)]
        assert subscriptions.subscriptions == {("user-2", "node-1"), ("user-3", "node-1")}

    async def test_repeated_fanout_does_not_duplicate(
        self, dispatcher, content_store, subscriptions
    ) -> None:
        content_store.users = {"user-2": set()}
        request = SubscribeActiveUsers(entity_id="node-1", exclude_user_ids=frozenset({"0"}))

        first = await dispatcher.subscribe_active_users(request)
        second = await dispatcher.subscribe_active_users(request)

        assert (first, second) == (1, 0)
        assert subscriptions.subscriptions == {("user-2", "node-1")}

    async def test_fanout_can_be_queued(
        self, engine: NotificationDecisionEngine, snapshot: SnapshotFactory, content_store, subscriptions, delivery, messages
    ) -> None:
        enqueue = AsyncMock()
        dispatcher = LifecycleDispatcher(
            engine, content_store, subscriptions, delivery, messages, enqueue_fanout=enqueue
        )

        await dispatcher.content_created(snapshot(entity_id="node-5"))

        enqueue.assert_awaited_once()
        request = enqueue.await_args.args[0]
        assert request.entity_id == "node-5"
        assert "query_active_users" not in content_store.calls
        assert subscriptions.subscriptions == set()

    async def test_untracked_bundle_touches_nothing(
        self, dispatcher, snapshot: SnapshotFactory, content_store, subscriptions, delivery, messages
    ) -> None:
        await dispatcher.content_created(snapshot(bundle="page"))

        assert content_store.calls == []
        assert subscriptions.calls == []
        assert delivery.sent == []
        assert messages.calls == []


class TestContentUpdated:
    """Dispatching content updates."""

    async def test_unpublish_syncs_past_messages(
        self, dispatcher, snapshot: SnapshotFactory, delivery, messages
    ) -> None:
        await dispatcher.content_created(snapshot(published=True, revision_id=1))
        await dispatcher.content_updated(
            snapshot(published=True, revision_id=1),
            snapshot(published=False, revision_id=1),
        )

        assert len(delivery.sent) == 1
        assert [record["published"] for record in messages.messages.values()] == [False]

    async def test_redelivered_update_reuses_message(
        self, dispatcher, snapshot: SnapshotFactory, messages
    ) -> None:
        previous = snapshot(published=True, revision_id=1)
        current = snapshot(published=True, revision_id=2)

        await dispatcher.content_updated(previous, current)
        await dispatcher.content_updated(previous, current)

        assert len(messages.messages) == 1

    async def test_suppressed_update_sends_nothing(
        self, dispatcher, snapshot: SnapshotFactory, delivery, messages
    ) -> None:
        await dispatcher.content_updated(
            snapshot(published=True, revision_id=5),
            snapshot(published=True, revision_id=5, translation_affected_by_this_revision=False),
        )

        assert delivery.sent == []
        assert messages.calls == []


class TestCommentCreated:
    """Dispatching comment creation."""

    async def test_loads_parent_when_missing(
        self, dispatcher, snapshot: SnapshotFactory, content_store, delivery
    ) -> None:
        content_store.snapshots["node-1"] = snapshot(entity_id="node-1", bundle="yammer")
        comment = snapshot(entity_id="comment-1", entity_type=EntityType.COMMENT, parent_id="node-1")

        decision = await dispatcher.comment_created(comment)

        assert decision.event is not None
        assert decision.event.template == NotificationTemplate.CREATE_COMMENT
        assert content_store.calls == ["load"]
        assert delivery.sent == [(decision.event, None)]

    async def test_unresolvable_parent_raises(
        self, dispatcher, snapshot: SnapshotFactory, delivery
    ) -> None:
        comment = snapshot(entity_id="comment-1", entity_type=EntityType.COMMENT, parent_id="node-404")

        with pytest.raises(SubjectResolutionFailed):
            await dispatcher.comment_created(comment)

        assert delivery.sent == []

    async def test_comment_on_untracked_content_makes_no_calls(
        self, dispatcher, snapshot: SnapshotFactory, content_store, subscriptions, delivery, messages
    ) -> None:
        parent = snapshot(entity_id="node-1", bundle="page")
        comment = snapshot(entity_id="comment-1", entity_type=EntityType.COMMENT, parent_id="node-1")

        decision = await dispatcher.comment_created(comment, parent)

        assert decision.is_empty
        assert content_store.calls == []
        assert subscriptions.calls == []
        assert delivery.sent == []
        assert messages.calls == []

    async def test_loaded_untracked_parent_stops_after_load(
        self, dispatcher, snapshot: SnapshotFactory, content_store, subscriptions, delivery, messages
    ) -> None:
        """A fetched parent outside the tracked bundles ends the event after the single load."""
        content_store.snapshots["node-1"] = snapshot(entity_id="node-1", bundle="page")
        comment = snapshot(entity_id="comment-1", entity_type=EntityType.COMMENT, parent_id="node-1")

        decision = await dispatcher.comment_created(comment)

        assert decision.is_empty
        assert content_store.calls == ["load"]
        assert subscriptions.calls == []
        assert delivery.sent == []
        assert messages.calls == []


class TestUserRegistered:
    """Dispatching user registration."""

    async def test_recipients_resolved_from_roles(
        self, dispatcher, snapshot: SnapshotFactory, content_store, subscriptions, delivery
    ) -> None:
        """Admins are notified explicitly; the general subscriber pool is not consulted."""
        content_store.users = {"user-1": {"admin"}, "user-2": {"editor"}, "user-3": {"admin", "editor"}}
        subscriptions.subscriptions = {("user-2", "user-42")}
        user = snapshot(entity_id="user-42", entity_type=EntityType.USER, bundle="", owner_id="user-42")

        decision = await dispatcher.user_registered(user)

        assert decision.event is not None
        assert decision.event.subscription_scope == SubscriptionScope.CUSTOM_RECIPIENT_LIST
        event, recipients = delivery.sent[0]
        assert event == decision.event
        assert sorted(recipients) == ["user-1", "user-3"]
        assert "resolve_subscribers" not in subscriptions.calls


class TestCollaboratorErrors:
    """Collaborator failures surface as CollaboratorError."""

    async def test_delivery_failure_names_operation(
        self, engine: NotificationDecisionEngine, snapshot: SnapshotFactory, content_store, subscriptions, messages
    ) -> None:
        delivery = AsyncMock()
        delivery.send.side_effect = ConnectionError("service bus down")
        dispatcher = LifecycleDispatcher(engine, content_store, subscriptions, delivery, messages)

        with pytest.raises(CollaboratorError) as exc_info:
            await dispatcher.content_updated(
                snapshot(published=True, revision_id=1),
                snapshot(published=True, revision_id=2),
            )

        assert exc_info.value.operation == "DeliveryService.send"
        assert isinstance(exc_info.value.cause, ConnectionError)

    async def test_parent_load_failure_names_operation(
        self, engine: NotificationDecisionEngine, snapshot: SnapshotFactory, subscriptions, delivery, messages
    ) -> None:
        content_store = AsyncMock()
        content_store.load.side_effect = TimeoutError()
        dispatcher = LifecycleDispatcher(engine, content_store, subscriptions, delivery, messages)
        comment = snapshot(entity_id="comment-1", entity_type=EntityType.COMMENT, parent_id="node-1")

        with pytest.raises(CollaboratorError) as exc_info:
            await dispatcher.comment_created(comment)

        assert exc_info.value.operation == "ContentStore.load"

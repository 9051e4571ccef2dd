"""Shared fixtures: snapshot factory and in-memory collaborator fakes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import pytest

from content_notify.engine.decision import NotificationDecisionEngine
from content_notify.engine.dispatcher import LifecycleDispatcher
from content_notify.engine.eligibility import EligibilityFilter
from content_notify.models.notification import NotificationEvent
from content_notify.models.snapshot import ContentSnapshot, EntityType

TRACKED_BUNDLES = {"blog", "book_page", "yammer"}


def make_snapshot(**overrides: Any) -> ContentSnapshot:
    """Build a content snapshot with sensible defaults."""
    fields: dict[str, Any] = {
        "entity_id": "node-1",
        "entity_type": EntityType.CONTENT,
        "bundle": "blog",
        "revision_id": 1,
        "owner_id": "user-2",
        "published": False,
    }
    fields.update(overrides)
    return ContentSnapshot(**fields)


class FakeContentStore:
    def __init__(self) -> None:
        self.snapshots: dict[str, ContentSnapshot] = {}
        self.users: dict[str, set[str]] = {}
        self.calls: list[str] = []

    async def load(self, entity_id: str) -> ContentSnapshot | None:
        self.calls.append("load")
        return self.snapshots.get(entity_id)

    async def query_active_users(self, exclude_ids: Iterable[str]) -> list[str]:
        self.calls.append("query_active_users")
        excluded = set(exclude_ids)
        return [user_id for user_id in self.users if user_id not in excluded]

    async def query_users_by_role(self, roles: Iterable[str]) -> list[str]:
        self.calls.append("query_users_by_role")
        wanted = set(roles)
        return [user_id for user_id, user_roles in self.users.items() if user_roles & wanted]


class FakeSubscriptionService:
    def __init__(self) -> None:
        self.subscriptions: set[tuple[str, str]] = set()
        self.calls: list[str] = []

    async def ensure_subscribed(self, user_id: str, entity_id: str) -> bool:
        self.calls.append("ensure_subscribed")
        key = (user_id, entity_id)
        if key in self.subscriptions:
            return False
        self.subscriptions.add(key)
        return True

    async def resolve_subscribers(self, entity_id: str) -> list[str]:
        self.calls.append("resolve_subscribers")
        return sorted(user for user, entity in self.subscriptions if entity == entity_id)


class FakeDeliveryService:
    def __init__(self) -> None:
        self.sent: list[tuple[NotificationEvent, list[str] | None]] = []

    async def send(
        self,
        event: NotificationEvent,
        explicit_recipients: list[str] | None = None,
    ) -> None:
        self.sent.append((event, explicit_recipients))


class FakeMessageStore:
    def __init__(self) -> None:
        self.messages: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []

    async def create(self, event: NotificationEvent) -> str:
        self.calls.append("create")
        for message_id, record in self.messages.items():
            if record["dedupe_key"] == event.dedupe_key:
                return message_id
        message_id = f"msg-{len(self.messages) + 1}"
        self.messages[message_id] = {
            "subject": event.subject_entity_id,
            "published": event.published,
            "dedupe_key": event.dedupe_key,
        }
        return message_id

    async def find_by_subject(self, entity_id: str) -> list[str]:
        self.calls.append("find_by_subject")
        return [message_id for message_id, record in self.messages.items() if record["subject"] == entity_id]

    async def update_published(self, message_id: str, published: bool) -> None:
        self.calls.append("update_published")
        self.messages[message_id]["published"] = published


@pytest.fixture
def snapshot() -> Callable[..., ContentSnapshot]:
    return make_snapshot


@pytest.fixture
def engine() -> NotificationDecisionEngine:
    return NotificationDecisionEngine(
        EligibilityFilter(TRACKED_BUNDLES),
        privileged_roles={"admin"},
        excluded_user_ids={"0", "1"},
    )


@pytest.fixture
def content_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def subscriptions() -> FakeSubscriptionService:
    return FakeSubscriptionService()


@pytest.fixture
def delivery() -> FakeDeliveryService:
    return FakeDeliveryService()


@pytest.fixture
def messages() -> FakeMessageStore:
    return FakeMessageStore()


@pytest.fixture
def dispatcher(
    engine: NotificationDecisionEngine,
    content_store: FakeContentStore,
    subscriptions: FakeSubscriptionService,
    delivery: FakeDeliveryService,
    messages: FakeMessageStore,
) -> LifecycleDispatcher:
    return LifecycleDispatcher(engine, content_store, subscriptions, delivery, messages)

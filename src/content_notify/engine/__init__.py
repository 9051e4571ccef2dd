"""Notification decision engine and the dispatcher that executes its decisions."""

from content_notify.engine.classifier import Classification, classify_transition
from content_notify.engine.decision import NotificationDecisionEngine
from content_notify.engine.dispatcher import LifecycleDispatcher
from content_notify.engine.eligibility import EligibilityFilter
from content_notify.engine.ports import ContentStore, DeliveryService, MessageStore, SubscriptionService
from content_notify.engine.status_sync import StatusMirrorSynchronizer, plan_status_sync

__all__ = [
    "Classification",
    "ContentStore",
    "DeliveryService",
    "EligibilityFilter",
    "LifecycleDispatcher",
    "MessageStore",
    "NotificationDecisionEngine",
    "StatusMirrorSynchronizer",
    "SubscriptionService",
    "classify_transition",
    "plan_status_sync",
]

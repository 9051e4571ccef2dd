"""Notification decision engine — lifecycle events in, decisions out.

The engine is pure: every input it needs arrives as a snapshot and it never
calls a collaborator. ``LifecycleDispatcher`` runs its decisions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from content_notify.engine.classifier import classify_transition
from content_notify.engine.status_sync import plan_status_sync
from content_notify.errors import SubjectResolutionFailed
from content_notify.models.effects import Decision, SubscribeActiveUsers
from content_notify.models.notification import (
    NotificationEvent,
    NotificationTemplate,
    RecipientHint,
    SubscriptionScope,
)
from content_notify.models.snapshot import EntityType, RevisionTransition

if TYPE_CHECKING:
    from collections.abc import Iterable

    from content_notify.engine.eligibility import EligibilityFilter
    from content_notify.models.effects import SideEffect
    from content_notify.models.snapshot import ContentSnapshot

logger = logging.getLogger(__name__)

_NO_DECISION = Decision()


class NotificationDecisionEngine:
    """Decides whether a lifecycle event warrants a notification."""

    def __init__(
        self,
        eligibility: EligibilityFilter,
        *,
        privileged_roles: Iterable[str] = ("admin",),
        excluded_user_ids: Iterable[str] = ("0", "1"),
    ) -> None:
        self._eligibility = eligibility
        self._privileged_roles = frozenset(privileged_roles)
        self._excluded_user_ids = frozenset(excluded_user_ids)

    def on_content_created(self, current: ContentSnapshot) -> Decision:
        """Emit a create or publish notification and request auto-subscription."""
        if not self._is_tracked_content(current):
            return _NO_DECISION

        event = self._content_event(RevisionTransition(current=current))
        effects: list[SideEffect] = [
            SubscribeActiveUsers(
                entity_id=current.entity_id,
                exclude_user_ids=self._excluded_user_ids,
            )
        ]
        return Decision(event=event, effects=tuple(effects))

    def on_content_updated(
        self,
        previous: ContentSnapshot | None,
        current: ContentSnapshot,
    ) -> Decision:
        """Classify an update and mirror publish-status changes onto past messages."""
        if not self._is_tracked_content(current):
            return _NO_DECISION

        transition = RevisionTransition(previous=previous, current=current)
        event = self._content_event(transition)

        effects: list[SideEffect] = []
        sync = plan_status_sync(previous, current)
        if sync is not None:
            effects.append(sync)

        if event is None:
            logger.debug(
                "Update suppressed — entity=%s revision=%d",
                current.entity_id,
                current.revision_id,
            )
        return Decision(event=event, effects=tuple(effects))

    def on_comment_created(
        self,
        comment: ContentSnapshot,
        parent: ContentSnapshot | None,
    ) -> Decision:
        """Emit a comment notification addressed to the parent's subscribers.

        Raises ``SubjectResolutionFailed`` when the parent is unknown.
        """
        if parent is None:
            raise SubjectResolutionFailed(comment.parent_id or comment.entity_id, "comment parent missing")
        if not self._eligibility.is_tracked_comment(parent):
            logger.debug("Comment on untracked content skipped — comment=%s parent=%s", comment.entity_id, parent.entity_id)
            return _NO_DECISION

        event = NotificationEvent(
            template=NotificationTemplate.CREATE_COMMENT,
            subject_entity_id=comment.entity_id,
            subject_entity_type=EntityType.COMMENT,
            owner_id=comment.owner_id,
            published=comment.published,
            subscription_scope=SubscriptionScope.ALL_SUBSCRIBERS_OF_SUBJECT,
            recipients=RecipientHint(subject_id=parent.entity_id),
        )
        return Decision(event=event)

    def on_user_registered(self, user: ContentSnapshot) -> Decision:
        """Emit a registration notification for the privileged role holders."""
        if not self._eligibility.is_tracked_bundle(EntityType.USER, user.bundle):
            return _NO_DECISION

        event = NotificationEvent(
            template=NotificationTemplate.REGISTER_USER,
            subject_entity_id=user.entity_id,
            subject_entity_type=EntityType.USER,
            owner_id=user.entity_id,
            published=user.published,
            subscription_scope=SubscriptionScope.CUSTOM_RECIPIENT_LIST,
            recipients=RecipientHint(roles=self._privileged_roles),
        )
        return Decision(event=event)

    def _is_tracked_content(self, current: ContentSnapshot) -> bool:
        if current.entity_type != EntityType.CONTENT:
            logger.debug("Non-content snapshot skipped — entity=%s type=%s", current.entity_id, current.entity_type)
            return False
        if not self._eligibility.is_tracked_bundle(current.entity_type, current.bundle):
            logger.debug("Untracked content skipped — entity=%s bundle=%s", current.entity_id, current.bundle)
            return False
        return True

    def _content_event(self, transition: RevisionTransition) -> NotificationEvent | None:
        classification = classify_transition(transition)
        if classification is None:
            return None
        current = transition.current
        return NotificationEvent(
            template=classification.template,
            subject_entity_id=current.entity_id,
            subject_entity_type=current.entity_type,
            owner_id=current.owner_id,
            published=current.published,
            original_revision_id=classification.original_revision_id,
            new_revision_id=classification.new_revision_id,
            subscription_scope=SubscriptionScope.ALL_SUBSCRIBERS_OF_SUBJECT,
            recipients=RecipientHint(subject_id=current.entity_id),
        )

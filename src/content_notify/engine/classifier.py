"""Revision transition classifier for content create/update events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from content_notify.models.notification import NotificationTemplate

if TYPE_CHECKING:
    from content_notify.models.snapshot import RevisionTransition


@dataclass(frozen=True, slots=True)
class Classification:
    """Template chosen for a transition, plus revision ids for diff display."""

    template: NotificationTemplate
    original_revision_id: int | None = None
    new_revision_id: int | None = None


def classify_transition(transition: RevisionTransition) -> Classification | None:
    """Pick the notification template for a content transition.

    Returns ``None`` when the save changed nothing displayable and was not a
    publish transition. Unpublishing is not special-cased: it notifies as an
    update when the revision changed and is suppressed otherwise.
    """
    current = transition.current
    previous = transition.previous

    if previous is None:
        template = (
            NotificationTemplate.PUBLISH_CONTENT
            if current.published
            else NotificationTemplate.CREATE_CONTENT
        )
        return Classification(template=template)

    newly_published = current.published and not previous.published

    # An untouched translation gets no real revision of its own.
    if not current.translation_affected_by_this_revision:
        original_revision_id = new_revision_id = current.revision_id
        is_new_revision = False
    else:
        original_revision_id = previous.revision_id
        new_revision_id = current.revision_id
        is_new_revision = original_revision_id != new_revision_id

    if newly_published:
        template = NotificationTemplate.PUBLISH_CONTENT
    elif is_new_revision:
        template = NotificationTemplate.UPDATE_CONTENT
    else:
        return None

    return Classification(
        template=template,
        original_revision_id=original_revision_id,
        new_revision_id=new_revision_id,
    )

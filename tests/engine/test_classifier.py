"""Tests for the revision transition classifier."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from content_notify.engine.classifier import classify_transition
from content_notify.models.notification import NotificationTemplate
from content_notify.models.snapshot import ContentSnapshot, RevisionTransition

SnapshotFactory = Callable[..., ContentSnapshot]


class TestCreation:
    """Transitions without a previous snapshot."""

    @pytest.mark.parametrize(
        ("published", "expected"),
        [
            (False, NotificationTemplate.CREATE_CONTENT),
            (True, NotificationTemplate.PUBLISH_CONTENT),
        ],
    )
    def test_template_follows_publish_flag(
        self, snapshot: SnapshotFactory, published: bool, expected: NotificationTemplate
    ) -> None:
        """Creation maps to create or publish depending on the current flag."""
        result = classify_transition(RevisionTransition(current=snapshot(published=published)))

        assert result is not None
        assert result.template == expected

    def test_creation_carries_no_revision_ids(self, snapshot: SnapshotFactory) -> None:
        result = classify_transition(RevisionTransition(current=snapshot(revision_id=7)))

        assert result is not None
        assert result.original_revision_id is None
        assert result.new_revision_id is None


class TestUpdate:
    """Transitions with both snapshots."""

    def test_newly_published_wins_over_revision_flag(self, snapshot: SnapshotFactory) -> None:
        """A publish transition notifies even without a new revision."""
        previous = snapshot(published=False, revision_id=5)
        current = snapshot(published=True, revision_id=5, translation_affected_by_this_revision=False)

        result = classify_transition(RevisionTransition(previous=previous, current=current))

        assert result is not None
        assert result.template == NotificationTemplate.PUBLISH_CONTENT
        assert result.original_revision_id == 5
        assert result.new_revision_id == 5

    def test_publish_with_new_revision(self, snapshot: SnapshotFactory) -> None:
        previous = snapshot(published=False, revision_id=5)
        current = snapshot(published=True, revision_id=6)

        result = classify_transition(RevisionTransition(previous=previous, current=current))

        assert result is not None
        assert result.template == NotificationTemplate.PUBLISH_CONTENT
        assert (result.original_revision_id, result.new_revision_id) == (5, 6)

    def test_new_revision_is_an_update(self, snapshot: SnapshotFactory) -> None:
        previous = snapshot(published=True, revision_id=5)
        current = snapshot(published=True, revision_id=6)

        result = classify_transition(RevisionTransition(previous=previous, current=current))

        assert result is not None
        assert result.template == NotificationTemplate.UPDATE_CONTENT
        assert result.original_revision_id != result.new_revision_id

    def test_unaffected_translation_is_suppressed(self, snapshot: SnapshotFactory) -> None:
        """An untouched translation with no publish change emits nothing."""
        previous = snapshot(published=True, revision_id=5)
        current = snapshot(published=True, revision_id=6, translation_affected_by_this_revision=False)

        assert classify_transition(RevisionTransition(previous=previous, current=current)) is None

    def test_same_revision_is_suppressed(self, snapshot: SnapshotFactory) -> None:
        previous = snapshot(published=False, revision_id=5)
        current = snapshot(published=False, revision_id=5)

        assert classify_transition(RevisionTransition(previous=previous, current=current)) is None

    def test_unpublish_with_new_revision_is_an_update(self, snapshot: SnapshotFactory) -> None:
        previous = snapshot(published=True, revision_id=5)
        current = snapshot(published=False, revision_id=6)

        result = classify_transition(RevisionTransition(previous=previous, current=current))

        assert result is not None
        assert result.template == NotificationTemplate.UPDATE_CONTENT

    def test_unpublish_without_new_revision_is_suppressed(self, snapshot: SnapshotFactory) -> None:
        previous = snapshot(published=True, revision_id=5)
        current = snapshot(published=False, revision_id=5)

        assert classify_transition(RevisionTransition(previous=previous, current=current)) is None


def test_transition_rejects_mismatched_entities(snapshot: SnapshotFactory) -> None:
    with pytest.raises(ValueError, match="different entities"):
        RevisionTransition(previous=snapshot(entity_id="a"), current=snapshot(entity_id="b"))

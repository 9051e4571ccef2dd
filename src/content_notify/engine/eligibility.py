"""Eligibility filter — decides which entities take part in notifications at all."""

from __future__ import annotations

from typing import TYPE_CHECKING

from content_notify.models.snapshot import EntityType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from content_notify.models.snapshot import ContentSnapshot


class EligibilityFilter:
    """Allow-list of content bundles; users are always tracked."""

    def __init__(self, tracked_bundles: Iterable[str]) -> None:
        self._tracked_bundles = frozenset(tracked_bundles)

    def is_tracked_bundle(self, entity_type: EntityType, bundle: str) -> bool:
        """Return True when an entity of this type and bundle is tracked.

        For comments ``bundle`` is the bundle of the parent content item.
        """
        if entity_type == EntityType.USER:
            return True
        return bundle in self._tracked_bundles

    def is_tracked_comment(self, parent: ContentSnapshot) -> bool:
        """Comments are tracked only when they hang off tracked content."""
        if parent.entity_type != EntityType.CONTENT:
            return False
        return self.is_tracked_bundle(EntityType.COMMENT, parent.bundle)

"""Entity document model — the live row behind content, comments and users."""

from __future__ import annotations

from content_notify.models.base import DocumentBase
from content_notify.models.snapshot import ContentSnapshot, EntityType


class Entity(DocumentBase):
    """Latest stored revision of a trackable entity."""

    entity_type: EntityType
    bundle: str = ""
    revision_id: int = 0
    owner_id: str
    published: bool = False
    parent_id: str | None = None

    def to_snapshot(self) -> ContentSnapshot:
        return ContentSnapshot(
            entity_id=self.id,
            entity_type=self.entity_type,
            bundle=self.bundle,
            revision_id=self.revision_id,
            owner_id=self.owner_id,
            published=self.published,
            parent_id=self.parent_id,
        )

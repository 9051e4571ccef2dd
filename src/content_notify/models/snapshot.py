"""Entity snapshots — one version of a trackable entity and revision transitions."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class EntityType(StrEnum):
    """Kinds of entity whose lifecycle produces notifications."""

    CONTENT = "content"
    COMMENT = "comment"
    USER = "user"


class ContentSnapshot(BaseModel):
    """An immutable view of an entity at one revision."""

    model_config = ConfigDict(frozen=True)

    entity_id: str
    entity_type: EntityType
    bundle: str = ""
    revision_id: int = 0
    owner_id: str
    published: bool = False
    translation_affected_by_this_revision: bool = True
    parent_id: str | None = None


class RevisionTransition(BaseModel):
    """A previous/current snapshot pair. ``previous`` is absent on creation."""

    model_config = ConfigDict(frozen=True)

    previous: ContentSnapshot | None = None
    current: ContentSnapshot

    @model_validator(mode="after")
    def _same_entity(self) -> RevisionTransition:
        if self.previous is not None and self.previous.entity_id != self.current.entity_id:
            msg = (
                f"Transition snapshots belong to different entities: "
                f"{self.previous.entity_id} != {self.current.entity_id}"
            )
            raise ValueError(msg)
        return self

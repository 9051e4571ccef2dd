"""Repository for the entities container (partitioned by /id)."""

from __future__ import annotations

from content_notify.database.repositories.base import BaseRepository
from content_notify.models.entity import Entity


class EntityRepository(BaseRepository[Entity]):
    """Provide data access for content, comment and user entity rows."""

    container_name = "entities"
    model_class = Entity

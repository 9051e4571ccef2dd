"""Repository for the users container (partitioned by /id)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from content_notify.database.repositories.base import BaseRepository
from content_notify.models.user import User

if TYPE_CHECKING:
    from collections.abc import Iterable


class UserRepository(BaseRepository[User]):
    container_name = "users"
    model_class = User

    async def list_active_ids(self, exclude_ids: Iterable[str] = ()) -> list[str]:
        """Fetch ids of active users, skipping ``exclude_ids``."""
        excluded = set(exclude_ids)
        ids = await self.query_values(
            "SELECT VALUE c.id FROM c WHERE c.active = true"
            " AND NOT IS_DEFINED(c.deleted_at)",
        )
        return [user_id for user_id in ids if user_id not in excluded]

    async def list_ids_by_role(self, roles: Iterable[str]) -> list[str]:
        """Fetch ids of active users holding at least one of ``roles``."""
        role_list = sorted(set(roles))
        if not role_list:
            return []
        return await self.query_values(
            "SELECT VALUE c.id FROM c WHERE c.active = true"
            " AND ARRAY_LENGTH(SetIntersect(c.roles, @roles)) > 0"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [{"name": "@roles", "value": role_list}],
        )

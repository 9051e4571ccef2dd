"""Generic repository over one Cosmos DB container."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from azure.cosmos.exceptions import CosmosResourceNotFoundError

from content_notify.models.base import DocumentBase

if TYPE_CHECKING:
    from azure.cosmos.aio import ContainerProxy

T = TypeVar("T", bound=DocumentBase)


class BaseRepository(Generic[T]):
    """Create, read, replace and query helpers shared by every container repository.

    ``container_name`` names the container ``CosmosClient.repository`` binds the
    repository to.
    """

    container_name: ClassVar[str]
    model_class: type[T]

    def __init__(self, container: ContainerProxy) -> None:
        self._container = container

    def _to_body(self, item: T) -> dict[str, Any]:
        return item.model_dump(mode="json", exclude_none=True)

    async def create(self, item: T) -> T:
        """Insert a new document."""
        await self._container.create_item(body=self._to_body(item))
        return item

    async def get(self, item_id: str, partition_key: str) -> T | None:
        """Read one document, or None when it does not exist or is soft-deleted."""
        try:
            data = await self._container.read_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return None
        item = self.model_class.model_validate(data)
        if item.deleted_at is not None:
            return None
        return item

    async def update(self, item: T, partition_key: str) -> T:  # noqa: ARG002
        """Replace an existing document."""
        item.touch()
        await self._container.replace_item(item=item.id, body=self._to_body(item))
        return item

    async def query(
        self,
        query: str,
        parameters: list[dict[str, Any]] | None = None,
    ) -> list[T]:
        """Run a SQL query and validate each result into the model."""
        items = self._container.query_items(query=query, parameters=parameters or [])
        return [self.model_class.model_validate(item) async for item in items]

    async def query_values(
        self,
        query: str,
        parameters: list[dict[str, Any]] | None = None,
    ) -> list[Any]:
        """Run a ``SELECT VALUE`` query and return the raw values."""
        items = self._container.query_items(query=query, parameters=parameters or [])
        return [item async for item in items]

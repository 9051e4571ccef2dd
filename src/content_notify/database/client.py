"""Cosmos DB connection owning the notification containers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from azure.cosmos.aio import CosmosClient as AzureCosmosClient

from content_notify.database.repositories import (
    EntityRepository,
    MessageRepository,
    SubscriptionRepository,
    UserRepository,
)

if TYPE_CHECKING:
    from azure.cosmos.aio import ContainerProxy

    from content_notify.config import CosmosConfig
    from content_notify.database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="BaseRepository[Any]")

CONTAINER_NAMES: tuple[str, ...] = tuple(
    repo.container_name
    for repo in (EntityRepository, MessageRepository, SubscriptionRepository, UserRepository)
)


class CosmosClient:
    """Async Cosmos client plus one proxy per container the worker reads or writes."""

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: AzureCosmosClient | None = None
        self._containers: dict[str, ContainerProxy] = {}

    async def initialize(self) -> None:
        """Connect and bind the entities, messages, subscriptions and users containers."""
        if not self._config.endpoint:
            raise ConnectionError("AZURE_COSMOS_ENDPOINT is not set — add it to .env")
        self._client = AzureCosmosClient(self._config.endpoint, credential=self._config.key)
        database = self._client.get_database_client(self._config.database)
        self._containers = {name: database.get_container_client(name) for name in CONTAINER_NAMES}
        logger.info(
            "Cosmos containers bound — database=%s containers=%s",
            self._config.database,
            ",".join(CONTAINER_NAMES),
        )

    async def close(self) -> None:
        """Close the underlying client and forget the container proxies."""
        if self._client:
            await self._client.close()
            self._client = None
        self._containers = {}

    def container(self, name: str) -> ContainerProxy:
        if not self._containers:
            raise RuntimeError("CosmosClient not initialized — call initialize() first")
        try:
            return self._containers[name]
        except KeyError:
            raise KeyError(f"Container {name!r} is not managed by this client") from None

    def repository(self, repository_cls: type[R], **kwargs: Any) -> R:
        """Build a repository bound to the container it declares."""
        return repository_cls(self.container(repository_cls.container_name), **kwargs)

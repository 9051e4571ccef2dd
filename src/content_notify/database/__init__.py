"""Cosmos DB client, repositories and collaborator store implementations."""

from content_notify.database.client import CosmosClient
from content_notify.database.stores import CosmosContentStore, CosmosMessageStore

__all__ = ["CosmosClient", "CosmosContentStore", "CosmosMessageStore"]

"""Repository modules for each Cosmos DB container."""

from content_notify.database.repositories.entities import EntityRepository
from content_notify.database.repositories.messages import MessageRepository
from content_notify.database.repositories.subscriptions import SubscriptionRepository
from content_notify.database.repositories.users import UserRepository

__all__ = [
    "EntityRepository",
    "MessageRepository",
    "SubscriptionRepository",
    "UserRepository",
]

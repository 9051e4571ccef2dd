"""Worker entry point — consumes lifecycle events and emits notifications."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

from azure.monitor.opentelemetry import configure_azure_monitor

from content_notify.config import load_settings
from content_notify.database.client import CosmosClient
from content_notify.database.repositories import (
    EntityRepository,
    MessageRepository,
    SubscriptionRepository,
    UserRepository,
)
from content_notify.database.stores import CosmosContentStore, CosmosMessageStore
from content_notify.engine.decision import NotificationDecisionEngine
from content_notify.engine.dispatcher import LifecycleDispatcher
from content_notify.engine.eligibility import EligibilityFilter
from content_notify.events.consumer import LifecycleEventConsumer
from content_notify.events.contracts import SUBSCRIBE_FANOUT
from content_notify.events.delivery import ServiceBusDeliveryService
from content_notify.events.servicebus import ServiceBusPublisher
from content_notify.health import check_emulators
from content_notify.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from content_notify.config import Settings
    from content_notify.models.effects import SubscribeActiveUsers

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> NotificationDecisionEngine:
    """Create the decision engine from the notify configuration."""
    notify = settings.notify
    return NotificationDecisionEngine(
        EligibilityFilter(notify.tracked_bundles),
        privileged_roles=notify.privileged_roles,
        excluded_user_ids=notify.excluded_user_ids,
    )


def build_dispatcher(
    settings: Settings,
    cosmos: CosmosClient,
    notification_publisher: ServiceBusPublisher,
    command_publisher: ServiceBusPublisher,
) -> LifecycleDispatcher:
    """Wire the engine to its Cosmos and Service Bus collaborators."""
    subscriptions = cosmos.repository(SubscriptionRepository, forced_notifier=settings.notify.forced_notifier)
    content_store = CosmosContentStore(cosmos.repository(EntityRepository), cosmos.repository(UserRepository))
    messages = CosmosMessageStore(cosmos.repository(MessageRepository))
    delivery = ServiceBusDeliveryService(notification_publisher, subscriptions)

    enqueue_fanout: Callable[[SubscribeActiveUsers], Awaitable[None]] | None = None
    if settings.notify.queue_subscription_fanout:

        async def _enqueue(request: SubscribeActiveUsers) -> None:
            await command_publisher.publish(SUBSCRIBE_FANOUT, request.model_dump(mode="json"))

        enqueue_fanout = _enqueue

    return LifecycleDispatcher(
        build_engine(settings),
        content_store,
        subscriptions,
        delivery,
        messages,
        enqueue_fanout=enqueue_fanout,
    )


async def run() -> None:
    """Initialize and run the worker until terminated."""
    settings = load_settings()
    configure_logging(settings.app.log_level, log_file="worker.log")

    logger.info(
        "Worker starting — tracked_bundles=%s privileged_roles=%s",
        ",".join(sorted(settings.notify.tracked_bundles)),
        ",".join(sorted(settings.notify.privileged_roles)),
    )

    if settings.monitor.connection_string:
        configure_azure_monitor(connection_string=settings.monitor.connection_string)
        logger.info("Azure Monitor OpenTelemetry configured")

    if settings.app.is_development and not await check_emulators(settings):
        return

    cosmos = CosmosClient(settings.cosmos)
    try:
        await cosmos.initialize()
    except ConnectionError as exc:
        logger.error(str(exc))  # noqa: TRY400
        return

    notification_publisher = ServiceBusPublisher(
        settings.servicebus,
        topic_name=settings.servicebus.notification_topic_name,
    )
    command_publisher = ServiceBusPublisher(
        settings.servicebus,
        topic_name=settings.servicebus.command_topic_name,
    )
    dispatcher = build_dispatcher(settings, cosmos, notification_publisher, command_publisher)
    consumer = LifecycleEventConsumer(settings.servicebus, dispatcher)
    await consumer.start()

    logger.info("Worker running")

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    await stop_event.wait()

    logger.info("Worker shutting down")
    await consumer.stop()
    await command_publisher.close()
    await notification_publisher.close()
    await cosmos.close()
    logger.info("Worker shutdown complete")


def main() -> None:
    """Entry point for the worker process."""
    asyncio.run(run())


if __name__ == "__main__":
    main()

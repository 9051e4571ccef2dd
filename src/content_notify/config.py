"""Environment-driven configuration for the notification worker."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_TRACKED_BUNDLES = "blog,book_page,yammer"
DEFAULT_PRIVILEGED_ROLES = "admin"
# Anonymous (0) and the site's system account (1).
DEFAULT_EXCLUDED_USER_IDS = "0,1"

_TRUTHY = {"1", "true", "yes", "on"}


def _env(key: str, default: str = "") -> str:
    """Read an environment variable, falling back to ``default``."""
    return os.environ.get(key, default)


def _env_set(key: str, default: str = "") -> frozenset[str]:
    """Read a comma-separated environment variable as a set of trimmed values."""
    return frozenset(part.strip() for part in _env(key, default).split(",") if part.strip())


def _env_bool(key: str, *, default: bool = False) -> bool:
    raw = _env(key)
    if not raw:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("AZURE_COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("AZURE_COSMOS_KEY"))
    database: str = field(default_factory=lambda: _env("AZURE_COSMOS_DATABASE", "content-notify"))


@dataclass(frozen=True)
class ServiceBusConfig:
    connection_string: str = field(default_factory=lambda: _env("AZURE_SERVICEBUS_CONNECTION_STRING"))
    lifecycle_topic_name: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_LIFECYCLE_TOPIC", "lifecycle-events")
    )
    notification_topic_name: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_NOTIFICATION_TOPIC", "notifications")
    )
    command_topic_name: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_COMMAND_TOPIC", "lifecycle-events")
    )
    worker_subscription_name: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_WORKER_SUBSCRIPTION", "notify-worker")
    )


@dataclass(frozen=True)
class NotifyConfig:
    tracked_bundles: frozenset[str] = field(
        default_factory=lambda: _env_set("NOTIFY_TRACKED_BUNDLES", DEFAULT_TRACKED_BUNDLES)
    )
    privileged_roles: frozenset[str] = field(
        default_factory=lambda: _env_set("NOTIFY_PRIVILEGED_ROLES", DEFAULT_PRIVILEGED_ROLES)
    )
    excluded_user_ids: frozenset[str] = field(
        default_factory=lambda: _env_set("NOTIFY_EXCLUDED_USER_IDS", DEFAULT_EXCLUDED_USER_IDS)
    )
    forced_notifier: str = field(default_factory=lambda: _env("NOTIFY_FORCED_NOTIFIER", "email"))
    queue_subscription_fanout: bool = field(
        default_factory=lambda: _env_bool("NOTIFY_QUEUE_SUBSCRIPTION_FANOUT")
    )


@dataclass(frozen=True)
class MonitorConfig:
    connection_string: str = field(default_factory=lambda: _env("APPLICATIONINSIGHTS_CONNECTION_STRING"))


@dataclass(frozen=True)
class Settings:
    app: AppConfig = field(default_factory=AppConfig)
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    servicebus: ServiceBusConfig = field(default_factory=ServiceBusConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)


def load_settings() -> Settings:
    """Load ``.env`` (if present) and build settings from the environment."""
    load_dotenv()
    return Settings()

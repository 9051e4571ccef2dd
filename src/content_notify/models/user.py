"""User document model."""

from __future__ import annotations

from pydantic import Field

from content_notify.models.base import DocumentBase


class User(DocumentBase):
    """A site account as seen by the notification service."""

    name: str = ""
    active: bool = True
    roles: list[str] = Field(default_factory=list)

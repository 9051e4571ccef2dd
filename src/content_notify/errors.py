"""Exceptions raised while turning lifecycle events into notifications."""

from __future__ import annotations


class NotifyError(Exception):
    """Base class for notification service errors."""


class SubjectResolutionFailed(NotifyError):
    """A snapshot needed for the decision could not be resolved.

    Recoverable: the event is dropped and the caller carries on.
    """

    def __init__(self, entity_id: str, reason: str = "not found") -> None:
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(f"Could not resolve entity {entity_id}: {reason}")


class CollaboratorError(NotifyError):
    """A collaborator (store, subscription or delivery service) call failed."""

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Collaborator call {operation} failed{detail}")

"""content-notify — decides which content lifecycle events become notifications."""

from content_notify.engine import EligibilityFilter, LifecycleDispatcher, NotificationDecisionEngine
from content_notify.errors import CollaboratorError, NotifyError, SubjectResolutionFailed

__all__ = [
    "CollaboratorError",
    "EligibilityFilter",
    "LifecycleDispatcher",
    "NotificationDecisionEngine",
    "NotifyError",
    "SubjectResolutionFailed",
]

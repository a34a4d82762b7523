"""Notification log schemas."""

from enum import Enum

from pydantic import BaseModel


class NotificationType(str, Enum):
    """Kind of appointment email that was attempted."""

    CONFIRMATION = "confirmation"
    REMINDER = "reminder"


class NotificationStatus(str, Enum):
    """Outcome of a send attempt."""

    SENT = "Sent"
    FAILED = "Failed"


class ReminderSummary(BaseModel):
    """Result of one reminder sweep."""

    selected: int = 0
    sent: int = 0
    failed: int = 0

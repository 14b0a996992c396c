"""Reminder scheduling for job records.

Public API:
- NotificationGateway: Future-only follow-up and interview-prep reminders
- NotificationBackend: Contract for the platform scheduler
- LoggingNotificationBackend: In-memory backend that logs reminders
- notification_id: Stable notification id derived from a record id
"""

from job_tracker.notifications.gateway import (
    LoggingNotificationBackend,
    NotificationBackend,
    NotificationGateway,
    PendingNotification,
    notification_id,
)

__all__ = [
    "NotificationGateway",
    "NotificationBackend",
    "LoggingNotificationBackend",
    "PendingNotification",
    "notification_id",
]

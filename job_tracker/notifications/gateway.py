"""Follow-up and interview reminders for job records.

The gateway decides what to schedule and when; the platform scheduler
behind it is abstracted as a :class:`NotificationBackend`. Notification
ids are derived from the record id so cancelling by record always hits
the reminder that was scheduled for it.
"""

import hashlib
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Literal, Protocol

from job_tracker.utils.logging import get_logger

logger = get_logger(__name__)

# Largest signed 32-bit value; platform schedulers expect ids below it
NOTIFICATION_ID_RANGE = 2147483647

ReminderKind = Literal["follow_up", "interview"]

FOLLOW_UP_TITLE = "Follow-up Reminder"
INTERVIEW_PREP_TITLE = "Interview Prep Reminder"


class NotificationBackend(Protocol):
    """Platform scheduler that actually delivers notifications."""

    async def schedule(
        self,
        notification_id: int,
        title: str,
        body: str,
        when: datetime,
        payload: str,
    ) -> None: ...

    async def cancel(self, notification_id: int) -> None: ...


def notification_id(record_id: str, kind: ReminderKind = "follow_up") -> int:
    """Derive a stable notification id for a record's reminder.

    Different records can collide; a collision makes one record's
    cancel/reschedule replace the other's reminder.
    """
    key = record_id if kind == "follow_up" else f"{record_id}_interview"
    digest = hashlib.sha256(key.encode()).digest()
    return int.from_bytes(digest[:8], "big") % NOTIFICATION_ID_RANGE


def follow_up_body(job_name: str, company_name: str | None) -> str:
    if company_name:
        return f'Time to follow up on your "{job_name}" application at {company_name}'
    return f'Time to follow up on your "{job_name}" application'


def interview_prep_body(
    job_name: str, company_name: str | None, interview_date: date
) -> str:
    when = interview_date.strftime("%d/%m/%Y")
    if company_name:
        return (
            f'Your interview for "{job_name}" at {company_name} is on {when}. '
            "Time to prepare!"
        )
    return f'Your interview for "{job_name}" is on {when}. Time to prepare!'


class NotificationGateway:
    """Schedules and cancels reminders keyed by record id.

    Reminders are only handed to the backend when their instant is
    strictly in the future; past dates are skipped silently.
    """

    def __init__(
        self,
        backend: NotificationBackend,
        clock: Callable[[], datetime] = datetime.now,
        on_tap: Callable[[str], None] | None = None,
    ):
        """Initialize the gateway.

        Args:
            backend: Scheduler that delivers notifications.
            clock: Source of the current local time.
            on_tap: Called with the record id when a reminder is opened.
        """
        self.backend = backend
        self.clock = clock
        self.on_tap = on_tap

    async def schedule_follow_up(
        self,
        record_id: str,
        job_name: str,
        company_name: str | None,
        when: date,
        hour: int = 9,
        minute: int = 0,
    ) -> bool:
        """Schedule the follow-up reminder for a record.

        Returns:
            True if a reminder was scheduled, False if the instant was not
            in the future.
        """
        fire_at = datetime.combine(when, time(hour, minute))
        return await self._schedule(
            notification_id(record_id, "follow_up"),
            FOLLOW_UP_TITLE,
            follow_up_body(job_name, company_name),
            fire_at,
            record_id,
        )

    async def schedule_interview_prep(
        self,
        record_id: str,
        job_name: str,
        company_name: str | None,
        interview_date: date,
        days_before: int = 1,
        hour: int = 9,
        minute: int = 0,
    ) -> bool:
        """Schedule a prep reminder ``days_before`` days ahead of an interview."""
        reminder_day = interview_date - timedelta(days=days_before)
        fire_at = datetime.combine(reminder_day, time(hour, minute))
        return await self._schedule(
            notification_id(record_id, "interview"),
            INTERVIEW_PREP_TITLE,
            interview_prep_body(job_name, company_name, interview_date),
            fire_at,
            record_id,
        )

    async def cancel(self, record_id: str) -> None:
        """Cancel every reminder for a record. Safe to call repeatedly."""
        for kind in ("follow_up", "interview"):
            await self.backend.cancel(notification_id(record_id, kind))
        logger.debug("Cancelled reminders for job %s", record_id)

    def handle_tap(self, payload: str | None) -> None:
        """Forward an opened notification's record id to ``on_tap``."""
        logger.debug("Notification tapped with payload %r", payload)
        if payload and self.on_tap is not None:
            self.on_tap(payload)

    async def _schedule(
        self,
        notif_id: int,
        title: str,
        body: str,
        fire_at: datetime,
        record_id: str,
    ) -> bool:
        now = self.clock()
        if fire_at <= now:
            logger.debug(
                "Reminder for job %s at %s is not in the future, skipping",
                record_id,
                fire_at,
            )
            return False

        await self.backend.schedule(notif_id, title, body, fire_at, record_id)
        logger.info(
            "Scheduled notification %s for job %s at %s", notif_id, record_id, fire_at
        )
        return True


@dataclass(frozen=True)
class PendingNotification:
    notification_id: int
    title: str
    body: str
    when: datetime
    payload: str


class LoggingNotificationBackend:
    """Backend that keeps reminders in memory and logs them.

    Used where no platform scheduler exists, such as the command line.
    """

    def __init__(self) -> None:
        self.pending: dict[int, PendingNotification] = {}

    async def schedule(
        self,
        notification_id: int,
        title: str,
        body: str,
        when: datetime,
        payload: str,
    ) -> None:
        self.pending[notification_id] = PendingNotification(
            notification_id=notification_id,
            title=title,
            body=body,
            when=when,
            payload=payload,
        )
        logger.info("Reminder %s at %s: %s", notification_id, when.isoformat(), body)

    async def cancel(self, notification_id: int) -> None:
        self.pending.pop(notification_id, None)

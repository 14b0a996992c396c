"""Tests for the notification gateway."""

from datetime import date, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from job_tracker.notifications.gateway import (
    FOLLOW_UP_TITLE,
    NOTIFICATION_ID_RANGE,
    LoggingNotificationBackend,
    NotificationGateway,
    notification_id,
)


@pytest.fixture
def backend():
    return SimpleNamespace(schedule=AsyncMock(), cancel=AsyncMock())


@pytest.fixture
def gateway(backend, now):
    return NotificationGateway(backend, clock=lambda: now)


class TestNotificationId:
    """Test notification id derivation."""

    def test_is_stable_and_in_range(self):
        first = notification_id("3f2b8c1e-0000-4000-8000-000000000001")
        second = notification_id("3f2b8c1e-0000-4000-8000-000000000001")

        assert first == second
        assert 0 <= first < NOTIFICATION_ID_RANGE

    def test_reminder_kinds_get_distinct_ids(self):
        assert notification_id("abc", "follow_up") != notification_id("abc", "interview")


class TestScheduleFollowUp:
    """Test follow-up scheduling."""

    @pytest.mark.asyncio
    async def test_schedules_future_reminder_at_requested_time(self, gateway, backend):
        scheduled = await gateway.schedule_follow_up(
            "job-1", "Flutter Developer", "Acme", date(2026, 3, 12), hour=8, minute=30
        )

        assert scheduled is True
        backend.schedule.assert_awaited_once()
        notif_id, title, body, when, payload = backend.schedule.await_args.args
        assert notif_id == notification_id("job-1")
        assert title == FOLLOW_UP_TITLE
        assert "Flutter Developer" in body
        assert "Acme" in body
        assert when == datetime(2026, 3, 12, 8, 30)
        assert payload == "job-1"

    @pytest.mark.asyncio
    async def test_body_without_company(self, gateway, backend):
        await gateway.schedule_follow_up("job-1", "Dev", None, date(2026, 3, 12))

        body = backend.schedule.await_args.args[2]
        assert body == 'Time to follow up on your "Dev" application'

    @pytest.mark.asyncio
    async def test_skips_past_date(self, gateway, backend):
        scheduled = await gateway.schedule_follow_up(
            "job-1", "Dev", None, date(2026, 3, 9)
        )

        assert scheduled is False
        backend.schedule.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_skips_earlier_time_today(self, gateway, backend):
        """Today at 09:00 is already past when it is noon."""
        scheduled = await gateway.schedule_follow_up(
            "job-1", "Dev", None, date(2026, 3, 10), hour=9
        )

        assert scheduled is False
        backend.schedule.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_schedules_later_time_today(self, gateway, backend):
        scheduled = await gateway.schedule_follow_up(
            "job-1", "Dev", None, date(2026, 3, 10), hour=18
        )

        assert scheduled is True


class TestInterviewPrep:
    """Test interview prep reminders."""

    @pytest.mark.asyncio
    async def test_fires_days_before_interview(self, gateway, backend):
        scheduled = await gateway.schedule_interview_prep(
            "job-1", "Dev", "Acme", date(2026, 3, 20), days_before=2, hour=7
        )

        assert scheduled is True
        notif_id, _, body, when, _ = backend.schedule.await_args.args
        assert notif_id == notification_id("job-1", "interview")
        assert when == datetime(2026, 3, 18, 7, 0)
        assert "20/03/2026" in body

    @pytest.mark.asyncio
    async def test_skips_when_reminder_day_has_passed(self, gateway, backend):
        scheduled = await gateway.schedule_interview_prep(
            "job-1", "Dev", None, date(2026, 3, 10), days_before=1
        )

        assert scheduled is False
        backend.schedule.assert_not_awaited()


class TestCancelAndTap:
    """Test cancellation and tap handling."""

    @pytest.mark.asyncio
    async def test_cancel_targets_both_reminder_ids(self, gateway, backend):
        await gateway.cancel("job-1")

        cancelled = {call.args[0] for call in backend.cancel.await_args_list}
        assert cancelled == {
            notification_id("job-1", "follow_up"),
            notification_id("job-1", "interview"),
        }

    def test_handle_tap_forwards_record_id(self, backend):
        on_tap = Mock()
        gateway = NotificationGateway(backend, on_tap=on_tap)

        gateway.handle_tap("job-7")
        gateway.handle_tap(None)
        gateway.handle_tap("")

        on_tap.assert_called_once_with("job-7")

    def test_handle_tap_without_callback_is_noop(self, gateway):
        gateway.handle_tap("job-7")


class TestLoggingBackend:
    """Test the in-memory logging backend."""

    @pytest.mark.asyncio
    async def test_tracks_pending_and_cancel_is_idempotent(self, now):
        backend = LoggingNotificationBackend()
        gateway = NotificationGateway(backend, clock=lambda: now)

        await gateway.schedule_follow_up("job-1", "Dev", None, date(2026, 3, 11))
        assert notification_id("job-1") in backend.pending

        await gateway.cancel("job-1")
        await gateway.cancel("job-1")
        assert backend.pending == {}

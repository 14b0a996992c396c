"""Application state controller for the job tracker.

This module provides the JobsController class which handles:
- Record creation, update and deletion through the record store
- Reminder bookkeeping tied to those mutations
- Search, filter, sort and selection state for the UI
- Publishing a new immutable snapshot on every change
"""

import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any

from job_tracker.config.settings import Settings, get_settings
from job_tracker.notifications.gateway import NotificationGateway
from job_tracker.query.duplicates import find_duplicates
from job_tracker.query.engine import DashboardFilter, SortOption, apply_filters_and_sort
from job_tracker.query.stats import (
    DashboardStats,
    SourceSuccess,
    active_records,
    archived_records,
    dashboard_stats,
    overall_success_rate,
    source_success_rates,
    status_counts,
)
from job_tracker.records.errors import RecordStoreError
from job_tracker.records.models import JobRecord, JobStatus, parse_date
from job_tracker.records.store import RecordStore
from job_tracker.state.view_state import ApplicationViewState
from job_tracker.utils.logging import get_logger

logger = get_logger(__name__)

StateListener = Callable[[ApplicationViewState], None]


class JobsController:
    """Single owner of the record store and of the view state.

    Operations are meant to be awaited one at a time. Each one replaces
    the current :class:`ApplicationViewState` with a new snapshot and
    notifies subscribers; store failures become ``error_message`` and
    reminder failures are only logged.
    """

    def __init__(
        self,
        store: RecordStore,
        notifications: NotificationGateway,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the controller.

        Args:
            store: Persistent storage of job records.
            notifications: Gateway used to schedule and cancel reminders.
            settings: Application settings, loaded from the environment if omitted.
            clock: Source of the current local time.
        """
        self.store = store
        self.notifications = notifications
        self.settings = settings or get_settings()
        self._clock = clock
        self._state = ApplicationViewState(
            sort_option=self.settings.default_sort_option
        )
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Observation

    @property
    def state(self) -> ApplicationViewState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._listeners.clear()

    def _emit(self, state: ApplicationViewState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _today(self) -> date:
        return self._clock().date()

    def _now_iso(self) -> str:
        return self._clock().isoformat()

    def _with_view(self, state: ApplicationViewState) -> ApplicationViewState:
        filtered = apply_filters_and_sort(state, today=self._today())
        return replace(state, filtered_records=tuple(filtered))

    def _update_view(self, **changes: Any) -> None:
        self._emit(self._with_view(replace(self._state, **changes)))

    def _fail(self, message: str, error: Exception) -> None:
        logger.error("%s: %s", message, error)
        self._emit(
            replace(self._state, is_loading=False, error_message=f"{message}: {error}")
        )

    # ------------------------------------------------------------------
    # Loading

    async def load_all(self) -> bool:
        """Fetch every record from the store and rebuild the view.

        On failure the previous records are kept and ``error_message`` is set.

        Returns:
            True if the records were loaded.
        """
        return await self._reload()

    def _start_loading(self) -> None:
        if not self._state.is_loading:
            self._emit(replace(self._state, is_loading=True, error_message=None))

    async def _reload(self, **final_changes: Any) -> bool:
        self._start_loading()
        try:
            records = await self.store.get_all()
        except RecordStoreError as e:
            logger.error("Failed to load jobs: %s", e)
            final_changes.update(
                is_loading=False, error_message=f"Failed to load jobs: {e}"
            )
            self._emit(replace(self._state, **final_changes))
            return False

        logger.debug("Loaded %d jobs", len(records))
        self._update_view(
            all_records=tuple(records), is_loading=False, **final_changes
        )
        return True

    # ------------------------------------------------------------------
    # Mutations

    async def add_record(
        self,
        job_name: str,
        *,
        company_name: str | None = None,
        job_link: str | None = None,
        contact_method: str | None = None,
        cv_used: str | None = None,
        notes: str | None = None,
        source: str | None = None,
        contact_email: str | None = None,
        application_date: str | None = None,
        follow_up_date: str | None = None,
        interview_date: str | None = None,
        status: JobStatus | str | None = None,
        is_pinned: bool = False,
        is_archived: bool = False,
        tags: list[str] | None = None,
        notification_hour: int | None = None,
        notification_minute: int | None = None,
    ) -> JobRecord | None:
        """Create and persist a new record, then schedule its reminders.

        Subscribers see a loading snapshot before the write and one with the
        reloaded records after it.

        Returns:
            The created record, or None if it could not be saved.
        """
        self._start_loading()
        now = self._now_iso()
        try:
            record = JobRecord(
                id=str(uuid.uuid4()),
                job_name=job_name,
                created_at=now,
                updated_at=now,
                company_name=company_name,
                job_link=job_link,
                contact_method=contact_method,
                cv_used=cv_used,
                notes=notes,
                source=source,
                contact_email=contact_email,
                application_date=application_date,
                follow_up_date=follow_up_date,
                interview_date=interview_date,
                status=JobStatus.parse(status),
                is_pinned=is_pinned,
                is_archived=is_archived,
                tags=list(tags or []),
            )
            await self.store.put(record.id, record)
        except (RecordStoreError, ValueError) as e:
            self._fail("Failed to add job", e)
            return None

        logger.info("Added job %s (%s)", record.id, record.job_name)
        await self._schedule_reminders(record, notification_hour, notification_minute)
        await self._reload()
        return record

    async def update_record(
        self,
        record_id: str,
        *,
        notification_hour: int | None = None,
        notification_minute: int | None = None,
        **changes: Any,
    ) -> JobRecord | None:
        """Merge ``changes`` onto an existing record and persist it.

        Only the fields passed are touched; passing None clears an optional
        field. Existing reminders are cancelled and rescheduled from the
        merged record.

        Returns:
            The updated record, or None if it does not exist or could not
            be saved.
        """
        self._start_loading()
        try:
            existing = await self.store.get(record_id)
        except RecordStoreError as e:
            self._fail("Failed to update job", e)
            return None

        if existing is None:
            logger.info("Job %s not found, nothing to update", record_id)
            self._emit(replace(self._state, is_loading=False))
            return None

        try:
            updated = existing.with_changes(changes, updated_at=self._now_iso())
            await self.store.put(record_id, updated)
        except (RecordStoreError, ValueError) as e:
            self._fail("Failed to update job", e)
            return None

        logger.info("Updated job %s", record_id)
        await self._cancel_reminders(record_id)
        await self._schedule_reminders(updated, notification_hour, notification_minute)
        await self._reload()
        return updated

    async def delete_record(self, record_id: str) -> bool:
        """Cancel a record's reminders and delete it.

        Returns:
            True if the record existed and was deleted.
        """
        await self._cancel_reminders(record_id)
        try:
            deleted = await self.store.delete(record_id)
        except RecordStoreError as e:
            self._fail("Failed to delete job", e)
            return False

        if deleted:
            logger.info("Deleted job %s", record_id)
            await self._reload()
        return deleted

    async def delete_selected(self) -> int:
        """Delete every selected record and leave selection mode.

        Subscribers see the loading snapshot and then a single snapshot with
        the reloaded records and selection cleared.

        Returns:
            Number of records deleted.
        """
        deleted = 0
        failure: RecordStoreError | None = None
        for record_id in sorted(self._state.selected_ids):
            await self._cancel_reminders(record_id)
            try:
                if await self.store.delete(record_id):
                    deleted += 1
            except RecordStoreError as e:
                logger.error("Failed to delete job %s: %s", record_id, e)
                failure = e
                break

        logger.info("Deleted %d selected jobs", deleted)
        final_changes: dict[str, Any] = {
            "is_selection_mode": False,
            "selected_ids": frozenset(),
        }
        if failure is not None:
            final_changes["error_message"] = f"Failed to delete jobs: {failure}"
        await self._reload(**final_changes)
        return deleted

    async def toggle_pin(self, record_id: str) -> JobRecord | None:
        """Flip the pinned flag of a record."""
        return await self._toggle_flag(record_id, "is_pinned")

    async def toggle_archive(self, record_id: str) -> JobRecord | None:
        """Flip the archived flag of a record."""
        return await self._toggle_flag(record_id, "is_archived")

    async def _toggle_flag(self, record_id: str, flag: str) -> JobRecord | None:
        try:
            existing = await self.store.get(record_id)
            if existing is None:
                return None
            updated = existing.with_changes(
                {flag: not getattr(existing, flag)}, updated_at=self._now_iso()
            )
            await self.store.put(record_id, updated)
        except RecordStoreError as e:
            self._fail("Failed to update job", e)
            return None

        await self._reload()
        return updated

    # ------------------------------------------------------------------
    # Reminders

    async def reschedule_all_notifications(self, hour: int, minute: int) -> int:
        """Move every follow-up reminder to a new time of day.

        Records without a follow-up date are skipped.

        Returns:
            Number of records whose reminders were rescheduled.

        Raises:
            ValueError: If hour or minute is not a valid time of day. Nothing
                is cancelled in that case.
        """
        if not 0 <= hour <= 23:
            raise ValueError(f"hour must be between 0 and 23, got {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"minute must be between 0 and 59, got {minute}")

        rescheduled = 0
        for record in self._state.all_records:
            if not record.follow_up_date:
                continue
            await self._cancel_reminders(record.id)
            await self._schedule_reminders(record, hour, minute)
            rescheduled += 1

        logger.info(
            "Rescheduled reminders for %d jobs at %02d:%02d", rescheduled, hour, minute
        )
        return rescheduled

    async def _schedule_reminders(
        self, record: JobRecord, hour: int | None, minute: int | None
    ) -> None:
        if hour is None:
            hour = self.settings.notification_hour
        if minute is None:
            minute = self.settings.notification_minute
        today = self._today()

        follow_up = parse_date(record.follow_up_date)
        if follow_up is not None and follow_up >= today:
            try:
                await self.notifications.schedule_follow_up(
                    record.id,
                    record.job_name,
                    record.company_name,
                    follow_up,
                    hour,
                    minute,
                )
            except Exception:
                logger.exception("Failed to schedule follow-up for job %s", record.id)

        interview = parse_date(record.interview_date)
        days_before = self.settings.interview_reminder_days_before
        if interview is not None and interview - timedelta(days=days_before) >= today:
            try:
                await self.notifications.schedule_interview_prep(
                    record.id,
                    record.job_name,
                    record.company_name,
                    interview,
                    days_before,
                    hour,
                    minute,
                )
            except Exception:
                logger.exception(
                    "Failed to schedule interview reminder for job %s", record.id
                )

    async def _cancel_reminders(self, record_id: str) -> None:
        try:
            await self.notifications.cancel(record_id)
        except Exception:
            logger.exception("Failed to cancel reminders for job %s", record_id)

    # ------------------------------------------------------------------
    # View selections

    def set_search_query(self, query: str) -> None:
        self._update_view(search_query=query)

    def clear_search(self) -> None:
        self._update_view(search_query="")

    def set_status_filter(self, status: JobStatus | None) -> None:
        """Restrict the list to one status; None removes the restriction."""
        self._update_view(status_filter=status)

    def clear_status_filter(self) -> None:
        self._update_view(status_filter=None)

    def set_sort_option(self, option: SortOption) -> None:
        self._update_view(sort_option=option)

    def set_dashboard_filter(self, dashboard_filter: DashboardFilter) -> None:
        """Apply a dashboard filter, or turn it off if it is already active."""
        if dashboard_filter.is_active and dashboard_filter == self._state.dashboard_filter:
            dashboard_filter = DashboardFilter.NONE
        self._update_view(dashboard_filter=dashboard_filter)

    def clear_dashboard_filter(self) -> None:
        self._update_view(dashboard_filter=DashboardFilter.NONE)

    def clear_error(self) -> None:
        self._emit(replace(self._state, error_message=None))

    # ------------------------------------------------------------------
    # Selection mode

    def enter_selection_mode(self, initial_id: str) -> None:
        self._emit(
            replace(
                self._state,
                is_selection_mode=True,
                selected_ids=frozenset({initial_id}),
            )
        )

    def toggle_selection(self, record_id: str) -> None:
        """Add or remove a record from the selection.

        Removing the last selected record leaves selection mode. Outside
        selection mode this does nothing.
        """
        if not self._state.is_selection_mode:
            logger.debug("Ignoring selection toggle outside selection mode")
            return

        selected = set(self._state.selected_ids)
        if record_id in selected:
            selected.remove(record_id)
        else:
            selected.add(record_id)

        if not selected:
            self.exit_selection_mode()
            return
        self._emit(replace(self._state, selected_ids=frozenset(selected)))

    def select_all(self) -> None:
        """Select every record currently displayed."""
        if not self._state.is_selection_mode:
            logger.debug("Ignoring select all outside selection mode")
            return
        ids = frozenset(record.id for record in self._state.filtered_records)
        self._emit(replace(self._state, selected_ids=ids))

    def exit_selection_mode(self) -> None:
        self._emit(
            replace(self._state, is_selection_mode=False, selected_ids=frozenset())
        )

    # ------------------------------------------------------------------
    # Lookups

    def get_by_id(self, record_id: str) -> JobRecord | None:
        """Look a record up in the loaded snapshot, without touching the store."""
        for record in self._state.all_records:
            if record.id == record_id:
                return record
        return None

    def find_duplicates(
        self,
        job_name: str,
        company_name: str | None = None,
        exclude_id: str | None = None,
    ) -> list[JobRecord]:
        """Find loaded records that look like the one being entered."""
        return find_duplicates(
            self._state.all_records,
            job_name,
            company_name=company_name,
            exclude_id=exclude_id,
        )

    def status_counts(self) -> dict[JobStatus, int]:
        return status_counts(self._state.all_records)

    def dashboard_stats(self) -> DashboardStats:
        return dashboard_stats(self._state.all_records, self._today())

    def source_success_rates(self) -> dict[str, SourceSuccess]:
        return source_success_rates(self._state.all_records)

    def overall_success_rate(self) -> float:
        return overall_success_rate(self._state.all_records)

    def active_records(self) -> list[JobRecord]:
        """Loaded records that are not archived."""
        return active_records(self._state.all_records)

    def archived_records(self) -> list[JobRecord]:
        return archived_records(self._state.all_records)

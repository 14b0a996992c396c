"""Immutable snapshot of what the UI shows."""

from dataclasses import dataclass, field

from job_tracker.query.engine import DashboardFilter, SortOption
from job_tracker.records.models import JobRecord, JobStatus


@dataclass(frozen=True)
class ApplicationViewState:
    """State held by :class:`~job_tracker.state.controller.JobsController`.

    Snapshots are never mutated; the controller builds each new one with
    ``dataclasses.replace``. Omitting a field keeps its value, passing
    ``None`` clears an optional one.

    Attributes:
        all_records: Every record loaded from the store.
        filtered_records: Records after search, filters and sort.
        search_query: Current free-text search.
        status_filter: Status the list is restricted to, if any.
        dashboard_filter: Active dashboard tile filter.
        sort_option: Current ordering.
        is_loading: True while records are being fetched.
        error_message: Last failure shown to the user.
        is_selection_mode: True while the user is picking records.
        selected_ids: Ids picked in selection mode.
    """

    all_records: tuple[JobRecord, ...] = ()
    filtered_records: tuple[JobRecord, ...] = ()
    search_query: str = ""
    status_filter: JobStatus | None = None
    dashboard_filter: DashboardFilter = DashboardFilter.NONE
    sort_option: SortOption = SortOption.DATE_NEWEST
    is_loading: bool = False
    error_message: str | None = None
    is_selection_mode: bool = False
    selected_ids: frozenset[str] = field(default_factory=frozenset)

    @property
    def displayed_count(self) -> int:
        return len(self.filtered_records)

    @property
    def total_count(self) -> int:
        return len(self.all_records)

    @property
    def selected_count(self) -> int:
        return len(self.selected_ids)

    def is_selected(self, record_id: str) -> bool:
        return record_id in self.selected_ids

"""Search, filter and sort pipeline over in-memory job records.

The pipeline always runs in the same order: search, status filter,
dashboard filter, then a stable sort. Every stage returns a new list and
leaves its input untouched.
"""

from collections.abc import Callable, Sequence
from datetime import date
from enum import Enum
from typing import Protocol

from job_tracker.records.models import JobRecord, JobStatus, parse_date


class SortOption(str, Enum):
    """Ordering of the displayed records."""

    DATE_NEWEST = "dateNewest"
    DATE_OLDEST = "dateOldest"
    NAME_AZ = "nameAZ"
    NAME_ZA = "nameZA"

    @property
    def display_name(self) -> str:
        return _SORT_DISPLAY_NAMES[self]


class DashboardFilter(str, Enum):
    """Coarse filter driven by the dashboard summary tiles."""

    NONE = "none"
    TOTAL_JOBS = "totalJobs"
    INTERVIEWS = "interviews"
    FOLLOW_UPS = "followUps"
    SUCCESSFUL = "successful"

    @property
    def is_active(self) -> bool:
        """Whether the filter actually narrows the list."""
        return self not in (DashboardFilter.NONE, DashboardFilter.TOTAL_JOBS)


_SORT_DISPLAY_NAMES: dict[SortOption, str] = {
    SortOption.DATE_NEWEST: "Newest First",
    SortOption.DATE_OLDEST: "Oldest First",
    SortOption.NAME_AZ: "Name (A-Z)",
    SortOption.NAME_ZA: "Name (Z-A)",
}

INTERVIEW_STATUSES = frozenset(
    {JobStatus.INTERVIEW_SCHEDULED, JobStatus.INTERVIEWED}
)
SUCCESSFUL_STATUSES = frozenset({JobStatus.OFFER_RECEIVED, JobStatus.ACCEPTED})


class QueryCriteria(Protocol):
    """The parts of the view state the pipeline reads."""

    @property
    def all_records(self) -> Sequence[JobRecord]: ...

    @property
    def search_query(self) -> str: ...

    @property
    def status_filter(self) -> JobStatus | None: ...

    @property
    def dashboard_filter(self) -> DashboardFilter: ...

    @property
    def sort_option(self) -> SortOption: ...


def has_upcoming_follow_up(record: JobRecord, today: date) -> bool:
    """True when the follow-up date parses and is today or later."""
    follow_up = parse_date(record.follow_up_date)
    return follow_up is not None and follow_up >= today


def search(records: Sequence[JobRecord], query: str) -> list[JobRecord]:
    """Keep records whose job name, company or contact email contains ``query``."""
    if not query:
        return list(records)
    needle = query.lower()
    return [
        record
        for record in records
        if needle in record.job_name.lower()
        or needle in (record.company_name or "").lower()
        or needle in (record.contact_email or "").lower()
    ]


def filter_by_status(
    records: Sequence[JobRecord], status: JobStatus | None
) -> list[JobRecord]:
    if status is None:
        return list(records)
    return [record for record in records if record.status == status]


# Predicates take (record, today); None means the filter keeps everything.
DASHBOARD_PREDICATES: dict[
    DashboardFilter, Callable[[JobRecord, date], bool] | None
] = {
    DashboardFilter.NONE: None,
    DashboardFilter.TOTAL_JOBS: None,
    DashboardFilter.INTERVIEWS: lambda record, _: record.status in INTERVIEW_STATUSES,
    DashboardFilter.FOLLOW_UPS: has_upcoming_follow_up,
    DashboardFilter.SUCCESSFUL: lambda record, _: record.status in SUCCESSFUL_STATUSES,
}


def filter_by_dashboard(
    records: Sequence[JobRecord],
    dashboard_filter: DashboardFilter,
    today: date,
) -> list[JobRecord]:
    predicate = DASHBOARD_PREDICATES[dashboard_filter]
    if predicate is None:
        return list(records)
    return [record for record in records if predicate(record, today)]


def _date_key(record: JobRecord) -> str:
    return record.application_date or record.created_at


def _name_key(record: JobRecord) -> str:
    return record.job_name.lower()


# Sort key and whether to reverse. Python's sort stays stable when reversed.
SORT_KEYS: dict[SortOption, tuple[Callable[[JobRecord], str], bool]] = {
    SortOption.DATE_NEWEST: (_date_key, True),
    SortOption.DATE_OLDEST: (_date_key, False),
    SortOption.NAME_AZ: (_name_key, False),
    SortOption.NAME_ZA: (_name_key, True),
}


def sort_records(
    records: Sequence[JobRecord], sort_option: SortOption
) -> list[JobRecord]:
    """Stable sort; records with equal keys keep their input order."""
    key, reverse = SORT_KEYS[sort_option]
    return sorted(records, key=key, reverse=reverse)


def apply_filters_and_sort(
    criteria: QueryCriteria, today: date | None = None
) -> list[JobRecord]:
    """Run the full pipeline over ``criteria.all_records``.

    Args:
        criteria: Current view state (or anything exposing the same fields).
        today: Reference day for the follow-ups filter, defaults to today.

    Returns:
        The records to display, in display order.
    """
    today = today or date.today()
    result = search(criteria.all_records, criteria.search_query)
    result = filter_by_status(result, criteria.status_filter)
    result = filter_by_dashboard(result, criteria.dashboard_filter, today)
    return sort_records(result, criteria.sort_option)

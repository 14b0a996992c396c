"""Aggregate statistics over job records."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from job_tracker.query.engine import (
    INTERVIEW_STATUSES,
    SUCCESSFUL_STATUSES,
    has_upcoming_follow_up,
)
from job_tracker.records.models import JobRecord, JobStatus, parse_date

# Statuses that end an application, used as the success-rate denominator
COMPLETED_STATUSES = SUCCESSFUL_STATUSES | {JobStatus.REJECTED, JobStatus.WITHDRAWN}

UNKNOWN_SOURCE = "Unknown"


@dataclass(frozen=True)
class DashboardStats:
    total_jobs: int
    interviews: int
    pending_follow_ups: int
    success_rate: float


def status_counts(records: Sequence[JobRecord]) -> dict[JobStatus, int]:
    """Count records per status; every status is present, possibly as 0."""
    counts = {status: 0 for status in JobStatus}
    for record in records:
        counts[record.status] += 1
    return counts


def dashboard_stats(records: Sequence[JobRecord], today: date) -> DashboardStats:
    """Compute the figures shown on the dashboard tiles.

    The success rate is the percentage of completed applications (offer,
    accepted, rejected or withdrawn) that ended in an offer or acceptance.
    """
    successful = sum(1 for r in records if r.status in SUCCESSFUL_STATUSES)
    completed = sum(1 for r in records if r.status in COMPLETED_STATUSES)
    return DashboardStats(
        total_jobs=len(records),
        interviews=sum(1 for r in records if r.status in INTERVIEW_STATUSES),
        pending_follow_ups=sum(
            1 for r in records if has_upcoming_follow_up(r, today)
        ),
        success_rate=(successful / completed * 100) if completed else 0.0,
    )


def source_breakdown(records: Sequence[JobRecord]) -> dict[str, int]:
    """Count records per source, in order of first appearance."""
    counts: dict[str, int] = {}
    for record in records:
        source = record.source or UNKNOWN_SOURCE
        counts[source] = counts.get(source, 0) + 1
    return counts


def upcoming_interviews(
    records: Sequence[JobRecord], today: date
) -> dict[date, list[JobRecord]]:
    """Group records with an interview today or later by interview day."""
    by_day: dict[date, list[JobRecord]] = {}
    for record in records:
        day = parse_date(record.interview_date)
        if day is None or day < today:
            continue
        by_day.setdefault(day, []).append(record)
    return dict(sorted(by_day.items()))


@dataclass(frozen=True)
class SourceSuccess:
    """Applications from one source and how many of them succeeded."""

    total: int
    successful: int

    @property
    def rate(self) -> float:
        return self.successful / self.total * 100 if self.total else 0.0


def source_success_rates(records: Sequence[JobRecord]) -> dict[str, SourceSuccess]:
    """Success figures per source, busiest source first.

    Sources with the same number of applications keep the order in which
    they first appear.
    """
    totals: dict[str, int] = {}
    successes: dict[str, int] = {}
    for record in records:
        source = record.source or UNKNOWN_SOURCE
        totals[source] = totals.get(source, 0) + 1
        if record.status in SUCCESSFUL_STATUSES:
            successes[source] = successes.get(source, 0) + 1

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return {
        source: SourceSuccess(total=total, successful=successes.get(source, 0))
        for source, total in ordered
    }


def overall_success_rate(records: Sequence[JobRecord]) -> float:
    """Percentage of all applications, finished or not, that succeeded."""
    if not records:
        return 0.0
    successful = sum(1 for r in records if r.status in SUCCESSFUL_STATUSES)
    return successful / len(records) * 100


def active_records(records: Sequence[JobRecord]) -> list[JobRecord]:
    return [record for record in records if not record.is_archived]


def archived_records(records: Sequence[JobRecord]) -> list[JobRecord]:
    return [record for record in records if record.is_archived]

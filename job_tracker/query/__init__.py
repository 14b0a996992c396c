"""In-memory querying of job records.

Public API:
- apply_filters_and_sort: Search/status/dashboard filter and sort pipeline
- SortOption, DashboardFilter: Pipeline selections
- find_duplicates: Pre-save duplicate check
- dashboard_stats, status_counts, source_breakdown, upcoming_interviews: Aggregates
- source_success_rates, overall_success_rate: Insights figures
- active_records, archived_records: Split by the archived flag
"""

from job_tracker.query.duplicates import find_duplicates, is_similar, levenshtein
from job_tracker.query.engine import DashboardFilter, SortOption, apply_filters_and_sort
from job_tracker.query.stats import (
    DashboardStats,
    SourceSuccess,
    active_records,
    archived_records,
    dashboard_stats,
    overall_success_rate,
    source_breakdown,
    source_success_rates,
    status_counts,
    upcoming_interviews,
)

__all__ = [
    "apply_filters_and_sort",
    "SortOption",
    "DashboardFilter",
    "find_duplicates",
    "is_similar",
    "levenshtein",
    "DashboardStats",
    "dashboard_stats",
    "status_counts",
    "source_breakdown",
    "upcoming_interviews",
    "SourceSuccess",
    "source_success_rates",
    "overall_success_rate",
    "active_records",
    "archived_records",
]

"""Application state for the job tracker UI.

Public API:
- JobsController: Orchestrates the store, reminders and query pipeline
- ApplicationViewState: Immutable snapshot published to subscribers
"""

from job_tracker.state.controller import JobsController
from job_tracker.state.view_state import ApplicationViewState

__all__ = [
    "JobsController",
    "ApplicationViewState",
]

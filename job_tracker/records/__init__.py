"""Job application records and their storage.

Public API:
- JobRecord: Data model for a tracked job application
- JobStatus: Enum for application workflow status
- RecordStore: Storage contract used by the controller
- SqliteRecordStore: aiosqlite-backed RecordStore
- RecordStoreError, StoreReadError, StoreWriteError: Storage failures
"""

from job_tracker.records.errors import (
    RecordStoreError,
    StoreReadError,
    StoreWriteError,
)
from job_tracker.records.models import JobRecord, JobStatus, parse_date
from job_tracker.records.store import RecordStore, SqliteRecordStore

__all__ = [
    "JobRecord",
    "JobStatus",
    "parse_date",
    "RecordStore",
    "SqliteRecordStore",
    "RecordStoreError",
    "StoreReadError",
    "StoreWriteError",
]

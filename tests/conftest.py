"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest

from job_tracker.records.models import JobRecord, JobStatus


@pytest.fixture
def now() -> datetime:
    """Fixed 'current time' used by clocks in tests."""
    return datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def make_record():
    """Factory for JobRecord instances with sensible defaults."""
    counter = {"n": 0}

    def _make(job_name: str = "Software Engineer", **fields) -> JobRecord:
        counter["n"] += 1
        created_at = fields.pop("created_at", f"2026-01-{counter['n']:02d}T10:00:00")
        fields.setdefault("status", JobStatus.APPLIED)
        return JobRecord(
            id=fields.pop("id", f"job-{counter['n']}"),
            job_name=job_name,
            created_at=created_at,
            updated_at=fields.pop("updated_at", created_at),
            **fields,
        )

    return _make


@pytest.fixture
async def store(tmp_path):
    """An initialized SQLite record store in a temporary directory."""
    from job_tracker.records.store import SqliteRecordStore

    record_store = SqliteRecordStore(tmp_path / "jobs.db")
    await record_store.initialize()
    yield record_store
    await record_store.close()

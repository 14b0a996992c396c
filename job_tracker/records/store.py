"""Record storage for job applications.

This module defines the :class:`RecordStore` contract the controller
depends on and an async SQLite implementation of it. Each record is one
row keyed by its id.
"""

import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiosqlite

from job_tracker.records.errors import StoreReadError, StoreWriteError
from job_tracker.records.models import JobRecord, JobStatus
from job_tracker.utils.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    """Key-value storage of job records keyed by id."""

    async def get_all(self) -> list[JobRecord]: ...

    async def get(self, record_id: str) -> JobRecord | None: ...

    async def put(self, record_id: str, record: JobRecord) -> None: ...

    async def delete(self, record_id: str) -> bool: ...

    async def count(self) -> int: ...


CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS jobs (
    id TEXT PRIMARY KEY,
    job_name TEXT NOT NULL,
    company_name TEXT,
    job_link TEXT,
    contact_method TEXT,
    cv_used TEXT,
    notes TEXT,
    source TEXT,
    contact_email TEXT,
    application_date TEXT,
    follow_up_date TEXT,
    interview_date TEXT,
    status TEXT NOT NULL,
    is_pinned INTEGER DEFAULT 0,
    is_archived INTEGER DEFAULT 0,
    tags TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

UPSERT_SQL = """
INSERT OR REPLACE INTO jobs (
    id, job_name, company_name, job_link, contact_method, cv_used, notes,
    source, contact_email, application_date, follow_up_date, interview_date,
    status, is_pinned, is_archived, tags, created_at, updated_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


class SqliteRecordStore:
    """Async SQLite implementation of :class:`RecordStore`.

    Uses aiosqlite with a single lazily opened connection. Every write is
    committed before the call returns.
    """

    def __init__(self, db_path: Path | str):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Yield the shared connection, opening it on first use."""
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    async def initialize(self) -> None:
        """Create the database file and table if they do not exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            await conn.execute(CREATE_TABLE_SQL)
            await conn.commit()
        logger.debug("Record store ready at %s", self.db_path)

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def get_all(self) -> list[JobRecord]:
        """Return every stored record, in no particular order.

        Raises:
            StoreReadError: If the rows could not be read.
        """
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM jobs")
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreReadError(f"could not read jobs: {e}") from e

        return [self._row_to_record(row) for row in rows]

    async def get(self, record_id: str) -> JobRecord | None:
        """Get a record by id.

        Returns:
            The record if found, None otherwise.

        Raises:
            StoreReadError: If the lookup failed.
        """
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM jobs WHERE id = ?",
                    (record_id,),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreReadError(f"could not read job {record_id}: {e}") from e

        if row is None:
            return None

        return self._row_to_record(row)

    async def put(self, record_id: str, record: JobRecord) -> None:
        """Insert or overwrite the record stored under ``record_id``.

        Raises:
            ValueError: If ``record_id`` does not match ``record.id``.
            StoreWriteError: If the write could not be committed.
        """
        if record_id != record.id:
            raise ValueError(f"key {record_id!r} does not match record id {record.id!r}")

        try:
            async with self._get_connection() as conn:
                await conn.execute(
                    UPSERT_SQL,
                    (
                        record.id,
                        record.job_name,
                        record.company_name,
                        record.job_link,
                        record.contact_method,
                        record.cv_used,
                        record.notes,
                        record.source,
                        record.contact_email,
                        record.application_date,
                        record.follow_up_date,
                        record.interview_date,
                        record.status.value,
                        1 if record.is_pinned else 0,
                        1 if record.is_archived else 0,
                        json.dumps(list(record.tags)),
                        record.created_at,
                        record.updated_at,
                    ),
                )
                await conn.commit()
        except aiosqlite.Error as e:
            raise StoreWriteError(f"could not save job {record_id}: {e}") from e

    async def delete(self, record_id: str) -> bool:
        """Delete a record.

        Returns:
            True if a record existed and was removed, False otherwise.

        Raises:
            StoreWriteError: If the delete could not be committed.
        """
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute(
                    "DELETE FROM jobs WHERE id = ?",
                    (record_id,),
                )
                await conn.commit()
        except aiosqlite.Error as e:
            raise StoreWriteError(f"could not delete job {record_id}: {e}") from e

        return cursor.rowcount > 0

    async def count(self) -> int:
        """Return the number of stored records."""
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute("SELECT COUNT(*) AS count FROM jobs")
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreReadError(f"could not count jobs: {e}") from e

        return int(row["count"]) if row is not None else 0

    def _row_to_record(self, row: aiosqlite.Row) -> JobRecord:
        """Convert a database row to a JobRecord.

        Raises:
            StoreReadError: If the row does not hold a valid record.
        """
        try:
            tags = json.loads(row["tags"] or "[]")
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed tags for job %s", row["id"])
            tags = []

        try:
            return self._build_record(row, tags)
        except (TypeError, ValueError) as e:
            raise StoreReadError(f"malformed job row {row['id']}: {e}") from e

    @staticmethod
    def _build_record(row: aiosqlite.Row, tags: list) -> JobRecord:
        return JobRecord(
            id=row["id"],
            job_name=row["job_name"],
            company_name=row["company_name"],
            job_link=row["job_link"],
            contact_method=row["contact_method"],
            cv_used=row["cv_used"],
            notes=row["notes"],
            source=row["source"],
            contact_email=row["contact_email"],
            application_date=row["application_date"],
            follow_up_date=row["follow_up_date"],
            interview_date=row["interview_date"],
            status=JobStatus.parse(row["status"]),
            is_pinned=bool(row["is_pinned"]),
            is_archived=bool(row["is_archived"]),
            tags=list(tags),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

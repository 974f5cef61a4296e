"""
Job persistence for CAMPER.

Every store keeps one record per job plus a version counter. Partial updates
are read-modify-write cycles that only commit if the version is unchanged
(compare-and-set), so a status read never sees a half-applied update and two
writers never silently overwrite each other.

Records expire at their ttl (epoch seconds). Expired records read as not found
and are removed by purge_expired().

Usage:
    store = SqliteJobStore(Path("outs/jobs.db"))
    store.put(job)
    claimed = store.update_partial(
        job.job_id,
        {"status": JobStatus.IN_PROGRESS},
        expected={"status": JobStatus.PENDING},
    )
"""

import json
import os
import sqlite3
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv

from camper.contexts.jobs.job_data_structure import (
    Campaign,
    CampaignJob,
    CampaignStatus,
    JobStatus,
)
from camper.exceptions import JobNotFoundError, JobStoreError

load_dotenv()
JOB_DB_PATH = Path(os.getenv("JOB_DB_PATH", "outs/jobs.db"))

# Fields update_partial() may change
UPDATABLE_FIELDS = ("status", "campaigns", "completed_at")

# Read-modify-write retries before giving up under contention
MAX_CAS_ATTEMPTS = 10


def _apply_fields(job: CampaignJob, fields: dict[str, Any]) -> None:
    for name, value in fields.items():
        if name == "status":
            value = JobStatus(value)
        elif name == "campaigns":
            value = [c if isinstance(c, Campaign) else Campaign.from_dict(c) for c in value]
        setattr(job, name, value)


def _matches(job: CampaignJob, expected: Optional[dict[str, Any]]) -> bool:
    if not expected:
        return True
    for name, value in expected.items():
        current = getattr(job, name)
        if name == "status":
            value = JobStatus(value)
        if current != value:
            return False
    return True


class JobStore(ABC):
    """
    Abstract job store.

    Subclasses implement versioned primitives (_load, _insert, _compare_and_swap,
    purge_expired); the partial update operations are built on top of them here.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    def _is_expired(self, ttl: int) -> bool:
        return bool(ttl) and ttl <= self._clock()

    @abstractmethod
    def _load(self, job_id: str) -> tuple[CampaignJob, int]:
        """Return (job, version). Raises JobNotFoundError if absent or expired."""

    @abstractmethod
    def _insert(self, job: CampaignJob) -> None:
        """Create or replace a record, resetting its version."""

    @abstractmethod
    def _compare_and_swap(self, job: CampaignJob, version: int) -> bool:
        """Write job only if the stored version still equals version."""

    @abstractmethod
    def purge_expired(self) -> int:
        """Delete expired records. Returns the number removed."""

    def get(self, job_id: str) -> CampaignJob:
        """
        Snapshot of a job.

        Raises:
            JobNotFoundError: If the job does not exist or has expired
        """
        job, _version = self._load(job_id)
        return job

    def put(self, job: CampaignJob) -> None:
        self._insert(job)

    def exists(self, job_id: str) -> bool:
        try:
            self._load(job_id)
        except JobNotFoundError:
            return False
        return True

    def _read_modify_write(
        self, job_id: str, modify: Callable[[CampaignJob], bool]
    ) -> bool:
        for _attempt in range(MAX_CAS_ATTEMPTS):
            job, version = self._load(job_id)
            if not modify(job):
                return False
            if self._compare_and_swap(job, version):
                return True
        raise JobStoreError(f"Too much contention updating job {job_id}")

    def update_partial(
        self,
        job_id: str,
        fields: dict[str, Any],
        expected: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Atomically update top-level job fields.

        Args:
            job_id: Job to update
            fields: New values for any of "status", "campaigns", "completed_at"
            expected: Conditions on current field values (compare-and-set)

        Returns:
            True if applied, False if a condition in expected did not hold

        Raises:
            ValueError: If fields names anything not in UPDATABLE_FIELDS
            JobNotFoundError: If the job does not exist or has expired
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        def modify(job: CampaignJob) -> bool:
            if not _matches(job, expected):
                return False
            _apply_fields(job, fields)
            return True

        return self._read_modify_write(job_id, modify)

    def update_campaign(
        self,
        job_id: str,
        campaign_id: str,
        status: CampaignStatus,
        error: Optional[str] = None,
    ) -> CampaignStatus:
        """
        Atomically set one campaign's status (and error).

        Returns:
            The campaign's previous status

        Raises:
            JobNotFoundError: If the job does not exist or has expired
            JobStoreError: If the job has no campaign with campaign_id
        """
        status = CampaignStatus(status)
        previous = {}

        def modify(job: CampaignJob) -> bool:
            campaign = job.get_campaign(campaign_id)
            if campaign is None:
                raise JobStoreError(f"Job {job_id} has no campaign {campaign_id}")
            previous["status"] = campaign.status
            campaign.status = status
            campaign.error = error if status == CampaignStatus.FAILED else None
            return True

        self._read_modify_write(job_id, modify)
        return previous["status"]


class InMemoryJobStore(JobStore):
    """Lock-protected dict of serialized records. Used by tests and single-process runs."""

    def __init__(self, clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self._lock = threading.Lock()
        self._records: dict[str, tuple[dict, int]] = {}

    def _load(self, job_id: str) -> tuple[CampaignJob, int]:
        with self._lock:
            entry = self._records.get(job_id)
        if entry is None:
            raise JobNotFoundError(job_id)
        record, version = entry
        job = CampaignJob.from_dict(record)
        if self._is_expired(job.ttl):
            raise JobNotFoundError(job_id)
        return job, version

    def _insert(self, job: CampaignJob) -> None:
        with self._lock:
            self._records[job.job_id] = (job.to_dict(), 0)

    def _compare_and_swap(self, job: CampaignJob, version: int) -> bool:
        with self._lock:
            entry = self._records.get(job.job_id)
            if entry is None or entry[1] != version:
                return False
            self._records[job.job_id] = (job.to_dict(), version + 1)
            return True

    def purge_expired(self) -> int:
        with self._lock:
            expired = [
                job_id
                for job_id, (record, _version) in self._records.items()
                if self._is_expired(int(record.get("ttl", 0)))
            ]
            for job_id in expired:
                del self._records[job_id]
        return len(expired)


class SqliteJobStore(JobStore):
    """
    SQLite-backed job store.

    One row per job: the JSON record, a version counter for compare-and-set and
    an expires_at column mirroring the record's ttl.
    """

    def __init__(self, db_path: Path = None, clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self.db_path = Path(db_path) if db_path is not None else JOB_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS jobs (
                    job_id TEXT PRIMARY KEY,
                    record TEXT NOT NULL,
                    version INTEGER NOT NULL,
                    expires_at INTEGER NOT NULL
                )
            """)

    def _load(self, job_id: str) -> tuple[CampaignJob, int]:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT record, version, expires_at FROM jobs WHERE job_id = ?",
                (job_id,),
            ).fetchone()

        if row is None or self._is_expired(row[2]):
            raise JobNotFoundError(job_id)
        return CampaignJob.from_dict(json.loads(row[0])), row[1]

    def _insert(self, job: CampaignJob) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO jobs (job_id, record, version, expires_at) "
                "VALUES (?, ?, 0, ?)",
                (job.job_id, json.dumps(job.to_dict()), job.ttl),
            )

    def _compare_and_swap(self, job: CampaignJob, version: int) -> bool:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "UPDATE jobs SET record = ?, version = version + 1, expires_at = ? "
                "WHERE job_id = ? AND version = ?",
                (json.dumps(job.to_dict()), job.ttl, job.job_id, version),
            )
            return cursor.rowcount == 1

    def purge_expired(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM jobs WHERE expires_at > 0 AND expires_at <= ?",
                (int(self._clock()),),
            )
            return cursor.rowcount

    def list_job_ids(self) -> list[str]:
        """Identifiers of all unexpired jobs, oldest first."""
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT job_id, expires_at FROM jobs ORDER BY rowid"
            ).fetchall()
        return [job_id for job_id, expires_at in rows if not self._is_expired(expires_at)]

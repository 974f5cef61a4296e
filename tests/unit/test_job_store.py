"""Unit tests for job records and the job stores."""

from decimal import Decimal

import pytest

from camper.contexts.intake.campaign_data_structure import CampaignDefinition
from camper.contexts.jobs.job_data_structure import (
    CampaignJob,
    CampaignStatus,
    JobStatus,
)
from camper.contexts.jobs.job_store import InMemoryJobStore, SqliteJobStore
from camper.exceptions import JobNotFoundError, JobStoreError

DEFINITIONS = [
    CampaignDefinition("Alpha", 1, Decimal("10.00")),
    CampaignDefinition("Beta", 2, Decimal("20.50")),
]


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryJobStore()
    return SqliteJobStore(tmp_path / "jobs.db")


@pytest.fixture
def job():
    return CampaignJob.create("123-456-7890", DEFINITIONS, job_id="job-1")


@pytest.mark.unit
def test_create_job(job):
    """Test a new job and its campaigns start pending with positional ids."""
    assert job.status == JobStatus.PENDING
    assert [c.id for c in job.campaigns] == ["job-1-campaign-1", "job-1-campaign-2"]
    assert all(c.status == CampaignStatus.PENDING for c in job.campaigns)
    assert job.campaigns[1].monthly_budget == Decimal("615.00")
    assert job.completed_at is None
    assert job.ttl > 0


@pytest.mark.unit
def test_create_job_generates_id():
    """Test that a job id is generated when not given."""
    first = CampaignJob.create("acct", DEFINITIONS)
    second = CampaignJob.create("acct", DEFINITIONS)

    assert first.job_id != second.job_id
    assert first.campaigns[0].id == f"{first.job_id}-campaign-1"


@pytest.mark.unit
def test_wire_format(job):
    """Test camelCase keys and money as decimal strings."""
    data = job.to_dict()

    assert data["jobId"] == "job-1"
    assert data["accountId"] == "123-456-7890"
    assert data["status"] == "pending"
    assert data["campaigns"][1]["dailyBudget"] == "20.50"
    assert data["campaigns"][1]["monthlyBudget"] == "615.00"
    assert "completedAt" not in data
    assert "error" not in data["campaigns"][0]
    assert CampaignJob.from_dict(data) == job


@pytest.mark.unit
def test_put_and_get(any_store, job):
    """Test storing and reading back a job."""
    any_store.put(job)

    assert any_store.get("job-1") == job
    assert any_store.exists("job-1")


@pytest.mark.unit
def test_get_missing_job(any_store):
    """Test reading an unknown job."""
    with pytest.raises(JobNotFoundError):
        any_store.get("nope")


@pytest.mark.unit
def test_snapshots_are_independent(any_store, job):
    """Test that mutating a snapshot does not change the stored record."""
    any_store.put(job)

    snapshot = any_store.get("job-1")
    snapshot.campaigns[0].status = CampaignStatus.FAILED

    assert any_store.get("job-1").campaigns[0].status == CampaignStatus.PENDING


@pytest.mark.unit
def test_update_partial_with_condition(any_store, job):
    """Test compare-and-set on status."""
    any_store.put(job)

    claimed = any_store.update_partial(
        "job-1", {"status": JobStatus.IN_PROGRESS}, expected={"status": JobStatus.PENDING}
    )
    claimed_again = any_store.update_partial(
        "job-1", {"status": JobStatus.IN_PROGRESS}, expected={"status": JobStatus.PENDING}
    )

    assert claimed is True
    assert claimed_again is False
    assert any_store.get("job-1").status == JobStatus.IN_PROGRESS


@pytest.mark.unit
def test_update_partial_multiple_fields(any_store, job):
    """Test that several fields change in one update."""
    any_store.put(job)

    any_store.update_partial(
        "job-1", {"status": "failed", "completed_at": "2026-01-01T00:00:00+00:00"}
    )

    stored = any_store.get("job-1")
    assert stored.status == JobStatus.FAILED
    assert stored.completed_at == "2026-01-01T00:00:00+00:00"


@pytest.mark.unit
def test_update_partial_rejects_unknown_fields(any_store, job):
    """Test that only status, campaigns and completed_at are updatable."""
    any_store.put(job)

    with pytest.raises(ValueError):
        any_store.update_partial("job-1", {"account_id": "other"})


@pytest.mark.unit
def test_update_campaign(any_store, job):
    """Test one campaign's status and error change atomically."""
    any_store.put(job)

    previous = any_store.update_campaign(
        "job-1", "job-1-campaign-2", CampaignStatus.FAILED, error="budget rejected"
    )

    stored = any_store.get("job-1")
    assert previous == CampaignStatus.PENDING
    assert stored.campaigns[0].status == CampaignStatus.PENDING
    assert stored.campaigns[1].status == CampaignStatus.FAILED
    assert stored.campaigns[1].error == "budget rejected"


@pytest.mark.unit
def test_update_unknown_campaign(any_store, job):
    """Test updating a campaign the job does not have."""
    any_store.put(job)

    with pytest.raises(JobStoreError):
        any_store.update_campaign("job-1", "job-1-campaign-9", CampaignStatus.COMPLETED)


@pytest.mark.unit
def test_expired_jobs(tmp_path, job):
    """Test that expired records read as not found and are purged."""
    clock = {"now": 1_000.0}
    stores = [
        InMemoryJobStore(clock=lambda: clock["now"]),
        SqliteJobStore(tmp_path / "jobs.db", clock=lambda: clock["now"]),
    ]
    job.ttl = 2_000

    for store in stores:
        store.put(job)
        assert store.exists("job-1")

    clock["now"] = 2_000.0

    for store in stores:
        with pytest.raises(JobNotFoundError):
            store.get("job-1")
        assert store.purge_expired() == 1
        assert store.purge_expired() == 0


@pytest.mark.unit
def test_sqlite_lists_unexpired_jobs(tmp_path, job):
    """Test listing job ids in insertion order."""
    store = SqliteJobStore(tmp_path / "jobs.db")
    store.put(job)
    store.put(CampaignJob.create("acct", DEFINITIONS, job_id="job-2"))

    assert store.list_job_ids() == ["job-1", "job-2"]

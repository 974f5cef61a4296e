"""
Integration test for the full job pipeline.
Tests: plan file → submit → job event → creation run → status → report, on SQLite.
"""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from camper.contexts.creation.orchestrator import CampaignCreationOrchestrator
from camper.contexts.intake.aggregation import calculate_total_budgets
from camper.contexts.intake.campaign_parser import parse_campaign_plan
from camper.contexts.jobs.handlers import (
    JobEvent,
    dispatch_job_events,
    get_job_status,
    submit_job,
)
from camper.contexts.jobs.job_data_structure import CampaignStatus, JobStatus
from camper.contexts.jobs.job_store import SqliteJobStore
from camper.contexts.progress.report import progress_percentage, write_job_report
from camper.utils.event_logging import get_recent_events

FIXTURES_PATH = Path(__file__).resolve().parents[1] / "fixtures"
PLAN_FILE = FIXTURES_PATH / "campaign_plan_sample.md"

EXPECTED_CAMPAIGNS = [
    ("T1-Search-Auckland", 1, Decimal("33.33")),
    ("T1-Search-Christchurch", 1, Decimal("33.33")),
    ("T2-Search-Masterton-Nelson", 2, Decimal("30")),
    ("T2-Search-Hamilton", 2, Decimal("25.50")),
    ("Brand Terms", 3, Decimal("15")),
    ("Competitor Terms", 3, Decimal("12.00")),
]


@pytest.mark.integration
def test_parse_sample_plan():
    """Test the sample plan parses to the expected campaigns and exclusions."""
    plan = parse_campaign_plan(PLAN_FILE.read_text(encoding="utf-8"))

    assert [(c.name, c.tier, c.daily_budget) for c in plan.campaigns] == EXPECTED_CAMPAIGNS
    assert plan.excluded == ["T1-Search-Wellington-Invercargill"]
    assert plan.duplicates == []

    totals = calculate_total_budgets(plan.campaigns)
    assert totals.total_daily == Decimal("149.16")
    assert totals.total_monthly == Decimal("4474.80")


@pytest.mark.integration
def test_job_pipeline_on_sqlite(tmp_path, settings, fake_ad_service_class, credential_provider):
    """Test a submitted plan is created end to end with one remote failure."""
    store = SqliteJobStore(tmp_path / "jobs.db")
    service = fake_ad_service_class(fail_at={"T2-Search-Hamilton": "campaign"})
    sleeps = []
    orchestrator = CampaignCreationOrchestrator(
        store=store,
        credential_provider=credential_provider,
        service_factory=lambda credentials: service,
        settings=settings,
        sleep=sleeps.append,
    )

    # Submit
    submission = submit_job(store, PLAN_FILE.read_text(encoding="utf-8"), "123-456-7890")
    assert submission.campaign_count == len(EXPECTED_CAMPAIGNS)

    pending = get_job_status(store, submission.job_id)
    assert pending.status == JobStatus.PENDING
    assert progress_percentage(pending) == 0

    # The insert event triggers exactly one creation run
    insert_event = JobEvent("INSERT", store.get(submission.job_id).to_dict())
    results = dispatch_job_events([insert_event], orchestrator)
    assert len(results) == 1
    assert len(sleeps) == len(EXPECTED_CAMPAIGNS)

    # A replayed event finds the job already claimed and does nothing
    assert dispatch_job_events([insert_event], orchestrator) == []

    job = get_job_status(store, submission.job_id)
    assert job.status == JobStatus.FAILED
    assert job.completed_at is not None
    assert progress_percentage(job) == 100
    statuses = {c.name: c.status for c in job.campaigns}
    assert statuses["T2-Search-Hamilton"] == CampaignStatus.FAILED
    assert [name for name, status in statuses.items() if status == CampaignStatus.COMPLETED] == [
        "T1-Search-Auckland",
        "T1-Search-Christchurch",
        "T2-Search-Masterton-Nelson",
        "Brand Terms",
        "Competitor Terms",
    ]

    # Report
    report_path = write_job_report(job, tmp_path / "reports")
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["summary"]["completed"] == 5
    assert report["summary"]["failed"] == 1
    assert report["campaigns"][3]["error"] == "campaign rejected for T2-Search-Hamilton"

    # Event trail
    finished = get_recent_events(job_id=submission.job_id, event_type="job_finished")
    assert finished[-1]["status"] == "failed"

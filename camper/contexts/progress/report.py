"""
Job progress and downloadable reports.

Works on CampaignJob snapshots from either the store or the status endpoint.
"""

import json
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any

from camper.contexts.intake.aggregation import calculate_total_budgets
from camper.contexts.jobs.job_data_structure import CampaignJob, CampaignStatus


def progress_percentage(job: CampaignJob) -> int:
    """
    Share of campaigns in a terminal status, as a whole percentage (half-up).

    A job with no campaigns reports 0.
    """
    total = len(job.campaigns)
    if total == 0:
        return 0

    finished = sum(1 for campaign in job.campaigns if campaign.status.is_terminal)
    share = Decimal(finished * 100) / Decimal(total)
    return int(share.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def build_job_report(job: CampaignJob) -> dict[str, Any]:
    """
    Build the downloadable report for a job.

    Returns:
        Dict with job fields, campaigns (wire format) and a summary block
    """
    totals = calculate_total_budgets(job.campaigns)
    statuses = job.campaign_statuses()

    return {
        "jobId": job.job_id,
        "accountId": job.account_id,
        "status": job.status.value,
        "createdAt": job.created_at,
        "completedAt": job.completed_at,
        "campaigns": [campaign.to_dict() for campaign in job.campaigns],
        "summary": {
            "total": len(job.campaigns),
            "completed": statuses.count(CampaignStatus.COMPLETED),
            "failed": statuses.count(CampaignStatus.FAILED),
            "progress": progress_percentage(job),
            "totalDailyBudget": str(totals.total_daily),
            "totalMonthlyBudget": str(totals.total_monthly),
        },
    }


def write_job_report(job: CampaignJob, output_dir: Path) -> Path:
    """
    Write the job report as JSON (campaign-report-{job_id}.json).

    Returns:
        Path to the written report
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    report_path = output_dir / f"campaign-report-{job.job_id}.json"
    report_path.write_text(json.dumps(build_job_report(job), indent=2), encoding="utf-8")
    return report_path

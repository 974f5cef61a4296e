"""Effective job status derived from campaign statuses."""

from typing import Iterable

from camper.contexts.jobs.job_data_structure import CampaignJob, CampaignStatus, JobStatus


def derive_job_status(
    campaign_statuses: Iterable[CampaignStatus], current_status: JobStatus
) -> JobStatus:
    """
    Derive a job's effective status.

    Rules, first match wins:
    1. Every campaign completed → COMPLETED
    2. Some campaign failed and every campaign is terminal → FAILED
    3. Some campaign creating → IN_PROGRESS
    4. Otherwise → current_status unchanged

    A job with no campaigns counts as COMPLETED (rule 1 holds vacuously).
    """
    statuses = [CampaignStatus(status) for status in campaign_statuses]

    if all(status == CampaignStatus.COMPLETED for status in statuses):
        return JobStatus.COMPLETED
    if any(status == CampaignStatus.FAILED for status in statuses) and all(
        status.is_terminal for status in statuses
    ):
        return JobStatus.FAILED
    if any(status == CampaignStatus.CREATING for status in statuses):
        return JobStatus.IN_PROGRESS
    return JobStatus(current_status)


def apply_effective_status(job: CampaignJob) -> CampaignJob:
    """Return a copy of job carrying its derived status. The input is not modified."""
    reconciled = job.copy()
    reconciled.status = derive_job_status(job.campaign_statuses(), job.status)
    return reconciled

"""
Campaign creation orchestrator.

Processes one job: claims it, then creates its pending campaigns one at a time
on the ad platform, persisting each campaign's status before and after its
remote calls and pausing between campaigns to respect API rate limits.

Any error from the ad service only fails the campaign it happened on.
Credential and store errors abort the whole run and propagate; campaigns not
yet reached stay pending.

Usage:
    orchestrator = CampaignCreationOrchestrator(
        store=SqliteJobStore(),
        credential_provider=EnvironmentCredentialProvider(),
    )
    result = orchestrator.process_job(job_id)
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from camper.contexts.creation.ad_service import (
    AdCampaignService,
    GoogleAdsCampaignService,
    create_remote_campaign,
)
from camper.contexts.creation.credentials import CredentialProvider, Credentials
from camper.contexts.creation.logger import (
    _log_debug,
    _log_info,
    _log_warning,
    log_campaign_result,
    log_job_summary,
)
from camper.contexts.creation.reconciliation import derive_job_status
from camper.contexts.creation.settings import CreationSettings, load_creation_settings
from camper.contexts.jobs.job_data_structure import Campaign, CampaignStatus, JobStatus
from camper.contexts.jobs.job_store import JobStore
from camper.exceptions import JobAlreadyClaimedError, RemoteServiceError
from camper.utils.event_logging import log_job_event, log_status_change
from camper.utils.timestamp import now_exact

EVENT_SOURCE = "creation"


@dataclass
class OrchestrationResult:
    """
    Outcome of one process_job() run.

    Attributes:
        job_id: Job processed
        status: Reconciled job status persisted at the end of the run
        created: Ids of campaigns created in this run
        failed: Campaign id -> error message, for campaigns that failed in this run
        skipped: Ids of campaigns left untouched (already creating/completed/failed)
        completed_at: Timestamp stamped on the job
    """

    job_id: str
    status: JobStatus
    created: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    completed_at: Optional[str] = None


class CampaignCreationOrchestrator:
    """
    Sequential, rate-limited campaign creation for one job at a time.

    Args:
        store: Job store (sole writer for the job during a run)
        credential_provider: Source of ad platform credentials
        service_factory: Builds the remote service from credentials
                         (defaults to GoogleAdsCampaignService)
        settings: Creation settings (defaults loaded from YAML)
        sleep: Blocking sleep used between campaigns
        clock: Produces the completed_at timestamp
    """

    def __init__(
        self,
        store: JobStore,
        credential_provider: CredentialProvider,
        service_factory: Callable[[Credentials], AdCampaignService] = None,
        settings: CreationSettings = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], str] = now_exact,
    ):
        self.store = store
        self.credential_provider = credential_provider
        self.settings = settings or load_creation_settings()
        self.service_factory = service_factory or (
            lambda credentials: GoogleAdsCampaignService.from_credentials(credentials, self.settings)
        )
        self.sleep = sleep
        self.clock = clock

    def process_job(self, job_id: str, resume: bool = False) -> OrchestrationResult:
        """
        Create every pending campaign of a job.

        Args:
            job_id: Job to process
            resume: Continue a job that is already in_progress (e.g., after a crash)
                    instead of requiring a pending job to claim

        Returns:
            OrchestrationResult

        Raises:
            CredentialRetrievalError: If credentials cannot be retrieved
            JobNotFoundError: If the job does not exist or has expired
            JobAlreadyClaimedError: If another worker owns the job
        """
        credentials = self.credential_provider.get_credentials()
        service = self.service_factory(credentials)

        job = self.store.get(job_id)
        self._claim(job_id, job.status, resume)

        result = OrchestrationResult(job_id=job_id, status=JobStatus.IN_PROGRESS)
        _log_info(f"Processing job {job_id}: {len(job.campaigns)} campaign(s) for {job.account_id}")

        for campaign in job.campaigns:
            if campaign.status != CampaignStatus.PENDING:
                if campaign.status == CampaignStatus.CREATING:
                    _log_warning(
                        f"{campaign.name}: left in 'creating' by an earlier run, not retried"
                    )
                else:
                    _log_debug(f"{campaign.name}: already {campaign.status.value}, skipping")
                result.skipped.append(campaign.id)
                continue

            self._create_one(job_id, job.account_id, campaign, service, result)
            self.sleep(self.settings.inter_campaign_delay)

        self._finish(job_id, result)
        log_job_summary(result)
        return result

    def _claim(self, job_id: str, status: JobStatus, resume: bool) -> None:
        if status == JobStatus.PENDING:
            claimed = self.store.update_partial(
                job_id,
                {"status": JobStatus.IN_PROGRESS},
                expected={"status": JobStatus.PENDING},
            )
            if not claimed:
                raise JobAlreadyClaimedError(job_id)
            log_job_event("job_claimed", job_id, source=EVENT_SOURCE)
            log_status_change(job_id, "pending", "in_progress", source=EVENT_SOURCE)
        elif not resume:
            raise JobAlreadyClaimedError(job_id)

    def _create_one(
        self,
        job_id: str,
        account_id: str,
        campaign: Campaign,
        service: AdCampaignService,
        result: OrchestrationResult,
    ) -> None:
        self._set_status(job_id, campaign, CampaignStatus.CREATING)

        start = time.perf_counter()
        try:
            create_remote_campaign(
                service, account_id, campaign.name, campaign.daily_budget, self.settings
            )
        except RemoteServiceError as e:
            self._set_status(job_id, campaign, CampaignStatus.FAILED, error=e.message)
            result.failed[campaign.id] = e.message
        else:
            self._set_status(job_id, campaign, CampaignStatus.COMPLETED)
            result.created.append(campaign.id)

        log_campaign_result(campaign, time.perf_counter() - start)

    def _set_status(
        self,
        job_id: str,
        campaign: Campaign,
        status: CampaignStatus,
        error: Optional[str] = None,
    ) -> None:
        previous = self.store.update_campaign(job_id, campaign.id, status, error=error)
        campaign.status = status
        campaign.error = error

        extra = {"campaign_id": campaign.id}
        if error:
            extra["error"] = error
        log_status_change(job_id, previous.value, status.value, source=EVENT_SOURCE, **extra)

    def _finish(self, job_id: str, result: OrchestrationResult) -> None:
        """Stamp completed_at and persist the reconciled status in one update."""
        job = self.store.get(job_id)
        status = derive_job_status(job.campaign_statuses(), job.status)
        completed_at = self.clock()

        self.store.update_partial(job_id, {"status": status, "completed_at": completed_at})

        result.status = status
        result.completed_at = completed_at
        log_job_event(
            "job_finished",
            job_id,
            source=EVENT_SOURCE,
            status=status.value,
            created=len(result.created),
            failed=len(result.failed),
            skipped=len(result.skipped),
        )

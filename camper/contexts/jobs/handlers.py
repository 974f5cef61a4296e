"""
Entry points of the Jobs context.

- submit_job: validate and parse a plan, persist it as a pending job
- get_job_status: read a job with its effective (reconciled) status
- dispatch_job_events: start creation for jobs that just became pending

The functions take their collaborators as arguments so the same code serves
the CLI, tests and any hosting wrapper (HTTP handler, stream consumer).
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from camper.contexts.creation.reconciliation import apply_effective_status
from camper.contexts.intake.campaign_parser import parse_campaign_plan
from camper.contexts.intake.logger import log_plan_parsed, log_validation_result
from camper.contexts.intake.validation import validate_campaign_document
from camper.contexts.jobs.job_data_structure import CampaignJob, JobStatus
from camper.contexts.jobs.job_store import JobStore
from camper.contexts.jobs.logger import _log_debug, _log_info, _log_warning
from camper.exceptions import InvalidDocumentError, JobAlreadyClaimedError
from camper.utils.event_logging import log_job_event

MISSING_ACCOUNT = "missing account id"

# Stream event names that carry a new record image
NEW_IMAGE_EVENTS = ("INSERT", "MODIFY")


@dataclass(frozen=True)
class SubmissionResult:
    """Returned by submit_job()."""

    job_id: str
    campaign_count: int
    message: str = "Job created successfully"


@dataclass(frozen=True)
class JobEvent:
    """
    A change to a stored job record.

    Attributes:
        event_name: "INSERT", "MODIFY" or "REMOVE"
        new_image: Record after the change, in wire format (None for REMOVE)
    """

    event_name: str
    new_image: Optional[dict[str, Any]] = None


def submit_job(store: JobStore, text: str, account_id: str) -> SubmissionResult:
    """
    Validate a plan and persist it as a new pending job.

    Args:
        store: Job store
        text: Campaign plan markdown
        account_id: Ad platform customer account

    Returns:
        SubmissionResult with the new job id and campaign count

    Raises:
        InvalidDocumentError: If the account id is missing or the plan is rejected
    """
    if not account_id or not account_id.strip():
        raise InvalidDocumentError(MISSING_ACCOUNT)

    validation = validate_campaign_document(text)
    log_validation_result("submission", validation)
    if not validation.valid:
        raise InvalidDocumentError(validation.error)

    plan = parse_campaign_plan(text)
    log_plan_parsed("submission", plan)
    job = CampaignJob.create(account_id.strip(), plan.campaigns)
    store.put(job)

    log_job_event(
        "job_submitted",
        job.job_id,
        source="intake",
        account_id=job.account_id,
        campaign_count=len(job.campaigns),
    )
    _log_info(f"Job {job.job_id} submitted with {len(job.campaigns)} campaign(s)")
    return SubmissionResult(job_id=job.job_id, campaign_count=len(job.campaigns))


def get_job_status(store: JobStore, job_id: str) -> CampaignJob:
    """
    Read a job with its effective status. Storage is not modified.

    Raises:
        JobNotFoundError: If the job does not exist or has expired
    """
    return apply_effective_status(store.get(job_id))


def dispatch_job_events(events: Iterable[JobEvent], orchestrator) -> list:
    """
    Run the orchestrator once for every event whose new image is a pending job.

    Events for jobs another worker already claimed are logged and skipped; any
    other error propagates.

    Args:
        events: Job events in arrival order
        orchestrator: CampaignCreationOrchestrator (or anything with process_job)

    Returns:
        OrchestrationResult for each job processed
    """
    results = []
    for event in events:
        if event.event_name not in NEW_IMAGE_EVENTS or not event.new_image:
            continue

        job_id = event.new_image.get("jobId")
        if event.new_image.get("status") != JobStatus.PENDING.value:
            _log_debug(f"Ignoring {event.event_name} for job {job_id}: not pending")
            continue

        try:
            results.append(orchestrator.process_job(job_id))
        except JobAlreadyClaimedError:
            _log_warning(f"Job {job_id} already claimed by another worker, skipping")

    return results


def events_from_dynamodb_stream(payload: dict[str, Any]) -> list[JobEvent]:
    """
    Convert a DynamoDB stream payload ({"Records": [...]}) into JobEvents.

    Attribute values are unmarshalled with boto3's TypeDeserializer; numbers
    come back as Decimal, which CampaignJob.from_dict accepts.
    """
    # Lazy import - boto3 is only needed when events come from DynamoDB
    try:
        from boto3.dynamodb.types import TypeDeserializer
    except ImportError:
        raise ImportError("boto3 package required. Install with: pip install boto3")

    deserializer = TypeDeserializer()
    events = []
    for record in payload.get("Records", []):
        raw_image = record.get("dynamodb", {}).get("NewImage")
        new_image = (
            {key: deserializer.deserialize(value) for key, value in raw_image.items()}
            if raw_image
            else None
        )
        events.append(JobEvent(event_name=record.get("eventName", ""), new_image=new_image))
    return events

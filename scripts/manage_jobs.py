#!/usr/bin/env python3
"""
Command-line interface for campaign creation jobs.

Jobs live in the SQLite job store (JOB_DB_PATH, default outs/jobs.db).

Commands:
    submit  - Validate a plan and create a pending job
    process - Create the campaigns of a job on Google Ads
    status  - Show a job's effective status
    watch   - Poll a job through the backend API until it finishes
    report  - Write a job's JSON report
    purge   - Delete expired jobs
    events  - Show recent job events
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from camper.contexts.creation.credentials import (
    EnvironmentCredentialProvider,
    SecretsManagerCredentialProvider,
)
from camper.contexts.creation.logger import setup_creation_logger
from camper.contexts.creation.orchestrator import CampaignCreationOrchestrator
from camper.contexts.creation.settings import load_creation_settings
from camper.contexts.intake.logger import setup_intake_logger
from camper.contexts.jobs.handlers import get_job_status, submit_job
from camper.contexts.jobs.job_data_structure import CampaignStatus
from camper.contexts.jobs.job_store import SqliteJobStore
from camper.contexts.progress.api_client import CampaignApiClient
from camper.contexts.progress.poller import JobStatusPoller
from camper.contexts.progress.report import progress_percentage, write_job_report
from camper.exceptions import (
    CredentialRetrievalError,
    InvalidDocumentError,
    JobAlreadyClaimedError,
    JobNotFoundError,
)
from camper.utils.event_logging import get_recent_events
from camper.utils.timestamp import format_timestamp, now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
REPORTS_PATH = Path(os.getenv("REPORTS_PATH", "outs/reports"))

STATUS_MARKERS = {
    CampaignStatus.PENDING: ("○", None),
    CampaignStatus.CREATING: ("⟳", typer.colors.YELLOW),
    CampaignStatus.COMPLETED: ("✓", typer.colors.GREEN),
    CampaignStatus.FAILED: ("✗", typer.colors.RED),
}

app = typer.Typer(
    add_completion=False,
    help="Manage campaign creation jobs",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _print_job(job) -> None:
    typer.secho(f"\nJob {job.job_id}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Account:   {job.account_id}")
    typer.echo(f"  Status:    {job.status.value} ({progress_percentage(job)}%)")
    typer.echo(f"  Created:   {format_timestamp(job.created_at)}")
    if job.completed_at:
        typer.echo(f"  Completed: {format_timestamp(job.completed_at)}")

    typer.echo("")
    for campaign in job.campaigns:
        marker, color = STATUS_MARKERS[campaign.status]
        line = f"  {marker} T{campaign.tier} {campaign.name} (${campaign.daily_budget}/day)"
        typer.secho(line, fg=color)
        if campaign.error:
            typer.secho(f"      {campaign.error}", fg=typer.colors.RED)


@app.command("submit")
def submit_command(
    plan_file: Path = typer.Argument(..., help="Markdown campaign plan"),
    account_id: str = typer.Option(..., "--account", "-a", help="Google Ads customer id"),
):
    """
    Validate a plan and store it as a pending job.

    Examples:\n

        $ manage_jobs.py submit plans/Q3_NZ_Search.md --account 123-456-7890
    """
    if not plan_file.exists():
        typer.echo(f"ERROR: File not found: {plan_file}", err=True)
        raise typer.Exit(1)

    setup_intake_logger(LOGS_PATH / f"intake_{now()}", plan_file.name)
    store = SqliteJobStore()
    try:
        result = submit_job(store, plan_file.read_text(encoding="utf-8"), account_id)
    except InvalidDocumentError as e:
        typer.secho(f"✗ {plan_file.name}: {e.reason}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    typer.secho(f"✓ {result.message}", fg=typer.colors.GREEN)
    typer.echo(f"  Job id:    {result.job_id}")
    typer.echo(f"  Campaigns: {result.campaign_count}")


@app.command("process")
def process_command(
    job_id: str = typer.Argument(..., help="Job to process"),
    resume: bool = typer.Option(
        False, "--resume", help="Continue a job that is already in progress"
    ),
    use_secrets_manager: bool = typer.Option(
        False, "--secrets-manager", help="Read credentials from AWS Secrets Manager"
    ),
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", help="Alternate creation settings YAML"
    ),
):
    """Create a job's pending campaigns on Google Ads."""
    setup_creation_logger(LOGS_PATH / f"create_{now()}", job_id)

    provider = (
        SecretsManagerCredentialProvider()
        if use_secrets_manager
        else EnvironmentCredentialProvider()
    )
    orchestrator = CampaignCreationOrchestrator(
        store=SqliteJobStore(),
        credential_provider=provider,
        settings=load_creation_settings(settings_file),
    )

    try:
        result = orchestrator.process_job(job_id, resume=resume)
    except (CredentialRetrievalError, JobNotFoundError, JobAlreadyClaimedError) as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if result.failed:
        raise typer.Exit(1)


@app.command("status")
def status_command(job_id: str = typer.Argument(..., help="Job to show")):
    """Show a job's effective status from the local store."""
    try:
        job = get_job_status(SqliteJobStore(), job_id)
    except JobNotFoundError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    _print_job(job)


@app.command("watch")
def watch_command(
    job_id: str = typer.Argument(..., help="Job to watch"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Backend API root"),
    interval: float = typer.Option(5.0, "--interval", help="Seconds between checks"),
    timeout: float = typer.Option(1800.0, "--timeout", help="Give up after this many seconds"),
):
    """Poll a job through the backend API until it completes or fails."""
    with CampaignApiClient(base_url=api_url) as client:
        poller = JobStatusPoller(client, job_id, interval=interval)
        with poller:
            finished = poller.wait(timeout)

    if poller.last_job is not None:
        _print_job(poller.last_job)

    if poller.last_error is not None:
        typer.secho(f"\n✗ {poller.last_error.message}", fg=typer.colors.RED, err=True)
        if poller.last_error.details:
            typer.echo(f"  {poller.last_error.details}", err=True)

    if not finished:
        typer.secho("\nTimed out waiting for job to finish", fg=typer.colors.YELLOW)
        raise typer.Exit(1)


@app.command("report")
def report_command(
    job_id: str = typer.Argument(..., help="Job to report on"),
    output_dir: Path = typer.Option(REPORTS_PATH, "--output", "-o", help="Report directory"),
):
    """Write campaign-report-{job_id}.json for a job."""
    try:
        job = get_job_status(SqliteJobStore(), job_id)
    except JobNotFoundError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    report_path = write_job_report(job, output_dir)
    typer.secho(f"✓ Report written to {report_path}", fg=typer.colors.GREEN)


@app.command("purge")
def purge_command():
    """Delete expired jobs from the store."""
    removed = SqliteJobStore().purge_expired()
    typer.echo(f"Removed {removed} expired job(s)")


@app.command("events")
def events_command(
    n: int = typer.Option(20, "-n", help="Number of events to show"),
    job_id: Optional[str] = typer.Option(None, "--job", help="Only events for this job"),
    event_type: Optional[str] = typer.Option(None, "--type", help="Only events of this type"),
):
    """Show recent job events (most recent last)."""
    events = get_recent_events(n, job_id=job_id, event_type=event_type)
    if not events:
        typer.echo("No events found")
        return

    for event in events:
        when = format_timestamp(event.get("timestamp", ""), relative=True)
        summary = f"{when:>10}  {event.get('event_type')}  {event.get('job_id')}"
        if event.get("event_type") == "status_change":
            summary += f"  {event.get('old_status')} → {event.get('new_status')}"
            if event.get("campaign_id"):
                summary += f"  ({event['campaign_id']})"
        typer.echo(summary)


if __name__ == "__main__":
    app()

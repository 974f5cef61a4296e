"""
Job event logging utilities for CAMPER (Tier 2 logging).

Provides uniform interfaces for logging job lifecycle events to a JSON Lines
file (JOB_EVENTS_FILE). This is the cross-context audit trail: intake records
submissions, the creation context records claims and every status change.

For detailed within-context logging (Tier 1), use camper.utils.logger instead.

Usage:
    from camper.utils.event_logging import log_job_event, log_status_change

    log_job_event(
        event_type="job_submitted",
        job_id="3f1c...",
        source="intake",
        campaign_count=4,
    )

    log_status_change(
        job_id="3f1c...",
        old_status="pending",
        new_status="creating",
        source="creation",
        campaign_id="3f1c...-campaign-1",
    )
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from camper.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
JOB_EVENTS_FILE = Path(os.getenv("JOB_EVENTS_FILE", str(LOGS_PATH / "job_events.log")))


def log_job_event(event_type: str, job_id: str, source: str, **extra_fields) -> None:
    """
    Append an event to the job event log.

    Events are written in JSON Lines format (one JSON object per line), which
    keeps the log streamable and easy to filter by event_type, job_id or source.

    Args:
        event_type: Type of event (e.g., "job_submitted", "job_claimed", "job_finished")
        job_id: Job identifier
        source: Event source (e.g., "intake", "creation", "cli")
        **extra_fields: Additional event-specific fields
    """
    JOB_EVENTS_FILE.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "job_id": job_id,
        "source": source,
        **extra_fields,
    }

    with open(JOB_EVENTS_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(event, default=str) + "\n")


def log_status_change(
    job_id: str, old_status: str, new_status: str, source: str, **extra_fields
) -> None:
    """
    Log a status change event for a job or one of its campaigns.

    Pure logging function - does NOT update the job store.
    Called after the store has accepted the update.

    Args:
        job_id: Job identifier
        old_status: Previous status
        new_status: New status value
        source: Event source (e.g., "creation", "cli")
        **extra_fields: Additional fields (e.g., campaign_id, error)
    """
    log_job_event(
        event_type="status_change",
        job_id=job_id,
        old_status=old_status,
        new_status=new_status,
        source=source,
        **extra_fields,
    )


def get_recent_events(
    n: int = 10, job_id: Optional[str] = None, event_type: Optional[str] = None
) -> list[dict]:
    """
    Get the last n events from the job event log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        job_id: Filter to only events for this job (optional)
        event_type: Filter to only events of this type (optional)

    Returns:
        List of event dicts (most recent last)

    Example:
        # Last 20 status changes for one job
        events = get_recent_events(20, job_id="3f1c...", event_type="status_change")
    """
    if not JOB_EVENTS_FILE.exists():
        return []

    events = []
    with open(JOB_EVENTS_FILE, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if job_id:
        events = [e for e in events if e.get("job_id") == job_id]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events

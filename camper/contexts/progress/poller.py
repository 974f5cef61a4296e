"""
Client-side job status polling.

JobStatusPoller is a small state machine:

    IDLE --start()--> POLLING --terminal job status--> TERMINAL
                         |
                         +--stop()--> IDLE

While POLLING it fetches the job status immediately, then re-checks on a
cancellable timer every `interval` seconds. stop() (or leaving the context
manager) always cancels the pending timer.
An exception from the client or a callback propagates, but the next check is
still scheduled (or the poller reaches TERMINAL) before it does.

Usage:
    with JobStatusPoller(client, job_id, on_update=print) as poller:
        poller.wait(timeout=600)
"""

import threading
from enum import Enum
from typing import Callable, Optional

from camper.contexts.jobs.job_data_structure import CampaignJob
from camper.contexts.progress.api_client import ApiError, CampaignApiClient
from camper.contexts.progress.logger import _log_warning, log_job_progress, log_job_terminal
from camper.contexts.progress.report import progress_percentage

DEFAULT_POLL_INTERVAL = 5.0


class PollerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    TERMINAL = "terminal"


class JobStatusPoller:
    """
    Poll a job's status until it completes or fails.

    Args:
        client: API client used for status requests
        job_id: Job to watch
        interval: Seconds between checks
        on_update: Called with each CampaignJob snapshot
        on_error: Called with the ApiError of each failed check (polling continues)
        timer_factory: Builds the re-check timer (threading.Timer signature)
    """

    def __init__(
        self,
        client: CampaignApiClient,
        job_id: str,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_update: Optional[Callable[[CampaignJob], None]] = None,
        on_error: Optional[Callable[[ApiError], None]] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.client = client
        self.job_id = job_id
        self.interval = interval
        self.on_update = on_update
        self.on_error = on_error
        self._timer_factory = timer_factory

        self._lock = threading.Lock()
        self._timer = None
        self._done = threading.Event()
        self.state = PollerState.IDLE
        self.last_job: Optional[CampaignJob] = None
        self.last_error: Optional[ApiError] = None

    def start(self) -> None:
        """Fetch the status now and keep polling. No-op unless IDLE."""
        with self._lock:
            if self.state != PollerState.IDLE:
                return
            self.state = PollerState.POLLING
            self._done.clear()
        self._check()

    def stop(self) -> None:
        """Cancel any scheduled check. A TERMINAL poller stays TERMINAL."""
        with self._lock:
            self._cancel_timer()
            if self.state == PollerState.POLLING:
                self.state = PollerState.IDLE
            self._done.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the poller stops or reaches TERMINAL. Returns False on timeout."""
        return self._done.wait(timeout)

    def __enter__(self) -> "JobStatusPoller":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _check(self) -> None:
        with self._lock:
            if self.state != PollerState.POLLING:
                return
            self._timer = None

        job = None
        try:
            response = self.client.get_status(self.job_id)

            if response.success:
                job = response.data
                self.last_job = job
                self.last_error = None
                log_job_progress(job, progress_percentage(job))
                if self.on_update:
                    self.on_update(job)
            else:
                self.last_error = response.error
                _log_warning(f"Status check for {self.job_id} failed: {response.error.message}")
                if self.on_error:
                    self.on_error(response.error)
        finally:
            # Runs even if the client or a callback raised; the error still propagates
            self._schedule_next(job)

    def _schedule_next(self, job: Optional[CampaignJob]) -> None:
        """Move to TERMINAL on a finished job, otherwise arm the next check."""
        with self._lock:
            if self.state != PollerState.POLLING:
                return
            if job is not None and job.status.is_terminal:
                self.state = PollerState.TERMINAL
                self._done.set()
                log_job_terminal(job)
                return

            self._timer = self._timer_factory(self.interval, self._check)
            self._timer.daemon = True
            self._timer.start()

"""
Creation context logger.

Provides logging interface for creation context with automatic [create] prefix.
All creation modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from camper.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[create]"


def setup_creation_logger(log_dir: Path, job_id: str) -> Path:
    """
    Setup logger for a creation run.

    Args:
        log_dir: Directory for this creation session
        job_id: Job being processed (for provenance)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="create",
        log_dir=log_dir,
        extra_provenance={"Job": job_id},
    )


# Wrapper functions with automatic [create] prefix


def _log_info(message: str) -> None:
    """Log info message with [create] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [create] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [create] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [create] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [create] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level creation-specific logging helpers


def log_campaign_result(campaign, elapsed_time: float) -> None:
    """
    Log the outcome of one campaign's creation sequence.

    Args:
        campaign: Campaign after its terminal status was recorded
        elapsed_time: Seconds spent on the remote calls
    """
    if campaign.status == "completed":
        _log_success(f"{campaign.name}: created ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{campaign.name}: failed ({elapsed_time:.2f}s)")
        if campaign.error:
            _log_error(f"  Error: {campaign.error}")


def log_job_summary(result) -> None:
    """Log an OrchestrationResult."""
    summary = (
        f"Job {result.job_id}: {result.status.value} "
        f"({len(result.created)} created, {len(result.failed)} failed, "
        f"{len(result.skipped)} skipped)"
    )
    if result.failed:
        _log_warning(summary)
    else:
        _log_success(summary)

"""
Progress context logger.

Provides logging interface for progress context with automatic [progress] prefix.
All progress modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[progress]"


def _log_info(message: str) -> None:
    """Log info message with [progress] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [progress] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [progress] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [progress] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [progress] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level progress-specific logging helpers


def log_job_progress(job, percentage: int) -> None:
    """Log one status snapshot of a job."""
    _log_info(f"Job {job.job_id}: {job.status.value} ({percentage}%)")


def log_job_terminal(job) -> None:
    """Log a job reaching a terminal status."""
    if job.status.value == "completed":
        _log_success(f"Job {job.job_id} completed")
    else:
        _log_error(f"Job {job.job_id} finished with failures")

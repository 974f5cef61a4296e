"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from camper.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path, plan_name: str = None) -> Path:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this intake session
        plan_name: Campaign plan being processed (for provenance)

    Returns:
        Path to log file
    """
    extra = {"Plan": plan_name} if plan_name else None
    return _setup_logger(context_name="intake", log_dir=log_dir, extra_provenance=extra)


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_plan_parsed(source: str, plan) -> None:
    """
    Log what the parser extracted from a plan and what it dropped.

    Args:
        source: File name or other label for the plan
        plan: ParsedPlan from parse_campaign_plan()
    """
    _log_info(f"{source}: {len(plan.campaigns)} campaign(s) parsed")
    for tier, name in plan.duplicates:
        _log_warning(f"  Duplicate campaign in tier {tier}: {name}")
    for name in plan.excluded:
        _log_debug(f"  Skipped (already created): {name}")


def log_validation_result(source: str, result) -> None:
    """Log a ValidationResult."""
    if result.valid:
        _log_success(f"{source}: plan is valid")
    else:
        _log_error(f"{source}: {result.error}")
        if result.duplicate_names:
            _log_error(f"  Duplicates: {', '.join(result.duplicate_names)}")

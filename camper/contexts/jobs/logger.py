"""
Jobs context logger.

Provides logging interface for jobs context with automatic [jobs] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[jobs]"


def _log_info(message: str) -> None:
    """Log info message with [jobs] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [jobs] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [jobs] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")

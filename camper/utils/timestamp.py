"""Timestamp formatting utilities."""

import time
from datetime import datetime, timezone


def now() -> str:
    """Current UTC time as a compact identifier-friendly string (e.g., 20251114_123456)."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """Current UTC time as an ISO 8601 string with microseconds."""
    return datetime.now(timezone.utc).isoformat()


def expiry_epoch(days: int, from_epoch: float | None = None) -> int:
    """
    Epoch seconds `days` days after `from_epoch` (defaults to now).

    Used for record time-to-live stamps.
    """
    if from_epoch is None:
        from_epoch = time.time()
    return int(from_epoch) + days * 24 * 60 * 60


def format_timestamp(iso_timestamp: str, relative: bool = False) -> str:
    """
    Format ISO 8601 timestamp to readable format.

    Args:
        iso_timestamp: ISO 8601 formatted timestamp string
        relative: If True, show relative time (e.g., "2h ago")
                 If False, show absolute time (e.g., "2025-11-13 18:45:40")

    Returns:
        Human-readable timestamp

    Examples:
        format_timestamp("2025-11-13T18:45:40.572549+00:00")
        # "2025-11-13 18:45:40"

        format_timestamp("2025-11-13T18:45:40.572549+00:00", relative=True)
        # "2h ago"
    """
    try:
        dt = datetime.fromisoformat(iso_timestamp)

        if relative:
            return _format_relative_time(dt)
        else:
            return dt.strftime("%Y-%m-%d %H:%M:%S")

    except (ValueError, TypeError):
        # Return original if parsing fails
        return iso_timestamp


def _format_relative_time(dt: datetime) -> str:
    """
    Format datetime as relative time in compact format (e.g., "2h ago").

    - Seconds: "30s ago"
    - Minutes: "15m ago"
    - Hours: "2h ago"
    - Days: "5d ago"
    """
    current = datetime.now(dt.tzinfo) if dt.tzinfo else datetime.now()
    diff = current - dt

    # Future times
    if diff.total_seconds() < 0:
        diff = -diff
        suffix = "from now"
    else:
        suffix = "ago"

    seconds = int(diff.total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = diff.days

    if seconds < 60:
        return f"{seconds}s {suffix}"
    elif minutes < 60:
        return f"{minutes}m {suffix}"
    elif hours < 24:
        return f"{hours}h {suffix}"
    else:
        return f"{days}d {suffix}"

"""Unit tests for the timestamp helpers."""

from datetime import datetime, timedelta, timezone

import pytest

import camper.utils
from camper.utils.timestamp import expiry_epoch, format_timestamp, now, now_exact


@pytest.mark.unit
def test_package_exports():
    """Test the utils package re-exports only the helpers the contexts use."""
    assert camper.utils.__all__ == ["expiry_epoch", "now", "now_exact"]
    assert not hasattr(camper.utils, "today")


@pytest.mark.unit
def test_now_formats():
    """Test the compact and exact timestamp forms."""
    assert len(now()) == len("20251114_123456")
    assert datetime.fromisoformat(now_exact()).tzinfo is not None


@pytest.mark.unit
def test_expiry_epoch():
    """Test TTL stamps are whole days after the given epoch."""
    assert expiry_epoch(7, from_epoch=1_000.9) == 1_000 + 7 * 86_400


@pytest.mark.unit
def test_format_timestamp():
    """Test absolute, relative and unparseable timestamps."""
    assert format_timestamp("2025-11-13T18:45:40.572549+00:00") == "2025-11-13 18:45:40"

    two_hours_ago = (datetime.now(timezone.utc) - timedelta(hours=2, minutes=1)).isoformat()
    assert format_timestamp(two_hours_ago, relative=True) == "2h ago"

    assert format_timestamp("not a timestamp") == "not a timestamp"

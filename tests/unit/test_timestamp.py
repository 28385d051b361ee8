"""Unit tests for timestamp formatting."""

from datetime import datetime, timedelta

import pytest

from optrack.utils.timestamp import describe_span, format_timestamp, now


@pytest.mark.unit
def test_format_timestamp_absolute():
    """Test absolute formatting drops sub-second precision."""
    assert format_timestamp("2025-11-13T18:45:40.572549") == "2025-11-13 18:45:40"


@pytest.mark.unit
def test_format_timestamp_relative():
    """Test compact relative formatting in both directions."""
    two_hours_ago = (datetime.now() - timedelta(hours=2, minutes=1)).isoformat()
    three_days_ahead = (datetime.now() + timedelta(days=3, hours=1)).isoformat()

    assert format_timestamp(two_hours_ago, relative=True) == "2h ago"
    assert format_timestamp(three_days_ahead, relative=True) == "3d from now"


@pytest.mark.unit
def test_format_timestamp_passes_through_garbage():
    """Test that unparseable input is returned unchanged."""
    assert format_timestamp("not a time") == "not a time"


@pytest.mark.unit
def test_now_has_seconds_precision():
    """Test the stored timestamp shape."""
    assert "." not in now()
    assert datetime.fromisoformat(now())


@pytest.mark.unit
def test_describe_span_picks_largest_unit():
    """Test unit selection at each boundary."""
    assert describe_span(timedelta(seconds=42)) == "42s ago"
    assert describe_span(timedelta(minutes=59, seconds=59)) == "59m ago"
    assert describe_span(timedelta(days=6, hours=23)) == "6d ago"
    assert describe_span(timedelta(days=15)) == "2w ago"
    assert describe_span(-timedelta(hours=5)) == "5h from now"

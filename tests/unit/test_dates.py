"""Unit tests for free-form date parsing."""

from datetime import date

import pytest

from optrack.utils.dates import month_number, parse_date, strip_ordinals


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ("2025-03-01", date(2025, 3, 1)),
        ("2025-03-01T09:30:00", date(2025, 3, 1)),
        ("3/1/2025", date(2025, 3, 1)),
        ("03/01/25", date(2025, 3, 1)),
        ("March 1, 2025", date(2025, 3, 1)),
        ("Mar 1 2025", date(2025, 3, 1)),
        ("March 1st, 2025", date(2025, 3, 1)),
        ("Sept. 22nd, 2025", date(2025, 9, 22)),
        ("1 March 2025", date(2025, 3, 1)),
        ("  March   3,\n 2025 ", date(2025, 3, 3)),
    ],
)
def test_parse_date_accepted_shapes(text, expected):
    """Test that every supported deadline shape parses to the same calendar day."""
    assert parse_date(text) == expected


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   ", "rolling", "ASAP", "2025-02-30", "13/45/2025", None])
def test_parse_date_rejects_unparseable(text):
    """Test that empty, free text, and impossible dates parse to None."""
    assert parse_date(text) is None


@pytest.mark.unit
def test_parse_date_passes_date_objects_through():
    """Test that an existing date is returned unchanged."""
    day = date(2024, 12, 31)
    assert parse_date(day) is day


@pytest.mark.unit
def test_strip_ordinals():
    """Test removing ordinal suffixes from day numbers only."""
    assert strip_ordinals("March 1st to March 22nd") == "March 1 to March 22"
    assert strip_ordinals("the 3rd cohort") == "the 3 cohort"
    assert strip_ordinals("first round") == "first round"


@pytest.mark.unit
def test_month_number():
    """Test full, abbreviated, and dotted month names."""
    assert month_number("January") == 1
    assert month_number("Sept.") == 9
    assert month_number("dec") == 12
    assert month_number("Smarch") is None

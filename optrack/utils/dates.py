"""
Tolerant date parsing for free-form deadline strings.

Deadlines are typed by hand or scraped from pages, so several shapes are accepted:
- ISO-like: 2025-03-01, 2025-03-01T09:00
- US slash: 3/1/2025, 03/01/25 (2-digit years are 2000+year)
- Month names: March 1st, 2025 / Mar 1 2025 / 1 March 2025 / Sept. 1, 2025

Ordinal suffixes ("1st", "22nd") are stripped before parsing. Anything else
parses to None, and callers treat None as "no deadline".
"""

import re
from datetime import date
from typing import Optional

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

MONTH_NAME_PATTERN = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

ORDINAL_SUFFIX = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)

ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")
US_SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})$")
MONTH_DAY_YEAR = re.compile(
    rf"^({MONTH_NAME_PATTERN})\.?\s+(\d{{1,2}}),?\s+(\d{{4}})$", re.IGNORECASE
)
DAY_MONTH_YEAR = re.compile(
    rf"^(\d{{1,2}})\s+({MONTH_NAME_PATTERN})\.?,?\s+(\d{{4}})$", re.IGNORECASE
)


def strip_ordinals(text: str) -> str:
    """Remove ordinal suffixes from day numbers ("March 1st" -> "March 1")."""
    return ORDINAL_SUFFIX.sub(r"\1", text)


def month_number(name: str) -> Optional[int]:
    """Map a full or abbreviated month name to its number."""
    return MONTHS.get(name.strip().rstrip(".")[:3].lower())


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value) -> Optional[date]:
    """
    Parse a free-form date string.

    Args:
        value: Date string, date object, or None

    Returns:
        Parsed date, or None when the value is empty or unparseable
    """
    if value is None:
        return None
    if isinstance(value, date):
        return value

    text = " ".join(str(value).split())
    if not text:
        return None

    match = ISO_DATE.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _safe_date(year, month, day)

    match = US_SLASH_DATE.match(text)
    if match:
        month, day, year = (int(g) for g in match.groups())
        if year < 100:
            year += 2000
        return _safe_date(year, month, day)

    text = strip_ordinals(text)

    match = MONTH_DAY_YEAR.match(text)
    if match:
        month = month_number(match.group(1))
        return _safe_date(int(match.group(3)), month, int(match.group(2)))

    match = DAY_MONTH_YEAR.match(text)
    if match:
        month = month_number(match.group(2))
        return _safe_date(int(match.group(3)), month, int(match.group(1)))

    return None

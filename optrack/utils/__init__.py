"""
Shared utilities for OPTRACK.

Common functionality used across contexts:
- Date parsing for free-form deadlines
- Timestamps
- Logger setup
- Configuration management
"""

from optrack.utils.dates import parse_date
from optrack.utils.timestamp import format_timestamp, now, today

__all__ = ["format_timestamp", "now", "parse_date", "today"]

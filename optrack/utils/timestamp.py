"""Clock helpers and human-readable rendering of stored timestamps."""

from datetime import date, datetime, timedelta

# Largest unit first; a span is shown in the first unit it fills
RELATIVE_UNITS = (
    ("w", timedelta(weeks=1)),
    ("d", timedelta(days=1)),
    ("h", timedelta(hours=1)),
    ("m", timedelta(minutes=1)),
)


def now() -> str:
    """Current local time as an ISO 8601 string (seconds precision)."""
    return datetime.now().isoformat(timespec="seconds")


def today() -> date:
    """Start of the current local day."""
    return date.today()


def format_timestamp(iso_timestamp: str, relative: bool = False) -> str:
    """
    Render a stored ISO 8601 timestamp for display.

    Args:
        iso_timestamp: Value as written by now() (fractional seconds are accepted)
        relative: Show the distance from the current time instead of the
            wall-clock value

    Returns:
        "2025-11-13 18:45:40", "2h ago", "3d from now", or the input unchanged
        when it is not a timestamp

    Examples:
        format_timestamp("2025-11-13T18:45:40.572549")
        # "2025-11-13 18:45:40"

        format_timestamp(now(), relative=True)
        # "0s ago"
    """
    try:
        moment = datetime.fromisoformat(iso_timestamp)
    except (ValueError, TypeError):
        return iso_timestamp

    if not relative:
        return moment.strftime("%Y-%m-%d %H:%M:%S")
    return describe_span(datetime.now() - moment)


def describe_span(span: timedelta) -> str:
    """Compact past-or-future form of a time difference (positive is past)."""
    suffix = "ago" if span >= timedelta(0) else "from now"
    span = abs(span)

    for unit, size in RELATIVE_UNITS:
        if span >= size:
            return f"{span // size}{unit} {suffix}"
    return f"{int(span.total_seconds())}s {suffix}"

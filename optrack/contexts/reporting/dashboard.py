"""
Dashboard aggregation over the current record list.

Every function here is pure apart from reading "today" when no date is given.
Deadlines are parsed with utils.dates.parse_date; records whose deadline does
not parse are left out of the date-based views (they still appear elsewhere
with the deadline shown verbatim).
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from optrack.contexts.targeting.eligibility import EligibilityAssessment, evaluate
from optrack.contexts.tracking.opportunity import STATUS_VALUES, Opportunity, Profile
from optrack.utils.dates import parse_date
from optrack.utils.timestamp import today as current_day

DUE_SOON_DAYS = 7
LIST_LIMIT = 6


@dataclass(frozen=True)
class DashboardSummary:
    total: int
    due_soon: int
    overdue: int
    high_priority: int
    open_count: int
    by_status: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RadarEntry:
    opportunity: Opportunity
    deadline: date
    days_left: int
    label: str


@dataclass(frozen=True)
class Dashboard:
    summary: DashboardSummary
    next_actions: List[Opportunity]
    watchlist: List[Opportunity]
    radar: List[RadarEntry]


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def deadline_label(days_left: int) -> str:
    """
    Human label for days until a deadline.

    Examples:
        >>> deadline_label(-1)
        'Overdue by 1 day'
        >>> deadline_label(0)
        'Due today'
        >>> deadline_label(3)
        'Due in 3 days'
    """
    if days_left < 0:
        return f"Overdue by {_plural(-days_left, 'day')}"
    if days_left == 0:
        return "Due today"
    return f"Due in {_plural(days_left, 'day')}"


def days_until(value, today: date) -> Optional[int]:
    """Whole days from today to a deadline, or None if it does not parse."""
    deadline = parse_date(value)
    if deadline is None:
        return None
    return (deadline - today).days


def is_due_soon(opportunity: Opportunity, today: date, window: int = DUE_SOON_DAYS) -> bool:
    days = days_until(opportunity.deadline, today)
    return days is not None and 0 <= days <= window


def is_overdue(opportunity: Opportunity, today: date) -> bool:
    days = days_until(opportunity.deadline, today)
    return days is not None and days < 0


def summarize(
    opportunities: Sequence[Opportunity],
    today: Optional[date] = None,
    due_soon_days: int = DUE_SOON_DAYS,
) -> DashboardSummary:
    """
    Headline counts.

    due soon: deadline within [today, today + due_soon_days]
    overdue: deadline strictly before today
    high priority: priority "High" (any case) among records not at Offer
    """
    today = today or current_day()
    by_status = Counter({status: 0 for status in STATUS_VALUES})
    by_status.update(opportunity.status for opportunity in opportunities)

    return DashboardSummary(
        total=len(opportunities),
        due_soon=sum(1 for o in opportunities if is_due_soon(o, today, due_soon_days)),
        overdue=sum(1 for o in opportunities if is_overdue(o, today)),
        high_priority=sum(
            1 for o in opportunities if o.is_open and o.priority.strip().lower() == "high"
        ),
        open_count=sum(1 for o in opportunities if o.is_open),
        by_status=dict(by_status),
    )


def next_actions(opportunities: Iterable[Opportunity], limit: int = LIST_LIMIT) -> List[Opportunity]:
    """Records with a next action, soonest action date first, undated last."""
    pending = [o for o in opportunities if o.next_action.strip()]

    def sort_key(opportunity: Opportunity):
        action_date = parse_date(opportunity.next_action_date)
        return (action_date is None, action_date or date.max)

    return sorted(pending, key=sort_key)[:limit]


def eligibility_watchlist(
    opportunities: Iterable[Opportunity],
    profile: Optional[Profile] = None,
    limit: int = LIST_LIMIT,
) -> List[Opportunity]:
    """
    Records whose assessment is "gap" or "review".

    When a profile is given, assessments are recomputed against it; otherwise
    each record's attached assessment is used (records without one are skipped).
    """
    watchlist = []
    for opportunity in opportunities:
        assessment: Optional[EligibilityAssessment]
        if profile is not None:
            assessment = evaluate(opportunity, profile)
        else:
            assessment = opportunity.assessment
        if assessment is not None and assessment.needs_attention:
            watchlist.append(opportunity)
    return watchlist[:limit]


def deadline_radar(
    opportunities: Iterable[Opportunity],
    today: Optional[date] = None,
    limit: int = LIST_LIMIT,
) -> List[RadarEntry]:
    """Records with a parseable deadline, soonest first, labeled relative to today."""
    today = today or current_day()
    entries = []
    for opportunity in opportunities:
        deadline = parse_date(opportunity.deadline)
        if deadline is None:
            continue
        days_left = (deadline - today).days
        entries.append(RadarEntry(opportunity, deadline, days_left, deadline_label(days_left)))

    entries.sort(key=lambda entry: entry.deadline)
    return entries[:limit]


def build_dashboard(
    opportunities: Sequence[Opportunity],
    profile: Optional[Profile] = None,
    today: Optional[date] = None,
    due_soon_days: int = DUE_SOON_DAYS,
    limit: int = LIST_LIMIT,
) -> Dashboard:
    """All dashboard views for one record list."""
    today = today or current_day()
    return Dashboard(
        summary=summarize(opportunities, today, due_soon_days),
        next_actions=next_actions(opportunities, limit),
        watchlist=eligibility_watchlist(opportunities, profile, limit),
        radar=deadline_radar(opportunities, today, limit),
    )

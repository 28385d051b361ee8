"""
CSV export of opportunity records.

Writes one row per record with the stored field layout plus the derived
eligibility status and summary, so the sheet matches what the dashboard shows.
"""

import csv
from pathlib import Path
from typing import Iterable

from optrack.contexts.tracking.opportunity import Opportunity

FIELDNAMES = [
    "id",
    "title",
    "organization",
    "organizationVerified",
    "opportunityType",
    "status",
    "priority",
    "deadline",
    "nextAction",
    "nextActionDate",
    "tags",
    "location",
    "remote",
    "programDates",
    "duration",
    "compensation",
    "eligibility",
    "materials",
    "contactEmail",
    "link",
    "applyLink",
    "source",
    "addedOn",
    "notes",
    "eligibilityStatus",
    "eligibilitySummary",
]


def opportunity_row(opportunity: Opportunity) -> dict:
    row = opportunity.to_dict()
    assessment = opportunity.assessment
    row["eligibilityStatus"] = assessment.status.value if assessment else ""
    row["eligibilitySummary"] = assessment.summary if assessment else ""
    return row


def export_csv(opportunities: Iterable[Opportunity], output_path: Path) -> int:
    """
    Write records to a CSV file.

    Args:
        opportunities: Records to export (in display order)
        output_path: Destination file (parent directories are created)

    Returns:
        Number of rows written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    rows = [opportunity_row(opportunity) for opportunity in opportunities]
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES, quoting=csv.QUOTE_ALL)
        writer.writeheader()
        writer.writerows(rows)

    return len(rows)

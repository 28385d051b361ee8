"""
Heuristic metadata extraction from fetched listing pages.

extract_metadata() runs a table of independent field rules over one parsed
page. Each rule takes a PageDocument and returns a string ("" when it finds
nothing). Rules never see each other's output, so each can be unit-tested in
isolation, and a rule that raises is logged and treated as "".

This module performs no I/O; fetching is fetcher.py's job.
"""

from typing import Callable, Dict, List, Tuple
from urllib.parse import urljoin

from optrack.contexts.intake.extraction_patterns import (
    ASSET_SUFFIXES,
    BODY_TYPE_KEYWORDS,
    MATERIAL_KEYWORDS,
    OG_TYPE_LEXICON,
    BodyPatterns,
)
from optrack.contexts.intake.logger import _log_debug, log_extraction_result
from optrack.contexts.intake.normalizer import clean_text
from optrack.contexts.intake.organization import extract_organization
from optrack.contexts.intake.page import PageDocument
from optrack.contexts.tracking.opportunity import normalize_url
from optrack.utils.dates import parse_date, strip_ordinals

FieldRule = Callable[[PageDocument], str]


def extract_title(page: PageDocument) -> str:
    """Open Graph title, falling back to <title>."""
    return page.meta("og:title") or page.title


def extract_opportunity_type(page: PageDocument) -> str:
    """
    Map og:type through the lexicon, else scan the body for type keywords.

    Keywords are checked in priority order; the first one present anywhere
    in the text decides the label.
    """
    og_type = page.meta("og:type").lower()
    for fragment, label in OG_TYPE_LEXICON:
        if fragment in og_type:
            if label:
                return label
            break

    text = page.condensed_text
    for pattern, label in BODY_TYPE_KEYWORDS:
        if pattern.search(text):
            return label
    return ""


def extract_location(page: PageDocument) -> str:
    """geo.placename meta, else a "based in" / "located in" phrase, title-cased."""
    placename = page.meta("geo.placename")
    if placename:
        return placename

    match = BodyPatterns.LOCATION_PHRASE.search(page.visible_text)
    if not match:
        return ""
    phrase = BodyPatterns.LOCATION_STOP_WORDS.sub("", match.group(1))
    phrase = phrase.rstrip(".'-")
    if phrase.lower().startswith("the "):
        phrase = phrase[4:]
    return " ".join(word[:1].upper() + word[1:].lower() for word in phrase.split())


def extract_remote(page: PageDocument) -> str:
    """Yes / Hybrid / No by first-priority keyword present."""
    text = page.condensed_text
    if "remote" in text:
        return "Yes"
    if "hybrid" in text:
        return "Hybrid"
    if "on-site" in text or "on site" in text or "onsite" in text:
        return "No"
    return ""


def extract_deadline(page: PageDocument) -> str:
    """
    Deadline after "deadline:", "apply by:", or "due:".

    Ordinal suffixes are always stripped, and parseable dates are returned
    as "Month D, YYYY".
    """
    match = BodyPatterns.DEADLINE.search(page.visible_text)
    if not match:
        return ""
    raw = strip_ordinals(match.group(1))
    parsed = parse_date(raw)
    if parsed is None:
        return raw
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def extract_program_dates(page: PageDocument) -> str:
    text = page.visible_text
    match = BodyPatterns.PROGRAM_DATES_LABEL.search(text)
    if match:
        return match.group(1).strip()
    match = BodyPatterns.PROGRAM_DATES_RANGE.search(text)
    if match:
        return strip_ordinals(match.group(1))
    return ""


def extract_duration(page: PageDocument) -> str:
    match = BodyPatterns.DURATION.search(page.visible_text)
    if not match:
        return ""
    count = int(match.group(1))
    unit = match.group(2).lower().rstrip("s")
    return f"{count} {unit}{'' if count == 1 else 's'}"


def extract_compensation(page: PageDocument) -> str:
    """Currency amount, else "Unpaid" / "Paid" from literal phrases."""
    text = page.visible_text
    match = BodyPatterns.COMPENSATION_AMOUNT.search(text)
    if match:
        return match.group(0).strip()
    if BodyPatterns.UNPAID.search(text):
        return "Unpaid"
    if BodyPatterns.PAID.search(text):
        return "Paid"
    return ""


def extract_eligibility(page: PageDocument) -> str:
    """Sentence after an "Eligibility:" label, else the student level mentioned."""
    text = page.visible_text
    match = BodyPatterns.ELIGIBILITY_LABEL.search(text)
    if match:
        captured = match.group(1)
        end = BodyPatterns.SENTENCE_END.search(captured)
        sentence = captured[: end.end()] if end else captured
        return sentence.strip()

    lowered = page.condensed_text
    if "high school" in lowered:
        return "High school students"
    if "undergraduate" in lowered:
        return "Undergraduate students"
    if BodyPatterns.GRADUATE.search(lowered):
        return "Graduate students"
    return ""


def extract_materials(page: PageDocument) -> str:
    text = page.condensed_text
    found = [
        label
        for label, literals in MATERIAL_KEYWORDS
        if any(literal in text for literal in literals)
    ]
    return ", ".join(found)


def extract_apply_link(page: PageDocument) -> str:
    """First anchor mentioning "apply", resolved against the source URL."""
    for anchor in page.anchors():
        href = anchor.get("href", "").strip()
        label = anchor.get_text(" ", strip=True).lower()
        if "apply" not in label and "apply" not in href.lower():
            continue
        resolved = normalize_url(urljoin(page.source_url, href) if page.source_url else href)
        if resolved:
            return resolved
    return ""


def extract_contact_email(page: PageDocument) -> str:
    for match in BodyPatterns.EMAIL.finditer(page.visible_text):
        email = match.group(0).rstrip(".")
        if not email.lower().endswith(ASSET_SUFFIXES):
            return email
    return ""


def extract_source(page: PageDocument) -> str:
    return page.hostname


# Field name → rule, in EXTRACTED_FIELDS order
FIELD_EXTRACTORS: List[Tuple[str, FieldRule]] = [
    ("title", extract_title),
    ("organization", extract_organization),
    ("opportunity_type", extract_opportunity_type),
    ("location", extract_location),
    ("remote", extract_remote),
    ("deadline", extract_deadline),
    ("program_dates", extract_program_dates),
    ("duration", extract_duration),
    ("compensation", extract_compensation),
    ("eligibility", extract_eligibility),
    ("materials", extract_materials),
    ("apply_link", extract_apply_link),
    ("contact_email", extract_contact_email),
    ("source", extract_source),
]


def run_rule(name: str, rule: FieldRule, page: PageDocument) -> str:
    """Run one rule; any failure is logged and becomes an empty field."""
    try:
        return clean_text(rule(page))
    except Exception as e:  # noqa: BLE001
        _log_debug(f"Rule '{name}' failed on {page.source_url}: {type(e).__name__}: {e}")
        return ""


def extract_metadata(html: str, source_url: str) -> Dict[str, str]:
    """
    Extract best-effort opportunity fields from page HTML.

    Args:
        html: Page HTML (already fetched)
        source_url: URL the page was fetched for

    Returns:
        Dict with every key in EXTRACTED_FIELDS; unmatched fields are ""
    """
    try:
        page = PageDocument(html, source_url)
    except Exception as e:  # noqa: BLE001
        _log_debug(f"Could not parse page for {source_url}: {type(e).__name__}: {e}")
        page = PageDocument("", source_url)

    fields = {name: run_rule(name, rule, page) for name, rule in FIELD_EXTRACTORS}

    log_extraction_result(source_url, fields)
    return fields

"""
Organization name detection for listing pages.

Listing pages rarely state the hiring organization in one reliable place, so
candidates are gathered from several hints and scored:

1. Meta tags (site name, application name, author, publisher, twitter handles)
2. The page title, split on "|" or on " at "
3. alt / aria-label text of logo-like elements
4. Names inside application/ld+json structured data
5. The registrable domain label (acme.org -> "Acme"), always last

Each candidate is cleaned, then scored (see score_candidate). The highest score
wins; ties go to the candidate seen first, so the result is deterministic.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

from optrack.contexts.intake.extraction_patterns import (
    JSON_LD_NAME_PATHS,
    LOGO_SELECTORS,
    LONG_CANDIDATE_LENGTH,
    MAX_CANDIDATE_LENGTH,
    ORGANIZATION_META_NAMES,
    SCORE_CORPORATE_SUFFIX,
    SCORE_DOMAIN_LABEL,
    SCORE_IN_PAGE_TEXT,
    SCORE_NOISE_WORD,
    SCORE_PROPER_NAME,
    SCORE_TOO_LONG,
    SECOND_LEVEL_SUFFIXES,
    OrganizationPatterns,
)
from optrack.contexts.intake.normalizer import clean_text
from optrack.contexts.intake.page import PageDocument


@dataclass(frozen=True)
class ScoredCandidate:
    name: str
    score: float
    origin: str


def domain_label(hostname: str) -> str:
    """
    Registrable label of a hostname.

    Examples:
        >>> domain_label("careers.acme.org")
        'acme'
        >>> domain_label("acme.co.uk")
        'acme'
    """
    labels = [label for label in (hostname or "").lower().split(".") if label]
    if labels and labels[0] == "www":
        labels = labels[1:]
    if len(labels) < 2:
        return labels[0] if labels else ""

    labels = labels[:-1]  # top-level domain
    if len(labels) >= 2 and labels[-1] in SECOND_LEVEL_SUFFIXES and len(hostname.split(".")[-1]) == 2:
        labels = labels[:-1]  # acme.co.uk
    return labels[-1]


def domain_fallback(hostname: str) -> str:
    """Capitalized domain label, used when no other candidate exists."""
    label = domain_label(hostname)
    return label[:1].upper() + label[1:] if label else ""


def clean_candidate(value) -> Optional[str]:
    """
    Normalize a raw candidate string.

    Collapses whitespace, removes decorative separators, and trims
    non-alphanumeric edges. Returns None for empty or over-long candidates.
    """
    if not isinstance(value, str):
        return None
    text = clean_text(value)
    text = OrganizationPatterns.INNER_SEPARATOR.sub(" ", text)
    text = OrganizationPatterns.EDGE_NOISE.sub("", text).strip()
    if not text or len(text) > MAX_CANDIDATE_LENGTH:
        return None
    return text


# =============================================================================
# CANDIDATE SOURCES
# =============================================================================


def meta_candidates(page: PageDocument) -> List[str]:
    candidates = []
    for name in ORGANIZATION_META_NAMES:
        value = page.meta(name)
        if value:
            candidates.append(value.lstrip("@"))
    return candidates


def title_candidates(title: str) -> List[str]:
    """
    Organization hints from a page title.

    "Research Intern | Acme Corp" gives both parts; "Data Intern at Acme Corp"
    gives the part after " at ". A title with neither gives nothing.
    """
    if not title:
        return []
    if "|" in title:
        return [part for part in title.split("|") if part.strip()]
    lowered = title.lower()
    if " at " in lowered:
        index = lowered.rindex(" at ")
        return [title[index + len(" at "):]]
    return []


def logo_candidates(page: PageDocument) -> List[str]:
    candidates = []
    for element in page.select(LOGO_SELECTORS):
        for attr in ("alt", "aria-label"):
            value = element.get(attr)
            if value:
                candidates.append(value)
        image = element.find("img") if element.name != "img" else None
        if image is not None and image.get("alt"):
            candidates.append(image["alt"])
    return candidates


def _dig(node: dict, path: tuple):
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def walk_json_ld(node) -> Iterator[str]:
    """Yield organization-like names from a structured-data tree, depth first."""
    if isinstance(node, list):
        for item in node:
            yield from walk_json_ld(item)
    elif isinstance(node, dict):
        for path in JSON_LD_NAME_PATHS:
            value = _dig(node, path)
            if isinstance(value, str):
                yield value
        for value in node.values():
            if isinstance(value, (dict, list)):
                yield from walk_json_ld(value)


def json_ld_candidates(page: PageDocument) -> List[str]:
    candidates = []
    for block in page.json_ld_blocks:
        candidates.extend(walk_json_ld(block))
    return candidates


def gather_candidates(page: PageDocument) -> List[tuple]:
    """
    Cleaned, de-duplicated (name, origin) pairs in first-seen order.

    Duplicates are detected case-insensitively.
    """
    sources = [
        ("meta", meta_candidates(page)),
        ("title", title_candidates(page.title)),
        ("logo", logo_candidates(page)),
        ("json-ld", json_ld_candidates(page)),
        ("domain", [domain_fallback(page.hostname)]),
    ]

    seen = set()
    candidates = []
    for origin, values in sources:
        for value in values:
            name = clean_candidate(value)
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            candidates.append((name, origin))
    return candidates


# =============================================================================
# SCORING
# =============================================================================


def score_candidate(name: str, core_label: str, page_text: str) -> float:
    """
    Score one organization candidate.

    +3   contains the domain label
    +2   looks like a multi-word proper name
    +1.5 contains a corporate or institutional suffix (Inc, University, ...)
    -4   contains portal or career noise (login, careers, apply, ...)
    +3   appears verbatim as a whole word in the page text
    -2   longer than 45 characters
    """
    score = 0.0
    lowered = name.lower()

    if core_label and core_label in re.sub(r"[^a-z0-9]", "", lowered):
        score += SCORE_DOMAIN_LABEL
    if OrganizationPatterns.PROPER_NAME.match(name):
        score += SCORE_PROPER_NAME
    if OrganizationPatterns.CORPORATE_SUFFIX.search(name):
        score += SCORE_CORPORATE_SUFFIX
    if OrganizationPatterns.NOISE_WORDS.search(name):
        score += SCORE_NOISE_WORD
    if page_text and re.search(rf"(?<!\w){re.escape(name)}(?!\w)", page_text):
        score += SCORE_IN_PAGE_TEXT
    if len(name) > LONG_CANDIDATE_LENGTH:
        score += SCORE_TOO_LONG

    return score


def rank_candidates(page: PageDocument) -> List[ScoredCandidate]:
    """All candidates with scores, best first (ties keep first-seen order)."""
    core_label = domain_label(page.hostname)
    scored = [
        ScoredCandidate(name, score_candidate(name, core_label, page.visible_text), origin)
        for name, origin in gather_candidates(page)
    ]
    # sorted() is stable, so equal scores keep gathering order
    return sorted(scored, key=lambda candidate: -candidate.score)


def extract_organization(page: PageDocument) -> str:
    """Best organization name for the page, or the domain fallback."""
    ranked = rank_candidates(page)
    if ranked:
        return ranked[0].name
    return domain_fallback(page.hostname)

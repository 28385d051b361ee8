"""
Reusable patterns and constants for listing-page metadata extraction.

Pattern classes follow one convention:
- Dataclasses with frozen=True for immutability
- Class-level compiled patterns
- Helper functions in metadata_extractor.py / organization.py use these patterns

All body-text patterns run on unicode-normalized, whitespace-collapsed text
(see normalizer.py), so dashes and quotes are plain ASCII here.
"""

import re
from dataclasses import dataclass

from optrack.utils.dates import MONTH_NAME_PATTERN

# =============================================================================
# FIELD DEFINITIONS
# =============================================================================

# Every key returned by extract_metadata(), in extraction order
EXTRACTED_FIELDS = [
    "title",
    "organization",
    "opportunity_type",
    "location",
    "remote",
    "deadline",
    "program_dates",
    "duration",
    "compensation",
    "eligibility",
    "materials",
    "apply_link",
    "contact_email",
    "source",
]

# =============================================================================
# META TAGS AND SELECTORS
# =============================================================================

ORGANIZATION_META_NAMES = (
    "og:site_name",
    "application-name",
    "author",
    "publisher",
    "twitter:site",
    "twitter:creator",
)

LOGO_SELECTORS = "[class*=logo], [id*=logo], header img, img[alt*=logo i]"

# Paths inside ld+json objects that name an organization
JSON_LD_NAME_PATHS = (
    ("name",),
    ("publisher", "name"),
    ("publisher", "organization", "name"),
    ("brand", "name"),
)

# =============================================================================
# OPPORTUNITY TYPE LEXICONS
# =============================================================================

# og:type substring → label ("" means no opinion, fall through to body scan)
OG_TYPE_LEXICON = (
    ("intern", "Internship"),
    ("fellow", "Fellowship"),
    ("scholar", "Scholarship"),
    ("job", "Job"),
    ("event", "Event"),
    ("article", ""),
)

# Ordered body-text keywords; the first pattern found anywhere wins
BODY_TYPE_KEYWORDS = (
    (re.compile(r"\binternship"), "Internship"),
    (re.compile(r"\bfellowship"), "Fellowship"),
    (re.compile(r"\b(?:scholarship|grant)"), "Scholarship"),
    (re.compile(r"\bapprenticeship"), "Apprenticeship"),
    (re.compile(r"\b(?:bootcamp|program)"), "Program"),
    (re.compile(r"\b(?:competition|challenge)"), "Competition"),
    (re.compile(r"\b(?:conference|summit)"), "Conference"),
    (re.compile(r"\b(?:job|opening|position)"), "Job"),
)

# =============================================================================
# MATERIALS
# =============================================================================

# (label, lowercase literals that indicate it)
MATERIAL_KEYWORDS = (
    ("Resume", ("resume", "résumé", "curriculum vitae")),
    ("Cover letter", ("cover letter",)),
    ("Transcript", ("transcript",)),
    ("Recommendation letter", ("recommendation",)),
)

# =============================================================================
# ORGANIZATION SCORING
# =============================================================================


@dataclass(frozen=True)
class OrganizationPatterns:
    """Patterns used to clean and score organization name candidates."""

    # Separators surrounded by spaces inside a candidate: "Acme · Careers"
    INNER_SEPARATOR: re.Pattern = re.compile(r"\s+[|·•»«:/-]+\s+")

    # Non-alphanumeric characters at either edge
    EDGE_NOISE: re.Pattern = re.compile(r"^[\W_]+|[\W_]+$")

    # Two or more words, each capitalized (or numeric / ampersand)
    PROPER_NAME: re.Pattern = re.compile(r"^[A-Z0-9][\w&'.-]*(?:\s+(?:[A-Z0-9&][\w&'.-]*|of|and|for|the))+$")

    CORPORATE_SUFFIX: re.Pattern = re.compile(
        r"\b(?:inc|llc|ltd|corp|corporation|company|co|group|plc|gmbh|university|college|"
        r"institute|foundation|association|society|labs?|school|academy|council|agency|"
        r"fund|trust|technologies)\b",
        re.IGNORECASE,
    )

    NOISE_WORDS: re.Pattern = re.compile(
        r"\b(?:log\s?in|sign\s?in|sign\s?up|portal|careers?|jobs?|apply|account|dashboard|home)\b",
        re.IGNORECASE,
    )


MAX_CANDIDATE_LENGTH = 80
LONG_CANDIDATE_LENGTH = 45

# Score weights
SCORE_DOMAIN_LABEL = 3.0
SCORE_PROPER_NAME = 2.0
SCORE_CORPORATE_SUFFIX = 1.5
SCORE_NOISE_WORD = -4.0
SCORE_IN_PAGE_TEXT = 3.0
SCORE_TOO_LONG = -2.0

# Second-level labels that sit under a country-code TLD (acme.co.uk)
SECOND_LEVEL_SUFFIXES = {"co", "com", "ac", "edu", "org", "gov", "net"}

# =============================================================================
# BODY TEXT PATTERNS
# =============================================================================


@dataclass(frozen=True)
class BodyPatterns:
    """
    Regex patterns applied to the visible page text.
    """

    # "based in New York City." / "located in Austin, TX"
    LOCATION_PHRASE: re.Pattern = re.compile(
        r"\b(?:based|located) in ((?:the )?[A-Za-z][A-Za-z.'-]*(?: [A-Za-z][A-Za-z.'-]*){0,3})",
        re.IGNORECASE,
    )

    # Words that end a captured location phrase
    LOCATION_STOP_WORDS: re.Pattern = re.compile(
        r"\s+(?:and|with|for|from|where|who|that|or|to|since|as|on|at)\b.*$", re.IGNORECASE
    )

    DEADLINE: re.Pattern = re.compile(
        rf"\b(?:deadline|apply by|due)\s*:?\s*({MONTH_NAME_PATTERN}\.?\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}})",
        re.IGNORECASE,
    )

    # Stops at the first 4-digit year when there is one; block boundaries are
    # lost once page text is collapsed
    PROGRAM_DATES_LABEL: re.Pattern = re.compile(
        r"\b(?:program )?dates?\s*:\s*([^.;|]{3,80}?\b\d{4}\b|[^.;|]{3,80})", re.IGNORECASE
    )

    PROGRAM_DATES_RANGE: re.Pattern = re.compile(
        rf"({MONTH_NAME_PATTERN}\.?\s+\d{{1,2}}(?:st|nd|rd|th)?\s*(?:-{{1,2}}|to|through|until)\s*"
        rf"(?:{MONTH_NAME_PATTERN}\.?\s+)?\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}})",
        re.IGNORECASE,
    )

    DURATION: re.Pattern = re.compile(r"\b(\d{1,2})[\s-]+(weeks?|months?)\b", re.IGNORECASE)

    COMPENSATION_AMOUNT: re.Pattern = re.compile(
        r"[$£€]\s?\d[\d,]*(?:\.\d{2})?(?:\s?[kK])?"
        r"(?:\s*(?:-{1,2}|to)\s*[$£€]?\s?\d[\d,]*(?:\.\d{2})?(?:\s?[kK])?)?"
        r"(?:\s*(?:/|per)\s*(?:hour|hr|week|wk|month|mo|year|yr|annum))?",
        re.IGNORECASE,
    )
    UNPAID: re.Pattern = re.compile(r"\bunpaid\b", re.IGNORECASE)
    PAID: re.Pattern = re.compile(
        r"\bpaid (?:position|internship|role|fellowship)\b|\bstipend\b", re.IGNORECASE
    )

    # "Eligibility: ..." / "Eligibility requirements: ..." / "Who is eligible: ..."
    ELIGIBILITY_LABEL: re.Pattern = re.compile(
        r"\beligib(?:ility|le)[\w ]{0,30}:\s*(.{3,300})", re.IGNORECASE
    )
    SENTENCE_END: re.Pattern = re.compile(r"[.!?](?=\s+[A-Z]|\s*$)")

    GRADUATE: re.Pattern = re.compile(r"(?<!under)graduate", re.IGNORECASE)

    EMAIL: re.Pattern = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")


# Email-shaped strings that are really asset names (logo@2x.png)
ASSET_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")

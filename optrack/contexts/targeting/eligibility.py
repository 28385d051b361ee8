"""
Heuristic eligibility assessment of an opportunity against the user profile.

The assessment is a pure function of (opportunity.eligibility,
opportunity.tags, profile). It is recomputed whenever records or the profile
change and is never read back from storage.

Rules, each evaluated independently against the lowercased eligibility text:
- Education level (high school / undergraduate / graduate)
- Citizenship
- Minimum GPA
- Requirement keywords from a closed vocabulary (see keywords.py)
- Tag bonus: opportunity tags that also appear in the profile

A rule that cannot be evaluated (missing profile value, unparseable GPA)
simply does not fire.
"""

import dataclasses
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set, Tuple

from optrack.contexts.targeting.keywords import detect_keywords, normalize_token, tokenize_list
from optrack.contexts.tracking.opportunity import Opportunity, Profile


class EligibilityStatus(str, Enum):
    UNKNOWN = "unknown"
    STRONG = "strong"
    GAP = "gap"
    REVIEW = "review"


SUMMARY_NO_PROFILE = "Add profile details for personalized checks"
SUMMARY_NO_REQUIREMENTS = "No eligibility requirements listed"
SUMMARY_STRONG = "Likely eligible"
SUMMARY_GAP = "Eligibility gaps detected"
SUMMARY_NO_EVIDENCE = "Needs manual review"
SUMMARY_PARTIAL = "Partially eligible - address gaps"
DETAIL_STRONG = "Your profile covers every requirement detected in the listing."


@dataclass(frozen=True)
class EligibilityAssessment:
    """Derived eligibility judgment for one opportunity."""

    status: EligibilityStatus
    summary: str
    matches: Tuple[str, ...] = field(default_factory=tuple)
    gaps: Tuple[str, ...] = field(default_factory=tuple)
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "summary": self.summary,
            "matches": list(self.matches),
            "gaps": list(self.gaps),
            "detail": self.detail,
        }

    @property
    def needs_attention(self) -> bool:
        return self.status in (EligibilityStatus.GAP, EligibilityStatus.REVIEW)


@dataclass(frozen=True)
class EligibilityPatterns:
    """Regex patterns used by the eligibility rules (applied to lowercased text)."""

    UNDERGRADUATE: re.Pattern = re.compile(r"undergraduate|bachelor")
    GRADUATE: re.Pattern = re.compile(r"(?<!under)graduate|master|ph\.?d")

    LEVEL_UNDERGRADUATE: re.Pattern = re.compile(r"undergrad|bachelor|professional")
    LEVEL_GRADUATE: re.Pattern = re.compile(r"(?<!under)graduate|master|ph\.?d|professional")

    CITIZENSHIP_MENTION: re.Pattern = re.compile(r"citizen|permanent resident")
    US_CITIZEN: re.Pattern = re.compile(
        r"\bu\.?\s?s\.?a?\.?\s+citizen|united states citizen|american citizen"
    )
    US_PROFILE: re.Pattern = re.compile(r"\bu\.?\s?s\.?a?\b|united states|american")

    GPA_MENTION: re.Pattern = re.compile(r"gpa")
    NUMBER: re.Pattern = re.compile(r"\d+(?:\.\d+)?")


def profile_keywords(profile: Profile) -> Set[str]:
    """
    Build the profile keyword set used for requirement matching.

    Skills, courses, majors, and resume highlights are split on commas,
    semicolons, and newlines. Each lowercase token is included along with its
    alphanumeric-only variant.
    """
    keywords = set()
    for token in tokenize_list(
        [profile.skills, profile.courses, profile.majors, profile.resume_highlights]
    ):
        keywords.add(token)
        normalized = normalize_token(token)
        if normalized:
            keywords.add(normalized)
    return keywords


def dedupe(items: Iterable[str]) -> Tuple[str, ...]:
    """Drop repeated entries, keeping the first occurrence."""
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return tuple(seen)


# =============================================================================
# RULES
# =============================================================================
# Each rule returns (matches, gaps) for one requirement family.


def _education_rule(text: str, profile: Profile) -> Tuple[List[str], List[str]]:
    matches, gaps = [], []
    level = profile.education_level.lower()

    if "high school" in text:
        if "high school" in level:
            matches.append("Education level fits high school requirement")
        else:
            gaps.append("Requires high school standing")

    if EligibilityPatterns.UNDERGRADUATE.search(text):
        if EligibilityPatterns.LEVEL_UNDERGRADUATE.search(level):
            matches.append("Undergraduate requirement satisfied")
        else:
            gaps.append("Requires undergraduate enrollment")

    if EligibilityPatterns.GRADUATE.search(text):
        if EligibilityPatterns.LEVEL_GRADUATE.search(level):
            matches.append("Graduate-level requirement satisfied")
        else:
            gaps.append("Requires graduate-level enrollment")

    return matches, gaps


def _citizenship_rule(text: str, profile: Profile) -> Tuple[List[str], List[str]]:
    citizenship = profile.citizenship.strip()
    if not EligibilityPatterns.CITIZENSHIP_MENTION.search(text) or not citizenship:
        return [], []

    verbatim = citizenship.lower() in text
    both_us = bool(
        EligibilityPatterns.US_CITIZEN.search(text)
        and EligibilityPatterns.US_PROFILE.search(citizenship.lower())
    )
    if verbatim or both_us:
        return ["Citizenship requirement satisfied"], []
    return [], [f"Citizenship requirement may not match ({citizenship or 'unspecified'})"]


def _parse_gpa(value: str) -> Optional[float]:
    match = EligibilityPatterns.NUMBER.search(value or "")
    if not match:
        return None
    return float(match.group(0))


def _required_gpa(text: str) -> Optional[float]:
    """First number after "gpa" on a GPA scale; years and counts are skipped."""
    mention = EligibilityPatterns.GPA_MENTION.search(text)
    if not mention:
        return None
    for number in EligibilityPatterns.NUMBER.finditer(text, mention.end()):
        value = float(number.group(0))
        if value < 10:
            return value
    return None


def _gpa_rule(text: str, profile: Profile) -> Tuple[List[str], List[str]]:
    if "gpa" not in text or not profile.gpa:
        return [], []

    required = _required_gpa(text)
    actual = _parse_gpa(profile.gpa)
    if required is None or actual is None:
        return [], []

    if actual >= required:
        return [f"GPA {actual:.2f} ≥ {required:.2f}"], []
    return [], [f"GPA {actual:.2f} < {required:.2f}"]


def _keyword_rule(
    text: str, opportunity: Opportunity, keywords: Set[str]
) -> Tuple[List[str], List[str]]:
    matches, gaps = [], []
    combined = f"{text} {opportunity.tags.lower()}"
    for keyword in detect_keywords(combined):
        if keyword in keywords:
            matches.append(f"Has {keyword}")
        else:
            gaps.append(f"Add experience or coursework in {keyword}")
    return matches, gaps


def _tag_rule(opportunity: Opportunity, keywords: Set[str]) -> List[str]:
    return [
        f"Tag match: {tag}"
        for tag in opportunity.tag_list()
        if tag in keywords or normalize_token(tag) in keywords
    ]


# =============================================================================
# PUBLIC API
# =============================================================================


def evaluate(opportunity: Opportunity, profile: Profile) -> EligibilityAssessment:
    """
    Assess whether a profile likely satisfies an opportunity's requirements.

    Args:
        opportunity: Record whose eligibility text and tags are checked
        profile: The signed-in user's profile

    Returns:
        EligibilityAssessment with de-duplicated matches and gaps

    Example:
        >>> opp = Opportunity(eligibility="Must know Python and SQL")
        >>> evaluate(opp, Profile(skills="python, excel")).status
        <EligibilityStatus.REVIEW: 'review'>
    """
    if profile is None or profile.is_empty():
        return EligibilityAssessment(EligibilityStatus.UNKNOWN, SUMMARY_NO_PROFILE)

    text = (opportunity.eligibility or "").strip().lower()
    if not text:
        return EligibilityAssessment(EligibilityStatus.UNKNOWN, SUMMARY_NO_REQUIREMENTS)

    keywords = profile_keywords(profile)
    matches: List[str] = []
    gaps: List[str] = []

    for rule_matches, rule_gaps in (
        _education_rule(text, profile),
        _citizenship_rule(text, profile),
        _gpa_rule(text, profile),
        _keyword_rule(text, opportunity, keywords),
    ):
        matches.extend(rule_matches)
        gaps.extend(rule_gaps)
    matches.extend(_tag_rule(opportunity, keywords))

    status, summary = EligibilityStatus.STRONG, SUMMARY_STRONG
    if gaps:
        status, summary = EligibilityStatus.GAP, SUMMARY_GAP
    if not gaps and not matches:
        status, summary = EligibilityStatus.REVIEW, SUMMARY_NO_EVIDENCE
    if gaps and matches:
        status, summary = EligibilityStatus.REVIEW, SUMMARY_PARTIAL

    detail = DETAIL_STRONG if status == EligibilityStatus.STRONG else ""

    return EligibilityAssessment(
        status=status,
        summary=summary,
        matches=dedupe(matches),
        gaps=dedupe(gaps),
        detail=detail,
    )


def assess(opportunity: Opportunity, profile: Profile) -> Opportunity:
    """Return a copy of the record carrying a freshly computed assessment."""
    return dataclasses.replace(opportunity, assessment=evaluate(opportunity, profile))


def assess_all(opportunities: Iterable[Opportunity], profile: Profile) -> List[Opportunity]:
    return [assess(opportunity, profile) for opportunity in opportunities]

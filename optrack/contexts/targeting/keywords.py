"""
Closed vocabulary of requirement keywords detected in eligibility text.

Only these terms are treated as skill/coursework requirements; anything else in
the eligibility text is left to the education, citizenship, and GPA rules.

Detection is stricter than plain substring search. A term must start and end
on a token boundary, so "java" is not found inside "javascript". The
single-letter "r" also needs a language cue ("R programming", "R/Python",
"R, Python") before it counts.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List

PROGRAMMING_KEYWORDS = (
    "python",
    "java",
    "javascript",
    "typescript",
    "c++",
    "c#",
    "sql",
    "r",
    "matlab",
    "html",
    "css",
    "react",
    "node",
    "git",
)

DATA_AND_CLOUD_KEYWORDS = (
    "machine learning",
    "deep learning",
    "artificial intelligence",
    "data analysis",
    "data science",
    "statistics",
    "tensorflow",
    "pytorch",
    "aws",
    "azure",
    "gcp",
    "cloud",
    "excel",
    "tableau",
)

ACADEMIC_KEYWORDS = (
    "computer science",
    "engineering",
    "mathematics",
    "physics",
    "chemistry",
    "biology",
    "economics",
    "research",
)

BUSINESS_KEYWORDS = (
    "finance",
    "accounting",
    "marketing",
    "business",
    "design",
    "leadership",
    "communication",
)

REQUIREMENT_KEYWORDS = (
    PROGRAMMING_KEYWORDS + DATA_AND_CLOUD_KEYWORDS + ACADEMIC_KEYWORDS + BUSINESS_KEYWORDS
)


@dataclass(frozen=True)
class KeywordPatterns:
    """Compiled patterns for requirement keyword detection."""

    # Profile lists are comma, semicolon, or newline separated
    LIST_SEPARATOR: re.Pattern = re.compile(r"[,;\n]+")

    NON_ALPHANUMERIC: re.Pattern = re.compile(r"[^a-z0-9]+")


def _keyword_pattern(keyword: str) -> re.Pattern:
    # Symbols like "c++" and "c#" end in non-word characters, so bound by
    # "not a letter/digit" instead of \b on both sides.
    return re.compile(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])")


_KEYWORD_PATTERNS = [(keyword, _keyword_pattern(keyword)) for keyword in REQUIREMENT_KEYWORDS]


def detect_keywords(text: str) -> List[str]:
    """
    Find vocabulary keywords in text, in vocabulary order.

    Single-letter keywords ("r") only count when written as a standalone token
    followed by a language cue, to avoid matching stray initials.

    Examples:
        >>> detect_keywords("Must know Python and SQL")
        ['python', 'sql']
    """
    lowered = (text or "").lower()
    found = []
    for keyword, pattern in _KEYWORD_PATTERNS:
        if keyword == "r":
            if re.search(r"(?<![a-z0-9])r(?:\s+programming|\s+language|\s*/|\s*,\s*python)", lowered):
                found.append(keyword)
            continue
        if pattern.search(lowered):
            found.append(keyword)
    return found


def normalize_token(token: str) -> str:
    """Alphanumeric-only lowercase variant of a token ("C++" -> "c")."""
    return KeywordPatterns.NON_ALPHANUMERIC.sub("", token.lower())


def tokenize_list(values: Iterable[str]) -> List[str]:
    """Split free-text list fields into lowercase tokens."""
    tokens = []
    for value in values:
        for raw in KeywordPatterns.LIST_SEPARATOR.split(value or ""):
            token = raw.strip().lower()
            if token:
                tokens.append(token)
    return tokens

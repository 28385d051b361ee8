"""
Text normalization for scraped page content.

Page text arrives with non-breaking spaces, smart quotes, zero-width characters,
and layout whitespace. Normalize BEFORE running extraction patterns so the
patterns can stay ASCII-simple.
"""

import re
import unicodedata

# Unicode replacements: problematic char → ASCII equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    # Zero-width characters → remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM / zero-width no-break space
    # Quotes
    "\u2018": "'",  # left single quote
    "\u2019": "'",  # right single quote
    "\u201c": '"',  # left double quote
    "\u201d": '"',  # right double quote
    # Dashes
    "\u2013": "-",  # en dash
    "\u2014": "--",  # em dash
    # Bullets and misc
    "\u2026": "...",  # ellipsis
}

WHITESPACE = re.compile(r"\s+")


def normalize_unicode(text: str) -> str:
    """
    Normalize unicode characters that cause matching issues.

    Applies NFKC normalization and replaces common problematic characters
    with ASCII equivalents.
    """
    text = unicodedata.normalize("NFKC", text)

    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)

    return text


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines) to single spaces."""
    return WHITESPACE.sub(" ", text or "").strip()


def clean_text(text: str) -> str:
    """Unicode-normalize and whitespace-collapse a scraped string."""
    if not text:
        return ""
    return collapse_whitespace(normalize_unicode(str(text)))

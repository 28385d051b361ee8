"""
Parsed listing page with the lookups the extraction rules need.

PageDocument wraps BeautifulSoup so individual rules never deal with parser
details: meta tag lookup, visible text, structured-data blocks, anchors, and
the source hostname are each one attribute away.
"""

import json
from functools import cached_property
from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment

from optrack.contexts.intake.logger import _log_debug
from optrack.contexts.intake.normalizer import clean_text

# Elements whose text never renders in the page body
NON_VISIBLE_TAGS = {"script", "style", "noscript", "template", "head", "title", "meta", "svg"}


class PageDocument:
    """
    One fetched listing page.

    Args:
        html: Page HTML as returned by the read proxy
        source_url: URL the user asked to fetch (used for hostname and link resolution)
    """

    def __init__(self, html: str, source_url: str = ""):
        self.html = html if isinstance(html, str) else str(html or "")
        self.source_url = (source_url or "").strip()
        self.soup = BeautifulSoup(self.html, "html.parser")

    # =========================================================================
    # META AND TITLE
    # =========================================================================

    def meta(self, *names: str) -> str:
        """
        Content of the first non-empty meta tag matching any name.

        Matches on the `property`, `name`, or `itemprop` attribute
        (case-insensitive), trying names in the order given.
        """
        for wanted in names:
            wanted = wanted.lower()
            for tag in self.soup.find_all("meta"):
                for attr in ("property", "name", "itemprop"):
                    value = tag.get(attr)
                    if value and value.strip().lower() == wanted:
                        content = clean_text(tag.get("content", ""))
                        if content:
                            return content
        return ""

    @cached_property
    def title(self) -> str:
        """Text of the document <title> (empty when absent)."""
        tag = self.soup.find("title")
        return clean_text(tag.get_text()) if tag else ""

    # =========================================================================
    # TEXT
    # =========================================================================

    @cached_property
    def visible_text(self) -> str:
        """Rendered body text, unicode-normalized and whitespace-collapsed."""
        root = self.soup.body or self.soup
        pieces = []
        for node in root.find_all(string=True):
            if isinstance(node, Comment):
                continue
            if any(parent.name in NON_VISIBLE_TAGS for parent in node.parents):
                continue
            pieces.append(str(node))
        return clean_text(" ".join(pieces))

    @cached_property
    def condensed_text(self) -> str:
        """Lowercase visible text, for keyword presence checks."""
        return self.visible_text.lower()

    # =========================================================================
    # STRUCTURE
    # =========================================================================

    @cached_property
    def json_ld_blocks(self) -> List[object]:
        """Parsed application/ld+json blocks (malformed blocks are skipped)."""
        blocks = []
        for script in self.soup.find_all("script"):
            if (script.get("type") or "").strip().lower() != "application/ld+json":
                continue
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                blocks.append(json.loads(raw))
            except json.JSONDecodeError as e:
                _log_debug(f"Skipping malformed ld+json block: {e}")
        return blocks

    def anchors(self):
        """All <a> elements that carry an href."""
        return self.soup.find_all("a", href=True)

    def select(self, selector: str):
        """CSS selection over the whole page."""
        return self.soup.select(selector)

    # =========================================================================
    # SOURCE URL
    # =========================================================================

    @cached_property
    def hostname(self) -> str:
        """Lowercase hostname of the source URL, without a leading www."""
        return source_hostname(self.source_url)


def source_hostname(url: Optional[str]) -> str:
    """
    Hostname of a URL with a leading "www." stripped.

    Examples:
        >>> source_hostname("https://www.acme.org/jobs/1")
        'acme.org'
    """
    if not url:
        return ""
    text = url.strip()
    if "://" not in text:
        text = f"https://{text}"
    try:
        host = (urlparse(text).hostname or "").lower()
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host

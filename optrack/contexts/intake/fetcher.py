"""
Listing page fetching through a public read proxy.

The proxy renders the target page and returns its HTML:

    GET {proxy_base}/{target_url}    Accept: text/html

Any transport error or non-2xx response is a total failure; there is no
partial extraction and no retry. The caller shows one notice and leaves the
form for manual entry.

Only one fetch may be outstanding per MetadataFetcher. Each fetch takes a
ticket with a generation number; cancel() bumps the generation so a result
that arrives after cancellation is reported as stale and never applied.

Usage:
    fetcher = MetadataFetcher(proxy_base="https://r.jina.ai")
    outcome = fetch_and_merge(fetcher, "https://acme.org/internship", form={})
    outcome.form["title"]
"""

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import requests

from optrack.contexts.intake.exceptions import FetchInProgressError, MetadataFetchError
from optrack.contexts.intake.logger import _log_info, _log_warning
from optrack.contexts.intake.merge import filled_fields, merge_fields
from optrack.contexts.intake.metadata_extractor import extract_metadata
from optrack.contexts.tracking.opportunity import normalize_url

DEFAULT_PROXY_BASE = "https://r.jina.ai"
DEFAULT_TIMEOUT = 20.0

REQUEST_HEADERS = {
    "Accept": "text/html",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/123.0.0.0 Safari/537.36"
    ),
}

NOTICE_FETCHING = "Fetching details..."
NOTICE_FAILED = "Could not fetch details automatically. Please fill in the fields manually."
NOTICE_INVALID_URL = "Enter a valid http(s) link to fetch details."
NOTICE_BUSY = "Already fetching details; wait for the current fetch to finish."
NOTICE_NOTHING_FOUND = "No new details found; please fill in the remaining fields manually."


@dataclass(frozen=True)
class FetchTicket:
    generation: int
    url: str


@dataclass
class FetchResult:
    url: str
    fields: Dict[str, str]
    current: bool = True


@dataclass
class MergeOutcome:
    """Result of fetching a page and applying it to a form."""

    form: Dict[str, object]
    filled: List[str] = field(default_factory=list)
    notice: str = ""
    ok: bool = True


class MetadataFetcher:
    """
    Fetches listing pages through the read proxy and extracts their fields.

    Args:
        proxy_base: Proxy URL prefix (the target URL is appended after "/")
        timeout: Request timeout in seconds
        session: Optional requests.Session (tests pass a stub)
    """

    def __init__(
        self,
        proxy_base: str = DEFAULT_PROXY_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.proxy_base = proxy_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(REQUEST_HEADERS)

        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[FetchTicket] = None

    # =========================================================================
    # IN-FLIGHT BOOKKEEPING
    # =========================================================================

    @property
    def in_flight(self) -> bool:
        return self._pending is not None

    def begin(self, url: str) -> FetchTicket:
        """
        Reserve the fetcher for one request.

        Raises:
            FetchInProgressError: If another fetch has not finished
        """
        with self._lock:
            if self._pending is not None:
                raise FetchInProgressError(url, self._pending.url)
            self._generation += 1
            self._pending = FetchTicket(self._generation, url)
            return self._pending

    def finish(self, ticket: FetchTicket) -> bool:
        """Release the fetcher. Returns True if the ticket is still current."""
        with self._lock:
            if self._pending == ticket:
                self._pending = None
            return ticket.generation == self._generation

    def cancel(self) -> None:
        """Abandon the outstanding fetch; its result will come back stale."""
        with self._lock:
            self._generation += 1
            self._pending = None

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.generation == self._generation

    # =========================================================================
    # FETCHING
    # =========================================================================

    def proxy_url(self, target_url: str) -> str:
        return f"{self.proxy_base}/{target_url}"

    def fetch_html(self, url: str) -> str:
        """
        Fetch the rendered HTML of a page through the proxy.

        Raises:
            MetadataFetchError: On transport failure or a non-2xx response
        """
        try:
            response = self.session.get(self.proxy_url(url), timeout=self.timeout)
        except requests.RequestException as e:
            raise MetadataFetchError("Request to read proxy failed", url, original_error=e) from e

        if not 200 <= response.status_code < 300:
            raise MetadataFetchError(
                "Read proxy returned an error status", url, status_code=response.status_code
            )
        return response.text

    def fetch_metadata(self, url: str) -> FetchResult:
        """
        Fetch a page and extract its fields.

        Raises:
            FetchInProgressError: If another fetch is outstanding
            MetadataFetchError: If the page could not be fetched
        """
        ticket = self.begin(url)
        try:
            html = self.fetch_html(url)
        finally:
            current = self.finish(ticket)

        fields = extract_metadata(html, url)
        return FetchResult(url=url, fields=fields, current=current)


def fetch_and_merge(
    fetcher: MetadataFetcher, url: str, form: Optional[Mapping[str, object]] = None
) -> MergeOutcome:
    """
    Fetch a listing and fill the blank fields of a form from it.

    Never raises for fetch problems: failures leave the form untouched and
    return a single notice inviting manual entry.

    Args:
        fetcher: MetadataFetcher to use
        url: Listing URL typed by the user
        form: Current form values (Opportunity attribute names)

    Returns:
        MergeOutcome with the merged form, filled field names, and a notice
    """
    form = dict(form or {})
    target = normalize_url(url)
    if not target:
        return MergeOutcome(form=form, notice=NOTICE_INVALID_URL, ok=False)

    _log_info(f"{NOTICE_FETCHING} {target}")
    try:
        result = fetcher.fetch_metadata(target)
    except FetchInProgressError as e:
        _log_warning(str(e))
        return MergeOutcome(form=form, notice=NOTICE_BUSY, ok=False)
    except MetadataFetchError as e:
        _log_warning(f"Metadata fetch failed for {target}: {e.message} (status: {e.status_code})")
        return MergeOutcome(form=form, notice=NOTICE_FAILED, ok=False)

    if not result.current:
        _log_warning(f"Discarding stale fetch result for {target}")
        return MergeOutcome(form=form, ok=False)

    proposed = {**result.fields, "link": target}
    filled = filled_fields(form, proposed)
    merged = merge_fields(form, proposed)

    notice = f"Filled {len(filled)} field(s) from the page." if filled else NOTICE_NOTHING_FOUND
    return MergeOutcome(form=merged, filled=filled, notice=notice)

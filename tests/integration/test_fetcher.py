"""
Integration tests for fetching listings through the read proxy.
Tests: proxy URL layout, success and failure merges, and in-flight/stale handling.
The network is replaced by a stub session.
"""

from pathlib import Path

import pytest
import requests

from optrack.contexts.intake.exceptions import FetchInProgressError, MetadataFetchError
from optrack.contexts.intake.fetcher import (
    NOTICE_BUSY,
    NOTICE_FAILED,
    NOTICE_INVALID_URL,
    NOTICE_NOTHING_FOUND,
    MetadataFetcher,
    fetch_and_merge,
)

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"


class StubResponse:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text


class StubSession:
    """Records requests and replays a canned response or error."""

    def __init__(self, response=None, error=None, on_get=None):
        self.headers = {}
        self.calls = []
        self.response = response
        self.error = error
        self.on_get = on_get

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.on_get is not None:
            self.on_get()
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def listing_html():
    return (FIXTURES_PATH / "acme_internship.html").read_text(encoding="utf-8")


@pytest.mark.integration
def test_request_goes_through_proxy(listing_html):
    """Test the proxy URL, timeout, and Accept header."""
    stub = StubSession(StubResponse(200, listing_html))
    fetcher = MetadataFetcher(proxy_base="https://r.jina.ai/", timeout=5, session=stub)

    result = fetcher.fetch_metadata("https://careers.acme.org/jobs/42")

    assert stub.calls == [("https://r.jina.ai/https://careers.acme.org/jobs/42", 5)]
    assert stub.headers["Accept"] == "text/html"
    assert result.current
    assert result.fields["organization"] == "Acme Corp"
    assert not fetcher.in_flight


@pytest.mark.integration
def test_fetch_and_merge_fills_only_blank_fields(listing_html):
    """Test that extraction fills blanks and keeps typed values."""
    fetcher = MetadataFetcher(session=StubSession(StubResponse(200, listing_html)))
    form = {"title": "My own title", "priority": "High", "organization": ""}

    outcome = fetch_and_merge(fetcher, "careers.acme.org/jobs/42", form)

    assert outcome.ok
    assert outcome.form["title"] == "My own title"
    assert outcome.form["priority"] == "High"
    assert outcome.form["organization"] == "Acme Corp"
    assert outcome.form["deadline"] == "March 1, 2025"
    assert outcome.form["link"] == "https://careers.acme.org/jobs/42"
    assert "title" not in outcome.filled
    assert "organization" in outcome.filled
    assert outcome.notice == f"Filled {len(outcome.filled)} field(s) from the page."
    assert form["organization"] == ""


@pytest.mark.integration
def test_server_error_leaves_form_untouched():
    """Test a non-2xx proxy response."""
    fetcher = MetadataFetcher(session=StubSession(StubResponse(500, "oops")))
    form = {"title": "Typed", "link": ""}

    outcome = fetch_and_merge(fetcher, "https://acme.org/jobs/1", form)

    assert not outcome.ok
    assert outcome.form == form
    assert outcome.notice == NOTICE_FAILED
    assert not fetcher.in_flight


@pytest.mark.integration
def test_transport_error_leaves_form_untouched():
    """Test a connection failure."""
    stub = StubSession(error=requests.ConnectionError("no route"))
    fetcher = MetadataFetcher(session=stub)

    outcome = fetch_and_merge(fetcher, "https://acme.org/jobs/1", {"title": ""})

    assert outcome.form == {"title": ""}
    assert outcome.notice == NOTICE_FAILED
    assert outcome.filled == []


@pytest.mark.integration
def test_fetch_html_error_details():
    """Test the error raised for a failing status."""
    fetcher = MetadataFetcher(session=StubSession(StubResponse(404)))

    with pytest.raises(MetadataFetchError) as excinfo:
        fetcher.fetch_html("https://acme.org/gone")

    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "https://acme.org/gone"


@pytest.mark.integration
def test_invalid_url_is_not_fetched():
    """Test that non-http links are rejected before any request."""
    stub = StubSession(StubResponse(200, "<html></html>"))
    outcome = fetch_and_merge(MetadataFetcher(session=stub), "mailto:jobs@acme.org", {})

    assert outcome.notice == NOTICE_INVALID_URL
    assert stub.calls == []


@pytest.mark.integration
def test_page_with_nothing_new():
    """Test the notice when every proposal is blank or already filled."""
    stub = StubSession(StubResponse(200, "<html><body></body></html>"))
    form = {"organization": "Acme", "source": "acme.org"}

    outcome = fetch_and_merge(MetadataFetcher(session=stub), "https://acme.org", form)

    assert outcome.ok
    assert outcome.filled == ["link"]

    outcome = fetch_and_merge(
        MetadataFetcher(session=stub), "https://acme.org", {**form, "link": "https://acme.org"}
    )
    assert outcome.filled == []
    assert outcome.notice == NOTICE_NOTHING_FOUND


@pytest.mark.integration
def test_second_fetch_while_in_flight_is_rejected():
    """Test that only one fetch may be outstanding."""
    fetcher = MetadataFetcher(session=StubSession(StubResponse(200, "")))
    ticket = fetcher.begin("https://acme.org/a")

    with pytest.raises(FetchInProgressError):
        fetcher.begin("https://acme.org/b")

    outcome = fetch_and_merge(fetcher, "https://acme.org/b", {"title": "Typed"})
    assert outcome.notice == NOTICE_BUSY
    assert outcome.form == {"title": "Typed"}

    assert fetcher.finish(ticket)
    assert not fetcher.in_flight


@pytest.mark.integration
def test_cancelled_fetch_result_is_discarded(listing_html):
    """Test that a result arriving after cancel() is never applied."""
    fetcher = MetadataFetcher()
    fetcher.session = StubSession(StubResponse(200, listing_html), on_get=fetcher.cancel)

    outcome = fetch_and_merge(fetcher, "https://careers.acme.org/jobs/42", {"title": ""})

    assert not outcome.ok
    assert outcome.form == {"title": ""}
    assert outcome.filled == []
    assert not fetcher.in_flight


@pytest.mark.integration
def test_stale_ticket_is_not_current():
    """Test generation bookkeeping directly."""
    fetcher = MetadataFetcher(session=StubSession())
    old = fetcher.begin("https://acme.org/a")
    fetcher.cancel()
    new = fetcher.begin("https://acme.org/b")

    assert not fetcher.finish(old)
    assert fetcher.in_flight
    assert fetcher.is_current(new)
    assert fetcher.finish(new)

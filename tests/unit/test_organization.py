"""Unit tests for organization name detection and scoring."""

import pytest

from optrack.contexts.intake.organization import (
    clean_candidate,
    domain_fallback,
    domain_label,
    extract_organization,
    gather_candidates,
    rank_candidates,
    score_candidate,
    title_candidates,
)
from optrack.contexts.intake.page import PageDocument


@pytest.mark.unit
@pytest.mark.parametrize(
    "hostname, expected",
    [
        ("acme.org", "acme"),
        ("careers.acme.org", "acme"),
        ("www.acme.com", "acme"),
        ("acme.co.uk", "acme"),
        ("jobs.acme.ac.jp", "acme"),
        ("localhost", "localhost"),
        ("", ""),
    ],
)
def test_domain_label(hostname, expected):
    """Test registrable label extraction, including country-code second levels."""
    assert domain_label(hostname) == expected


@pytest.mark.unit
def test_domain_fallback_capitalizes():
    """Test the domain fallback name."""
    assert domain_fallback("careers.acme.org") == "Acme"
    assert domain_fallback("") == ""


@pytest.mark.unit
def test_clean_candidate():
    """Test separator and edge-noise cleanup."""
    assert clean_candidate("  Acme · Careers  ") == "Acme Careers"
    assert clean_candidate("@acme_labs!") == "acme_labs"
    assert clean_candidate("---") is None
    assert clean_candidate("x" * 81) is None
    assert clean_candidate(None) is None


@pytest.mark.unit
def test_title_candidates():
    """Test pipe splitting, the " at " rule, and plain titles."""
    assert title_candidates("Research Intern | Acme Corp") == ["Research Intern ", " Acme Corp"]
    assert title_candidates("Data Intern at Acme Corp") == ["Acme Corp"]
    assert title_candidates("Summer Fellowship") == []
    assert title_candidates("") == []


@pytest.mark.unit
def test_score_candidate_weights():
    """Test each scoring term on the worked example."""
    page_text = "Acme Corp is hiring research interns. Join Acme Corp this summer."

    assert score_candidate("Acme Corp", "acme", page_text) == pytest.approx(9.5)
    # +3 domain, +2 proper name, -4 careers noise
    assert score_candidate("Acme Careers", "acme", page_text) == pytest.approx(1.0)
    # +3 domain, +3 whole word in page text
    assert score_candidate("Acme", "acme", page_text) == pytest.approx(6.0)


@pytest.mark.unit
def test_score_candidate_penalizes_long_names():
    """Test the long-candidate penalty."""
    name = "The International Association for Undergraduate Research Excellence"
    assert len(name) > 45
    # +2 proper name, +1.5 association, -2 long
    assert score_candidate(name, "acme", "") == pytest.approx(1.5)


@pytest.mark.unit
def test_score_requires_whole_word_page_match():
    """Test that a page-text hit must not be part of a longer word."""
    assert score_candidate("Acme", "", "AcmeSoft builds tools") == 0.0


@pytest.mark.unit
def test_extract_organization_worked_example():
    """Test that the best-scoring candidate wins over site name and domain."""
    html = """
    <html><head>
      <title>Research Intern | Acme Corp</title>
      <meta property="og:site_name" content="Acme Careers">
    </head><body><p>Acme Corp is hiring.</p></body></html>
    """
    page = PageDocument(html, "https://acme.org/jobs/1")
    ranked = rank_candidates(page)

    assert extract_organization(page) == "Acme Corp"
    assert ranked[0].score == pytest.approx(9.5)
    assert ranked[0].origin == "title"


@pytest.mark.unit
def test_gather_candidates_dedupes_case_insensitively():
    """Test de-duplication across sources with the domain label last."""
    html = """
    <html><head>
      <meta name="application-name" content="ACME">
      <meta name="twitter:site" content="@acme">
      <script type="application/ld+json">{"publisher": {"name": "Acme Labs"}}</script>
    </head><body></body></html>
    """
    candidates = gather_candidates(PageDocument(html, "https://acme.io"))

    assert candidates == [("ACME", "meta"), ("Acme Labs", "json-ld")]


@pytest.mark.unit
def test_ties_keep_first_seen_order():
    """Test deterministic tie-breaking."""
    html = """
    <html><head>
      <meta property="og:site_name" content="Northwind">
      <meta name="author" content="Contoso">
    </head><body></body></html>
    """
    page = PageDocument(html)

    assert [c.score for c in rank_candidates(page)] == [0.0, 0.0]
    assert extract_organization(page) == "Northwind"

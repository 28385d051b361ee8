"""
OPTRACK - Opportunity Tracking, Profiling, and Readiness Assessment Core Kit

A domain-driven tracker for internship, scholarship, and job leads that
auto-fills listings from fetched pages and scores them against a profile.

Architecture:
- Intake Context: Page fetching and heuristic metadata extraction
- Tracking Context: Opportunity records, profiles, and persistence
- Targeting Context: Eligibility assessment against the user profile
- Reporting Context: Dashboard aggregation (deadlines, next actions, watchlists)
"""

__version__ = "0.1.0"

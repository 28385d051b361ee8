"""
Reporting Context

Responsibilities:
- Summarizes the current record list (counts, urgency buckets)
- Builds the next-actions list, eligibility watchlist, and deadline radar

Owns: Read-only dashboard views
Never: Mutates records or touches storage
"""

"""
Intake Context

Responsibilities:
- Fetches listing pages through the read proxy
- Extracts best-effort opportunity fields from page HTML
- Merges extracted fields onto a form without overwriting user input

Owns: HTML metadata heuristics, fetch bookkeeping
Never: Persists records or scores eligibility
"""

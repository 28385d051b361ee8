"""
Targeting Context

Responsibilities:
- Compares an opportunity's stated eligibility against the user's profile
- Produces a qualitative assessment with human-readable matches and gaps

Owns: Eligibility rules and the requirement keyword vocabulary
Never: Persists data or fetches pages
"""

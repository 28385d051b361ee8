"""
Tracking Context

Responsibilities:
- Defines the Opportunity and Profile records
- Persists per-user record lists and profiles in a key-value store
- Applies pure state updates (add, edit, delete, clear, profile save)

Owns: Record model, persistence namespacing, application state
Never: Fetches pages or decides eligibility
"""

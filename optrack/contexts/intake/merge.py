"""
Fill-if-empty merge of extracted fields onto a form.

Extraction only proposes values. Anything the user already typed wins; a
proposed value is used only where the current value is blank and the proposal
itself is non-empty.
"""

from typing import Dict, List, Mapping


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def merge_fields(current: Mapping[str, object], proposed: Mapping[str, str]) -> Dict[str, object]:
    """
    Merge proposed values into a copy of the current form.

    Examples:
        >>> merge_fields({"title": "Mine", "location": ""}, {"title": "Page", "location": "Austin"})
        {'title': 'Mine', 'location': 'Austin'}
    """
    merged = dict(current)
    for key, value in proposed.items():
        if _is_blank(merged.get(key)) and not _is_blank(value):
            merged[key] = value
    return merged


def filled_fields(current: Mapping[str, object], proposed: Mapping[str, str]) -> List[str]:
    """Names of the fields merge_fields() would fill."""
    return [
        key
        for key, value in proposed.items()
        if _is_blank(current.get(key)) and not _is_blank(value)
    ]

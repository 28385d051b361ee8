"""
Record data structures for the Tracking context.

Provides the Opportunity record (one tracked lead), the Profile record (the
user's free-text academic and skills description), and UserIdentity (the
opaque signed-in account used to namespace storage).

Records serialize to camelCase JSON objects, one array per user under the
storage key layout in storage.py. The derived eligibility assessment is
never serialized; it is recomputed from the stored fields plus the profile.
"""

import dataclasses
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import urlparse

from optrack.utils.timestamp import now, today

if TYPE_CHECKING:
    from optrack.contexts.targeting.eligibility import EligibilityAssessment


class OpportunityStatus(str, Enum):
    """Workflow status of an opportunity."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    SUBMITTED = "Submitted"
    INTERVIEW = "Interview"
    OFFER = "Offer"


STATUS_VALUES = [status.value for status in OpportunityStatus]
PRIORITY_VALUES = ["High", "Medium", "Low"]
REMOTE_VALUES = ["Yes", "No", "Hybrid", ""]


def normalize_url(value: Optional[str]) -> str:
    """
    Normalize a user- or page-supplied link to an absolute http(s) URL.

    Empty input stays empty, a missing scheme gets https://, and anything that
    is not http(s) with a host becomes empty.

    Examples:
        >>> normalize_url("example.org/apply")
        'https://example.org/apply'
        >>> normalize_url("mailto:hr@example.org")
        ''
    """
    if not value:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    if "://" not in text and not text.lower().startswith(("mailto:", "javascript:", "tel:")):
        text = f"https://{text.lstrip('/')}"

    parsed = urlparse(text)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return ""
    if " " in parsed.netloc:
        return ""
    return text


def coerce_status(value: Optional[str]) -> str:
    """Map a stored status onto a known workflow status (case-insensitive)."""
    text = (value or "").strip().lower()
    for status in STATUS_VALUES:
        if status.lower() == text:
            return status
    return OpportunityStatus.NOT_STARTED.value


TRUE_FLAG_VALUES = ("true", "yes", "1")


def coerce_flag(value) -> bool:
    """Read a stored or typed flag; strings count as True only for true/yes/1."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_FLAG_VALUES
    return bool(value)


def split_tags(tags: Optional[str]) -> List[str]:
    """Split comma-separated tags into a lowercase, de-duplicated list."""
    seen = []
    for raw in (tags or "").split(","):
        tag = raw.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _new_id() -> str:
    return uuid.uuid4().hex


# Python attribute name -> storage key (only where they differ)
OPPORTUNITY_STORAGE_KEYS = {
    "organization_verified": "organizationVerified",
    "opportunity_type": "opportunityType",
    "program_dates": "programDates",
    "contact_email": "contactEmail",
    "apply_link": "applyLink",
    "added_on": "addedOn",
    "next_action": "nextAction",
    "next_action_date": "nextActionDate",
}

PROFILE_STORAGE_KEYS = {
    "education_level": "educationLevel",
    "grad_year": "gradYear",
    "resume_highlights": "resumeHighlights",
    "last_updated": "lastUpdated",
}

# Fields of the previous record layout that are derived and never trusted from storage
DERIVED_STORAGE_KEYS = {"assessment", "eligibilityStatus", "eligibilityAssessment"}


def _to_storage(record, key_map: Dict[str, str], skip: tuple = ()) -> Dict[str, Any]:
    data = {}
    for f in dataclasses.fields(record):
        if f.name in skip:
            continue
        data[key_map.get(f.name, f.name)] = getattr(record, f.name)
    return data


def _from_storage(cls, data: Dict[str, Any], key_map: Dict[str, str], skip: tuple = ()) -> dict:
    kwargs = {}
    for f in dataclasses.fields(cls):
        if f.name in skip:
            continue
        key = key_map.get(f.name, f.name)
        if key in data:
            kwargs[f.name] = data[key]
        elif f.name in data:
            kwargs[f.name] = data[f.name]
    return kwargs


@dataclass
class Opportunity:
    """
    One tracked internship, scholarship, or job lead.

    Factory methods:
        create(**fields) - New record with a generated id and today's date
        from_dict(data) - Rebuild from a stored JSON object
    """

    id: str = field(default_factory=_new_id)
    title: str = ""
    organization: str = ""
    organization_verified: bool = False
    opportunity_type: str = ""
    tags: str = ""
    location: str = ""
    remote: str = ""
    program_dates: str = ""
    duration: str = ""
    compensation: str = ""
    eligibility: str = ""
    materials: str = ""
    contact_email: str = ""
    source: str = ""
    notes: str = ""

    link: str = ""
    apply_link: str = ""

    added_on: str = field(default_factory=lambda: today().isoformat())
    deadline: str = ""
    next_action: str = ""
    next_action_date: str = ""

    status: str = OpportunityStatus.NOT_STARTED.value
    priority: str = "Medium"

    # Derived, never persisted
    assessment: Optional["EligibilityAssessment"] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self):
        for f in dataclasses.fields(self):
            if f.type == "str" or f.type is str:
                value = getattr(self, f.name)
                setattr(self, f.name, "" if value is None else str(value).strip())
        self.organization_verified = coerce_flag(self.organization_verified)
        self.link = normalize_url(self.link)
        self.apply_link = normalize_url(self.apply_link)
        self.status = coerce_status(self.status)
        if not self.id:
            self.id = _new_id()

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def create(cls, **fields) -> "Opportunity":
        """Create a new record with a fresh id (any supplied id is ignored)."""
        fields.pop("id", None)
        fields.pop("assessment", None)
        if not fields.get("added_on"):
            fields["added_on"] = today().isoformat()
        return cls(**fields)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Opportunity":
        """
        Rebuild a record from its stored JSON object.

        Unknown keys and previously stored derived fields are ignored; missing
        keys take their defaults.
        """
        cleaned = {k: v for k, v in data.items() if k not in DERIVED_STORAGE_KEYS}
        kwargs = _from_storage(cls, cleaned, OPPORTUNITY_STORAGE_KEYS, skip=("assessment",))
        return cls(**kwargs)

    # =========================================================================
    # PUBLIC API METHODS
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored JSON layout (assessment stripped)."""
        return _to_storage(self, OPPORTUNITY_STORAGE_KEYS, skip=("assessment",))

    def tag_list(self) -> List[str]:
        return split_tags(self.tags)

    def with_updates(self, **fields) -> "Opportunity":
        """
        Return an edited copy. The id is stable and cannot be replaced.

        The copy carries no assessment; it is stale once fields change.
        """
        fields.pop("id", None)
        unknown = set(fields) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ValueError(f"Unknown opportunity fields: {sorted(unknown)}")
        fields.setdefault("assessment", None)
        return dataclasses.replace(self, **fields)

    @property
    def is_open(self) -> bool:
        return self.status != OpportunityStatus.OFFER.value


@dataclass
class Profile:
    """The signed-in user's free-text academic and skills description."""

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    school: str = ""
    education_level: str = ""
    grad_year: str = ""
    gpa: str = ""
    citizenship: str = ""
    majors: str = ""
    skills: str = ""
    courses: str = ""
    resume_highlights: str = ""
    last_updated: str = ""

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            setattr(self, f.name, "" if value is None else str(value).strip())

    def is_empty(self) -> bool:
        """True when no descriptive field has content (lastUpdated does not count)."""
        return not any(
            getattr(self, f.name) for f in dataclasses.fields(self) if f.name != "last_updated"
        )

    def touch(self) -> "Profile":
        """Return a copy stamped with the current time."""
        return dataclasses.replace(self, last_updated=now())

    def with_updates(self, **fields) -> "Profile":
        unknown = set(fields) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        return dataclasses.replace(self, **fields)

    def to_dict(self) -> Dict[str, Any]:
        return _to_storage(self, PROFILE_STORAGE_KEYS)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        return cls(**_from_storage(cls, data, PROFILE_STORAGE_KEYS))


@dataclass(frozen=True)
class UserIdentity:
    """Minimal identity produced by a sign-in provider."""

    id: str
    name: str = ""
    email: str = ""
    provider: str = ""
    avatar: str = ""

    def to_dict(self) -> Dict[str, str]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserIdentity":
        if not data.get("id"):
            raise ValueError("User identity requires an id")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            provider=str(data.get("provider") or ""),
            avatar=str(data.get("avatar") or ""),
        )
